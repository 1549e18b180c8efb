"""
Factory for creating service instances and the wizard controller.
"""

from colorinsight.controller import SEARCH_MODES, WizardController
from colorinsight.services.gemini_service import GeminiService
from colorinsight.services.pdf_service import PDFService
from colorinsight.services.report_service import ReportService
from colorinsight.utils.config import config


def create_controller(search_mode=None):
    """
    Factory to create a wizard controller wired to Gemini.

    Args:
        search_mode: "grounded" or "simulated"; defaults to the configured mode

    Returns:
        WizardController instance
    """
    search_mode = (search_mode or config.search_mode).lower()
    if search_mode not in SEARCH_MODES:
        raise ValueError(f"Unsupported search mode: {search_mode}")

    if not config.google_ai_api_key:
        raise ValueError("GOOGLE_AI_API_KEY not found in environment")

    ai_service = GeminiService(
        config.google_ai_api_key,
        config.google_ai_model,
        config.google_ai_image_model,
        archetypes=config.archetypes,
    )

    return WizardController(
        ai_service=ai_service,
        pdf_service=PDFService(),
        report_service=ReportService(font_path=config.report_font),
        search_mode=search_mode,
        max_upload_bytes=config.max_upload_bytes,
        show_landing=config.show_landing,
        progress_delay=config.progress_delay,
    )
