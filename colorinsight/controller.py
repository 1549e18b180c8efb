"""
Wizard controller: owns the session and runs each external step.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError
from typing import Optional

from colorinsight import wizard
from colorinsight.models.session import AnalysisReport, UploadedFile, WizardSession, WizardState
from colorinsight.services.ai_service import AIService
from colorinsight.services.pdf_service import PDFService
from colorinsight.services.report_service import ReportService
from colorinsight.utils.logger import logger

SEARCH_MODES = ("grounded", "simulated")

SIMULATED_PROGRESS = (
    "Analyzing Pantone color forecast reports...",
    "Cross-referencing market data on Behance/Pinterest...",
)


class WizardController:
    """Drives the wizard from upload to exported report."""

    def __init__(
        self,
        ai_service: AIService,
        pdf_service: PDFService,
        report_service: ReportService,
        search_mode: str = "grounded",
        max_upload_bytes: Optional[int] = None,
        show_landing: bool = False,
        progress_delay: float = 0.0,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Initialize the wizard controller.

        Args:
            ai_service: AI service used for extraction, search, generation and images
            pdf_service: Service extracting text from uploaded reports
            report_service: Service exporting the final report
            search_mode: "grounded" runs a real market search step, "simulated" skips it
            max_upload_bytes: Upload size cap, None disables the check
            show_landing: Whether the wizard starts on the landing view
            progress_delay: Seconds between simulated progress messages
            executor: Executor for preview-image generation
        """
        if search_mode not in SEARCH_MODES:
            raise ValueError(f"Unsupported search mode: {search_mode}")

        self.ai_service = ai_service
        self.pdf_service = pdf_service
        self.report_service = report_service
        self.search_mode = search_mode
        self.max_upload_bytes = max_upload_bytes
        self.progress_delay = progress_delay
        self.session = wizard.initial_session(show_landing)

        self._lock = threading.Lock()
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="preview")
        self._preview_future: Optional[Future] = None
        # Bumped on reset so late preview results from an old session are dropped
        self._epoch = 0

    def _apply(self, transition, *args) -> WizardSession:
        with self._lock:
            self.session = transition(self.session, *args)
            return self.session

    def start(self) -> WizardSession:
        return self._apply(wizard.leave_landing)

    def upload(self, upload: UploadedFile) -> WizardSession:
        """
        Validate an uploaded report, extract its text and its requirements.

        Args:
            upload: The file selected by the user

        Returns:
            The session, in CONFIRM_REQUIREMENTS on success or UPLOAD with an error
        """
        session = self._apply(wizard.select_file, upload, self.max_upload_bytes)
        if session.state != WizardState.ANALYZING_DOC:
            logger.warning(f"Upload rejected for {upload.filename}: {session.error}")
            return session

        logger.info(f"Analyzing document {upload.filename} ({upload.size} bytes)")
        try:
            text = self.pdf_service.extract_text(upload.data)
            self._apply(wizard.set_progress, "Identifying color requirements with Gemini AI...")
            extraction = self.ai_service.extract_requirements(text)
        except Exception as e:
            logger.error(f"Error analyzing document {upload.filename}: {e}")
            return self._apply(wizard.document_failed, str(e))

        return self._apply(wizard.document_analyzed, extraction)

    def reupload(self) -> WizardSession:
        return self._apply(wizard.reupload)

    def confirm_requirements(self) -> WizardSession:
        """
        Run the step after the user confirms the requirements.

        In grounded mode this is the market search; in simulated mode the
        search is skipped and schemes are generated straight away.
        """
        session = self._apply(wizard.start_search, "AI Agent searching global design trends...")
        if session.state != WizardState.SEARCHING:
            return session

        if self.search_mode == "simulated":
            for message in SIMULATED_PROGRESS:
                if self.progress_delay:
                    time.sleep(self.progress_delay)
                self._apply(wizard.set_progress, message)
            return self._generate(WizardState.CONFIRM_REQUIREMENTS, search_result=None)

        try:
            result = self.ai_service.market_search(list(session.requirements))
        except Exception as e:
            logger.error(f"Error in market search: {e}")
            return self._apply(wizard.search_failed, str(e))

        return self._apply(wizard.search_completed, result)

    def continue_to_generation(self) -> WizardSession:
        """Generate schemes using the reviewed search results."""
        session = self._apply(wizard.start_generation, "Generating and scoring color schemes...")
        return self._generate(WizardState.VIEW_SEARCH_RESULTS, search_result=session.search_result)

    def _generate(self, fallback: WizardState, search_result) -> WizardSession:
        try:
            schemes = self.ai_service.generate_schemes(list(self.session.requirements), search_result)
            return self._apply(wizard.schemes_generated, schemes)
        except Exception as e:
            logger.error(f"Error generating color schemes: {e}")
            return self._apply(wizard.generation_failed, str(e), fallback)

    def view_result(self, generate_preview: bool = True) -> WizardSession:
        """Show the result view and start the preview image in the background."""
        self._apply(wizard.view_result)
        if generate_preview:
            self.request_preview()
        return self.session

    def request_preview(self) -> bool:
        """
        Dispatch preview-image generation for the best scheme.

        Returns:
            True if a new generation was started, False if one is in flight
            or a preview already exists
        """
        with self._lock:
            if not wizard.needs_preview(self.session):
                return False
            self.session = wizard.preview_started(self.session)
            scheme = self.session.best_scheme
            requirements = list(self.session.requirements)
            epoch = self._epoch

        self._preview_future = self._executor.submit(self._run_preview, epoch, scheme, requirements)
        return True

    def _run_preview(self, epoch, scheme, requirements) -> Optional[str]:
        try:
            data_uri = self.ai_service.generate_preview_image(scheme, requirements)
        except Exception as e:
            logger.error(f"Error generating preview image: {e}")
            self._apply_if_current(epoch, wizard.preview_failed, str(e))
            return None

        self._apply_if_current(epoch, wizard.preview_ready, data_uri)
        return data_uri

    def _apply_if_current(self, epoch, transition, *args):
        with self._lock:
            if epoch != self._epoch:
                logger.info("Discarding preview result from a previous session")
                return
            self.session = transition(self.session, *args)

    def wait_for_preview(self, timeout: Optional[float] = None) -> WizardSession:
        """Block until the in-flight preview finishes or ``timeout`` seconds pass."""
        future = self._preview_future
        if future is not None:
            try:
                future.result(timeout=timeout)
            except TimeoutError:
                logger.warning("Preview image still generating")
        return self.session

    def export_report(self, output_dir, strategy: str = "structured") -> WizardSession:
        """
        Export the current result to PDF.

        Failures are recorded on the session; the wizard stays on the result view.
        """
        self._apply(wizard.export_started)
        try:
            report = AnalysisReport.from_session(self.session)
            path = self.report_service.export(report, output_dir, strategy)
        except Exception as e:
            logger.error(f"Error exporting report: {e}")
            return self._apply(wizard.export_failed, str(e))

        return self._apply(wizard.export_finished, str(path))

    def reset(self) -> WizardSession:
        with self._lock:
            self._epoch += 1
            self._preview_future = None
            self.session = wizard.reset(self.session)
            return self.session

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
