"""
Tests for the command line interface.
"""

import pytest
from unittest.mock import MagicMock, patch
from typer.testing import CliRunner

from colorinsight.controller import WizardController
from colorinsight.errors import AIResponseError
from colorinsight.main import app
from colorinsight.services.ai_service import AIService
from colorinsight.services.pdf_service import PDFService
from colorinsight.services.report_service import ReportService

runner = CliRunner()

PREVIEW_URI = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture
def report_pdf(tmp_path):
    """Fixture providing a report file on disk."""
    path = tmp_path / "positioning.pdf"
    path.write_bytes(b"%PDF-1.4")
    return path


@pytest.fixture
def mock_services(sample_extraction, sample_search_result, sample_schemes, tmp_path):
    """Fixture providing mocked AI, PDF and report services."""
    ai_service = MagicMock(spec=AIService)
    ai_service.extract_requirements.return_value = sample_extraction
    ai_service.market_search.return_value = sample_search_result
    ai_service.generate_schemes.return_value = sample_schemes
    ai_service.generate_preview_image.return_value = PREVIEW_URI

    pdf_service = MagicMock(spec=PDFService)
    pdf_service.extract_text.return_value = "[Page 1] text\n"

    report_service = MagicMock(spec=ReportService)
    report_service.export.return_value = tmp_path / "Acme_Residences_Color_Strategy.pdf"
    return ai_service, pdf_service, report_service


@pytest.fixture
def controller_factory(mock_services):
    """Fixture patching the controller factory used by the CLI."""
    ai_service, pdf_service, report_service = mock_services

    def factory(search_mode=None):
        return WizardController(ai_service, pdf_service, report_service, search_mode=search_mode or "grounded")

    with patch("colorinsight.main.create_controller", side_effect=factory) as mock_factory:
        yield mock_factory


class TestScoreCommand:
    """Tests for the score command."""

    def test_reference_score(self):
        result = runner.invoke(app, ["score", "8", "7", "6", "5", "9"])

        assert result.exit_code == 0
        assert result.output.strip() == "7.00"

    def test_out_of_range(self):
        result = runner.invoke(app, ["score", "11", "7", "6", "5", "9"])
        assert result.exit_code != 0


class TestRunCommand:
    """Tests for the run command."""

    def test_full_run(self, controller_factory, mock_services, report_pdf, tmp_path):
        ai_service, _, report_service = mock_services
        output_dir = tmp_path / "reports"

        result = runner.invoke(app, ["run", str(report_pdf), "--yes", "--output-dir", str(output_dir)])

        assert result.exit_code == 0, result.output
        assert "Report saved to" in result.output
        ai_service.market_search.assert_called_once()
        report, export_dir, strategy = report_service.export.call_args[0]
        assert report.best_scheme.id == "2"
        assert report.preview_image == PREVIEW_URI
        assert export_dir == output_dir
        assert strategy == "structured"
        assert (output_dir / "Acme_Residences_Preview.png").exists()

    def test_simulated_run_without_preview(self, controller_factory, mock_services, report_pdf, tmp_path):
        ai_service, _, report_service = mock_services

        result = runner.invoke(app, [
            "run", str(report_pdf), "--yes", "--search-mode", "simulated",
            "--no-preview", "--export-strategy", "snapshot", "--output-dir", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        ai_service.market_search.assert_not_called()
        ai_service.generate_preview_image.assert_not_called()
        assert report_service.export.call_args[0][2] == "snapshot"

    def test_extraction_failure(self, controller_factory, mock_services, report_pdf):
        ai_service, _, report_service = mock_services
        ai_service.extract_requirements.side_effect = AIResponseError("AI response empty")

        result = runner.invoke(app, ["run", str(report_pdf), "--yes"])

        assert result.exit_code == 1
        report_service.export.assert_not_called()

    def test_declined_confirmation(self, controller_factory, mock_services, report_pdf):
        ai_service, _, _ = mock_services

        result = runner.invoke(app, ["run", str(report_pdf)], input="n\n")

        assert result.exit_code == 0
        ai_service.market_search.assert_not_called()

    def test_unknown_export_strategy(self, controller_factory, report_pdf):
        result = runner.invoke(app, ["run", str(report_pdf), "--export-strategy", "html"])
        assert result.exit_code != 0

    def test_missing_api_key(self, report_pdf):
        with patch("colorinsight.main.create_controller", side_effect=ValueError("GOOGLE_AI_API_KEY not found")):
            result = runner.invoke(app, ["run", str(report_pdf), "--yes"])

        assert result.exit_code == 2


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
