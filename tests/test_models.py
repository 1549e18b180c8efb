"""
Tests for the pydantic data models.
"""

import datetime

import pytest
from pydantic import ValidationError

from colorinsight.models.requirement import Requirement, RequirementExtraction
from colorinsight.models.scheme import Palette, SubScores
from colorinsight.models.search import SearchResult, Source
from colorinsight.models.session import AnalysisReport, UploadedFile, WizardSession, WizardState
from colorinsight.models.text import LocalizedText


class TestLocalizedText:
    """Tests for bilingual text coercion."""

    def test_plain_string_is_monolingual(self):
        text = LocalizedText.model_validate("Warm neutrals")
        assert text.primary == "Warm neutrals"
        assert text.secondary is None
        assert text.display() == "Warm neutrals"

    def test_bilingual_object(self):
        text = LocalizedText.model_validate({"en": "Warm neutrals", "zh": "暖中性色"})
        assert text.primary == "Warm neutrals"
        assert text.secondary == "暖中性色"
        assert text.display() == "Warm neutrals / 暖中性色"

    def test_secondary_only_becomes_primary(self):
        text = LocalizedText.model_validate({"en": "", "zh": "暖中性色"})
        assert text.primary == "暖中性色"
        assert text.secondary is None


class TestSchemeModels:
    """Tests for palettes and sub-scores."""

    def test_palette_normalizes_hex(self):
        palette = Palette(primary="#abc", secondary="1b2a41", accent="#E4572E")
        assert palette.primary == "#AABBCC"
        assert palette.secondary == "#1B2A41"
        assert [label for label, _ in palette.items()] == ["Primary", "Secondary", "Accent"]

    def test_palette_rejects_invalid_hex(self):
        with pytest.raises(ValidationError):
            Palette(primary="blue", secondary="#1B2A41", accent="#E4572E")

    def test_sub_scores_bounds(self):
        with pytest.raises(ValidationError):
            SubScores(match=11, trend=5, market=5, innovation=5, harmony=5)
        with pytest.raises(ValidationError):
            SubScores(match=5, trend=-1, market=5, innovation=5, harmony=5)

    def test_scheme_accepts_wire_aliases(self, make_scheme):
        scheme = make_scheme("7")
        assert scheme.name.secondary == "方案 7"
        assert scheme.usage_advice.primary == "Use the primary on large walls."
        assert scheme.weighted_score is None


class TestRequirementModels:
    """Tests for requirement extraction payloads."""

    def test_aliases_and_id_coercion(self):
        req = Requirement.model_validate({"id": 3, "text": "暖色", "summaryEn": "Warm", "sourcePage": 4})
        assert req.id == "3"
        assert req.summary_en == "Warm"
        assert req.source_page == 4

    def test_blank_customer_defaults(self):
        extraction = RequirementExtraction.model_validate({"customerName": "  ", "requirements": []})
        assert extraction.customer_name == "Unknown Client"


class TestSessionModels:
    """Tests for the session, uploads and reports."""

    def test_uploaded_file_from_path(self, tmp_path):
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.4 test")

        upload = UploadedFile.from_path(path)

        assert upload.filename == "report.pdf"
        assert upload.content_type == "application/pdf"
        assert upload.size == len(b"%PDF-1.4 test")

    def test_uploaded_file_unknown_type(self, tmp_path):
        path = tmp_path / "report.unknownext"
        path.write_bytes(b"data")
        assert UploadedFile.from_path(path).content_type == "application/octet-stream"

    def test_default_session(self):
        session = WizardSession()
        assert session.state == WizardState.UPLOAD
        assert session.requirements == []
        assert session.is_generating_image is False

    def test_report_requires_best_scheme(self):
        with pytest.raises(ValueError):
            AnalysisReport.from_session(WizardSession())

    def test_report_citations_are_unique(self, make_scheme, sample_requirements):
        scheme = make_scheme("1", sources=["Pantone", "Pantone", "WGSN"])
        search = SearchResult(sources=[Source(title="Forecast", url="https://example.com/f")])
        session = WizardSession(
            state=WizardState.RESULT,
            customer_name="Acme",
            requirements=sample_requirements,
            schemes=[scheme],
            best_scheme=scheme,
            search_result=search,
        )

        report = AnalysisReport.from_session(session, report_date=datetime.date(2025, 1, 31))

        assert report.date == datetime.date(2025, 1, 31)
        assert report.citations() == ["Pantone", "WGSN", "Forecast (https://example.com/f)"]


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
