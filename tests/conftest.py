"""
Shared fixtures for the ColorInsight tests.
"""

import pytest

from colorinsight.models.requirement import Requirement, RequirementExtraction
from colorinsight.models.scheme import ColorScheme
from colorinsight.models.search import SearchResult, Source


def build_scheme(scheme_id, match=5, trend=5, market=5, innovation=5, harmony=5, weighted_score=None, **overrides):
    """Build a ColorScheme with the given sub-scores."""
    data = {
        "id": scheme_id,
        "name": {"en": f"Scheme {scheme_id}", "zh": f"方案 {scheme_id}"},
        "description": "A calm palette for a premium residential lobby.",
        "palette": {"primary": "#1B2A41", "secondary": "#C9A66B", "accent": "#E4572E"},
        "scores": {
            "match": match,
            "trend": trend,
            "market": market,
            "innovation": innovation,
            "harmony": harmony,
        },
        "weightedScore": weighted_score,
        "sources": ["Pantone Color of the Year"],
        "usageAdvice": {"en": "Use the primary on large walls.", "zh": "主色用于大面积墙面。"},
    }
    data.update(overrides)
    return ColorScheme.model_validate(data)


@pytest.fixture
def make_scheme():
    """Fixture providing the scheme builder."""
    return build_scheme


@pytest.fixture
def sample_requirements():
    """Fixture providing confirmed requirements."""
    return [
        Requirement(id="1", text="整体氛围温暖、高级", summaryEn="Warm, premium atmosphere", sourcePage=2),
        Requirement(id="2", text="目标客群为年轻家庭", summaryEn="Target young families", sourcePage=3),
        Requirement(id="3", text="避免过于鲜艳的颜色", summaryEn="Avoid overly saturated colors", sourcePage=5),
    ]


@pytest.fixture
def sample_extraction(sample_requirements):
    """Fixture providing a successful requirement extraction."""
    return RequirementExtraction(customerName="Acme Residences", requirements=sample_requirements)


@pytest.fixture
def sample_search_result():
    """Fixture providing a market search artifact."""
    return SearchResult.model_validate({
        "trends": [{"en": "Warm minimalism", "zh": "温暖极简"}],
        "competitors": [{"en": "Aman Residences", "zh": "安缦公寓"}],
        "keywords": ["earthy", "quiet luxury"],
        "marketInsight": {"en": "Buyers favour warm neutrals.", "zh": "买家偏爱暖中性色。"},
        "sources": [Source(title="Color Forecast", url="https://example.com/forecast")],
    })


@pytest.fixture
def sample_schemes():
    """Fixture providing a batch of four generated schemes."""
    return [
        build_scheme("1", 8, 7, 6, 5, 9),
        build_scheme("2", 9, 8, 8, 6, 8),
        build_scheme("3", 6, 9, 5, 9, 6),
        build_scheme("4", 7, 6, 7, 5, 8),
    ]
