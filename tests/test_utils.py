"""
Tests for the shared helper functions.
"""

from pathlib import Path

import pytest

from colorinsight.models.search import Source
from colorinsight.utils.utils import dedupe_sources, report_file_name, safe_file_stem, strip_code_fences, truncate


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n[1, 2]\n```') == "[1, 2]"

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestDedupeSources:
    """Tests for dedupe_sources."""

    def test_first_seen_wins(self):
        sources = [
            Source(title="A", url="https://a"),
            Source(title="A again", url="https://a"),
            Source(title="B", url="https://b"),
        ]

        unique = dedupe_sources(sources)

        assert [s.title for s in unique] == ["A", "B"]

    def test_limit(self):
        sources = [{"title": str(i), "url": f"https://{i}"} for i in range(9)]
        assert len(dedupe_sources(sources)) == 5
        assert len(dedupe_sources(sources, limit=2)) == 2


class TestReportFileName:
    """Tests for report_file_name."""

    @pytest.mark.parametrize("customer, expected", [
        ("Acme Residences", "Acme_Residences_Color_Strategy.pdf"),
        ("  Acme   Grand  Tower ", "Acme_Grand_Tower_Color_Strategy.pdf"),
        ("华润置地", "华润置地_Color_Strategy.pdf"),
        ("", "Unknown_Client_Color_Strategy.pdf"),
        ("../Acme / Partners", "Acme_Partners_Color_Strategy.pdf"),
        ("..", "Unknown_Client_Color_Strategy.pdf"),
        (".hidden", "hidden_Color_Strategy.pdf"),
        ('A:B*C?"D"<E>|F\\G', "A_B_C_D_E_F_G_Color_Strategy.pdf"),
    ])
    def test_names(self, customer, expected):
        assert report_file_name(customer) == expected

    @pytest.mark.parametrize("customer", ["../../etc/passwd", "/abs/path", "a/../../b", "..\\..\\win"])
    def test_stem_is_single_component(self, customer):
        stem = safe_file_stem(customer)
        assert "/" not in stem
        assert "\\" not in stem
        assert not stem.startswith(".")
        assert Path(stem).name == stem


def test_truncate():
    assert truncate("abcdef", 3) == "abc"
    assert truncate("abc", 3) == "abc"


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
