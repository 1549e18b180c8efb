"""
Tests for the weighted scoring and ranking of schemes.
"""

import pytest

from colorinsight.models.scheme import SubScores
from colorinsight.scoring import (
    WEIGHTS,
    contribution,
    rank_schemes,
    score_schemes,
    select_best,
    weighted_score,
)


def scores(match, trend, market, innovation, harmony):
    return SubScores(match=match, trend=trend, market=market, innovation=innovation, harmony=harmony)


class TestWeightedScore:
    """Tests for the composite score formula."""

    def test_weights_sum_to_one(self):
        assert sum(WEIGHTS.values()) == 1

    def test_reference_values(self):
        # 0.30*8 + 0.25*7 + 0.20*6 + 0.15*5 + 0.10*9
        assert weighted_score(scores(8, 7, 6, 5, 9)) == 7.0

    @pytest.mark.parametrize("values, expected", [
        ((0, 0, 0, 0, 0), 0.0),
        ((10, 10, 10, 10, 10), 10.0),
        ((9, 8, 8, 6, 8), 8.0),
        ((6, 9, 5, 9, 6), 7.0),
        ((7.5, 8.2, 6.4, 9.1, 7.7), 7.72),
    ])
    def test_linear_combination(self, values, expected):
        assert weighted_score(scores(*values)) == expected

    def test_midpoint_rounds_half_up(self):
        # 0.10 * 0.25 = 0.025 exactly; banker's rounding would give 0.02
        assert weighted_score(scores(0, 0, 0, 0, 0.25)) == 0.03
        assert weighted_score(scores(0, 0, 0, 0, 0.05)) == 0.01
        assert weighted_score(scores(0.05, 0, 0, 0, 0)) == 0.02

    def test_contribution(self):
        sub_scores = scores(8, 7, 6, 5, 9)
        assert contribution(sub_scores, "match") == 2.4
        assert contribution(sub_scores, "trend") == 1.75
        assert contribution(sub_scores, "harmony") == 0.9


class TestRanking:
    """Tests for selecting and ordering schemes."""

    def test_score_schemes_derives_score(self, make_scheme):
        scheme = make_scheme("1", 8, 7, 6, 5, 9, weighted_score=99.0)

        scored = score_schemes([scheme])

        assert scored[0].weighted_score == 7.0
        # The input is left untouched
        assert scheme.weighted_score == 99.0

    def test_select_best_first_maximum_wins(self, make_scheme):
        batch = [
            make_scheme("a", weighted_score=7.00),
            make_scheme("b", weighted_score=8.50),
            make_scheme("c", weighted_score=8.50),
            make_scheme("d", weighted_score=6.00),
        ]

        assert select_best(batch) is batch[1]

    def test_select_best_single(self, make_scheme):
        scheme = make_scheme("only", weighted_score=3.0)
        assert select_best([scheme]) is scheme

    def test_select_best_empty(self):
        with pytest.raises(ValueError):
            select_best([])

    def test_rank_schemes_is_stable(self, make_scheme):
        batch = [
            make_scheme("a", weighted_score=7.00),
            make_scheme("b", weighted_score=8.50),
            make_scheme("c", weighted_score=8.50),
            make_scheme("d", weighted_score=6.00),
        ]

        ranked = rank_schemes(batch)

        assert [scheme.id for scheme in ranked] == ["b", "c", "a", "d"]


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
