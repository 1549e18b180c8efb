"""
Weighted scoring and ranking of generated color schemes.

The composite score is a fixed linear combination of the five sub-scores.
Arithmetic is done on ``Decimal`` values built from each sub-score's string
form so that midpoints such as ``x.xx5`` round half-up exactly instead of
drifting with binary floating point.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence

from colorinsight.models.scheme import ColorScheme, SubScores
from colorinsight.utils.constants import SCORE_WEIGHTS

WEIGHTS = {metric: Decimal(str(weight)) for metric, weight in SCORE_WEIGHTS.items()}
_TWO_PLACES = Decimal("0.01")


def _round(value: Decimal) -> float:
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def contribution(scores: SubScores, metric: str) -> float:
    """Weighted contribution of a single metric, rounded to two places."""
    return _round(Decimal(str(getattr(scores, metric))) * WEIGHTS[metric])


def weighted_score(scores: SubScores) -> float:
    """
    Compute the composite score for a set of sub-scores.

    Args:
        scores: The five sub-scores, each in [0, 10]

    Returns:
        0.30*match + 0.25*trend + 0.20*market + 0.15*innovation + 0.10*harmony,
        rounded half-up to two decimal places
    """
    total = sum(
        (Decimal(str(getattr(scores, metric))) * weight for metric, weight in WEIGHTS.items()),
        Decimal(0),
    )
    return _round(total)


def score_schemes(schemes: Sequence[ColorScheme]) -> List[ColorScheme]:
    """Return copies of the schemes with ``weighted_score`` derived from their sub-scores."""
    return [
        scheme.model_copy(update={"weighted_score": weighted_score(scheme.scores)})
        for scheme in schemes
    ]


def select_best(schemes: Sequence[ColorScheme]) -> ColorScheme:
    """
    Pick the scheme with the highest weighted score.

    The scan keeps the running best and only replaces it on strict
    improvement, so ties go to the scheme generated first.

    Raises:
        ValueError: If ``schemes`` is empty
    """
    if not schemes:
        raise ValueError("Cannot select a best scheme from an empty batch")

    best = schemes[0]
    for scheme in schemes[1:]:
        if _score_of(scheme) > _score_of(best):
            best = scheme
    return best


def rank_schemes(schemes: Sequence[ColorScheme]) -> List[ColorScheme]:
    """Schemes ordered by descending weighted score; ties keep generation order."""
    return sorted(schemes, key=_score_of, reverse=True)


def _score_of(scheme: ColorScheme) -> float:
    if scheme.weighted_score is None:
        return weighted_score(scheme.scores)
    return scheme.weighted_score
