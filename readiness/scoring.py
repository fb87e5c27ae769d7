"""
readiness/scoring.py

Overall readiness model combining the four category scores.
"""

from __future__ import annotations

from typing import Mapping

from readiness.normalizer import ScoreNormalizer

# Category weights; must sum to 1.0.
CATEGORY_WEIGHTS: dict[str, float] = {
    "data": 0.25,
    "coverage": 0.35,
    "rules": 0.30,
    "posture": 0.10,
}

# Inclusive lower bounds, highest first.
_READINESS_BANDS: tuple[tuple[int, str], ...] = (
    (90, "HIGH READINESS"),
    (70, "MEDIUM READINESS"),
    (50, "LOW READINESS"),
)

NEEDS_ATTENTION = "NEEDS ATTENTION"


def readiness_level(score: float) -> str:
    """Map a 0-100 score to its readiness label.

    Args:
        score: Any readiness score (overall or per category).

    Returns:
        One of "HIGH READINESS", "MEDIUM READINESS", "LOW READINESS"
        or "NEEDS ATTENTION".
    """
    for threshold, label in _READINESS_BANDS:
        if score >= threshold:
            return label
    return NEEDS_ATTENTION


class OverallReadinessModel:
    """Weighted combination of category scores on a 0-100 scale.

    Categories missing from the input (absent or None) are skipped and the
    remaining weights are renormalised. With no category present the
    score is 0.
    """

    def __init__(self, weights: Mapping[str, float] | None = None) -> None:
        self._weights = dict(weights or CATEGORY_WEIGHTS)
        self._normalizer = ScoreNormalizer()

    def compute(self, category_scores: Mapping[str, float | None]) -> int:
        total_score = 0.0
        total_weight = 0.0
        for category, weight in self._weights.items():
            value = category_scores.get(category)
            if value is None:
                continue
            total_score += value * weight
            total_weight += weight

        if total_weight == 0:
            return 0
        return self._normalizer.to_score(total_score / total_weight)
