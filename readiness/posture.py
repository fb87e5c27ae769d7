"""
readiness/posture.py

Technical posture score from the optional integration questionnaire.
"""

from __future__ import annotations

from typing import Any, Mapping

from readiness.base import BaseCategoryScore
from readiness.normalizer import ScoreNormalizer

# question -> (points when true, points when explicitly false, points when unknown)
POSTURE_POINTS: dict[str, tuple[float, float, float]] = {
    "webhooks": (25.0, 0.0, 12.5),
    "sandbox_env": (25.0, 10.0, 17.5),
    "retries": (25.0, 5.0, 15.0),
    "error_handling": (25.0, 5.0, 15.0),
}

NEUTRAL_POSTURE_SCORE = 50


class PostureScore(BaseCategoryScore):
    """Sum of per-question points, already on a 0-100 scale."""

    category = "posture"

    def __init__(self) -> None:
        self._normalizer = ScoreNormalizer()

    def compute(self, inputs: Mapping[str, Any] | None) -> int:
        if not isinstance(inputs, Mapping):
            return NEUTRAL_POSTURE_SCORE

        score = 0.0
        max_score = 0.0
        for question, (when_true, when_false, when_unknown) in POSTURE_POINTS.items():
            answer = inputs.get(question)
            if answer is True:
                score += when_true
            elif answer is False:
                score += when_false
            else:
                score += when_unknown
            max_score += when_true

        return self._normalizer.to_score(self._normalizer.ratio(score, max_score, empty=0.5) * 100.0)
