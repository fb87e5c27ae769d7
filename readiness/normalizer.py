"""
readiness/normalizer.py

Deterministic rounding and bounding utilities shared by the scoring models.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's built-in ``round`` uses banker's rounding (``round(62.5) == 62``);
    readiness scores are published with half-up rounding (``63``). The value
    is first trimmed to nine decimals so weighted sums such as
    ``70 * 0.35`` land on their exact half.

    Args:
        value: A finite float.

    Returns:
        The rounded integer.
    """
    return int(math.floor(round(value, 9) + 0.5))


class ScoreNormalizer:
    """Provides stateless helpers for bounding category scores.

    All methods are deterministic and produce bounded outputs.
    No external dependencies, state, or side effects.
    """

    def ratio(self, numerator: float, denominator: float, empty: float = 0.0) -> float:
        """Divide, returning ``empty`` when the denominator is zero.

        Args:
            numerator: Count or weighted sum.
            denominator: Total the numerator is measured against.
            empty: Value used when there is nothing to measure.

        Returns:
            numerator / denominator, or ``empty``.
        """
        if denominator == 0:
            return empty
        return numerator / denominator

    def clamp(self, value: float, min_value: float, max_value: float) -> float:
        """Clamp a value to the specified [min_value, max_value] range.

        Args:
            value: The float to clamp.
            min_value: The lower bound of the output range.
            max_value: The upper bound of the output range.

        Returns:
            value if within bounds, otherwise min_value or max_value.
        """
        return max(min_value, min(value, max_value))

    def to_score(self, value: float) -> int:
        """Round half-up and clamp to the 0-100 score range."""
        return int(self.clamp(round_half_up(value), 0, 100))
