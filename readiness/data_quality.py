"""
readiness/data_quality.py

Data quality score computed from the raw uploaded rows.

    data = 0.4 * completeness + 0.3 * consistency + 0.3 * format
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from readiness.base import BaseCategoryScore
from readiness.normalizer import ScoreNormalizer

Row = Mapping[str, Any]


def _is_filled(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


def _runtime_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _as_rows(rows: Sequence[Any]) -> list[Row]:
    return [row if isinstance(row, Mapping) else {} for row in rows]


def _observed_keys(rows: Sequence[Row]) -> list[str]:
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


class DataQualityScore(BaseCategoryScore):
    """Weighted completeness, type consistency and formatting score.

    Rows are read flat: nested line-item arrays count as single filled
    cells and are not descended into.
    """

    category = "data"

    COMPLETENESS_WEIGHT: float = 0.4
    CONSISTENCY_WEIGHT: float = 0.3
    FORMAT_WEIGHT: float = 0.3

    WHITESPACE_PENALTY: float = 0.1
    NAME_WHITESPACE_PENALTY: float = 0.1

    def __init__(self) -> None:
        self._normalizer = ScoreNormalizer()

    def compute(self, inputs: Sequence[Any] | None) -> int:
        """Compute the data score for a batch of rows; 0 for an empty batch."""
        if not inputs:
            return 0
        breakdown = self.breakdown(inputs)
        weighted = (
            breakdown["completeness"] * self.COMPLETENESS_WEIGHT
            + breakdown["consistency"] * self.CONSISTENCY_WEIGHT
            + breakdown["format"] * self.FORMAT_WEIGHT
        )
        return self._normalizer.to_score(weighted)

    def breakdown(self, inputs: Sequence[Any]) -> dict[str, float]:
        rows = _as_rows(inputs)
        return {
            "completeness": self.completeness(rows),
            "consistency": self.consistency(rows),
            "format": self.format_quality(rows),
        }

    def completeness(self, rows: Sequence[Row]) -> float:
        """Filled cells over rows x every key observed in the batch."""
        keys = _observed_keys(rows)
        total_cells = len(rows) * len(keys)
        filled = sum(1 for row in rows for key in keys if _is_filled(row.get(key)))
        return self._normalizer.ratio(filled, total_cells) * 100.0

    def consistency(self, rows: Sequence[Row]) -> float:
        """Penalise columns whose values change runtime type."""
        penalty = 0.0
        checked_columns = 0
        for key in _observed_keys(rows):
            values = [row.get(key) for row in rows if _is_filled(row.get(key))]
            if len(values) < 2:
                continue
            checked_columns += 1
            first_type = _runtime_type(values[0])
            mismatched = sum(1 for value in values if _runtime_type(value) != first_type)
            penalty += mismatched / len(values)

        if checked_columns == 0:
            return 100.0
        return max(0.0, 100.0 - (penalty / checked_columns) * 100.0)

    def format_quality(self, rows: Sequence[Row]) -> float:
        """Penalise stray leading/trailing whitespace, twice for name-like columns."""
        penalty = 0.0
        checks = 0
        for row in rows:
            for key, value in row.items():
                if not _is_filled(value) or isinstance(value, (list, dict)):
                    continue
                checks += 1
                if isinstance(value, str) and value != value.strip():
                    penalty += self.WHITESPACE_PENALTY
                    if "name" in str(key).lower():
                        penalty += self.NAME_WHITESPACE_PENALTY

        if checks == 0:
            return 100.0
        return max(0.0, 100.0 - (penalty / checks) * 100.0)
