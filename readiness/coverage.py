"""
readiness/coverage.py

Field coverage score: how much of the GETS schema the mapping reaches.
"""

from __future__ import annotations

from typing import Mapping

from app.domain.gets_schema import SchemaRegistry, get_schema_registry
from readiness.base import BaseCategoryScore
from readiness.normalizer import ScoreNormalizer


class CoverageScore(BaseCategoryScore):
    """Required fields weigh 70 points, optional fields 30.

    Ratios count distinct mapped targets, so mapping two source columns to
    the same path does not inflate the score. A category with no fields in
    the schema counts as fully covered.
    """

    category = "coverage"

    REQUIRED_WEIGHT: float = 70.0
    OPTIONAL_WEIGHT: float = 30.0

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self._registry = registry or get_schema_registry()
        self._normalizer = ScoreNormalizer()

    def compute(self, inputs: Mapping[str, str | None] | None) -> int:
        if not isinstance(inputs, Mapping):
            return 0

        mapped_targets = {target for target in inputs.values() if target}
        required = {field.path for field in self._registry.required_fields()}
        optional = {field.path for field in self._registry.optional_fields()}

        required_ratio = self._normalizer.ratio(len(mapped_targets & required), len(required), empty=1.0)
        optional_ratio = self._normalizer.ratio(len(mapped_targets & optional), len(optional), empty=1.0)

        score = required_ratio * self.REQUIRED_WEIGHT + optional_ratio * self.OPTIONAL_WEIGHT
        return min(self._normalizer.to_score(score), 100)
