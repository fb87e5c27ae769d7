"""
readiness/orchestrator.py

Coordinates the category models into one readiness score. Contains no
scoring math of its own and performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from app.domain.gets_schema import SchemaRegistry
from app.domain.validation import ValidationResult
from readiness.coverage import CoverageScore
from readiness.data_quality import DataQualityScore
from readiness.posture import PostureScore
from readiness.rules_score import RulesComplianceScore
from readiness.scoring import OverallReadinessModel, readiness_level


@dataclass(frozen=True)
class CategoryScores:
    data: int
    coverage: int
    rules: int
    posture: int

    def to_dict(self) -> dict[str, int]:
        return {
            "data": self.data,
            "coverage": self.coverage,
            "rules": self.rules,
            "posture": self.posture,
        }


@dataclass(frozen=True)
class ReadinessScore:
    """
    Category scores, the weighted overall score and its label.
    """

    category_scores: CategoryScores
    overall_score: int
    readiness_level: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "categoryScores": self.category_scores.to_dict(),
            "overallScore": self.overall_score,
            "readinessLevel": self.readiness_level,
        }


class ReadinessOrchestrator:
    """Runs the data, coverage, rules and posture models and combines them.

    Stateless; one instance can be shared across requests.
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self._data_model = DataQualityScore()
        self._coverage_model = CoverageScore(registry)
        self._rules_model = RulesComplianceScore()
        self._posture_model = PostureScore()
        self._overall_model = OverallReadinessModel()

    def score(
        self,
        *,
        rows: Sequence[Any],
        mapping: Mapping[str, str | None] | None,
        validation: ValidationResult | Mapping[str, Any] | None,
        questionnaire: Any = None,
    ) -> ReadinessScore:
        """Compute every category score and the overall readiness.

        Args:
            rows: Raw uploaded rows.
            mapping: Source column -> standard path mapping.
            validation: Rule engine result (object or serialised form).
            questionnaire: Optional integration posture answers.

        Returns:
            A ReadinessScore whose label is derived from the overall score.
        """
        categories = CategoryScores(
            data=self._data_model.compute(rows),
            coverage=self._coverage_model.compute(mapping),
            rules=self._rules_model.compute(validation),
            posture=self._posture_model.compute(questionnaire),
        )
        overall = self._overall_model.compute(categories.to_dict())
        return ReadinessScore(
            category_scores=categories,
            overall_score=overall,
            readiness_level=readiness_level(overall),
        )
