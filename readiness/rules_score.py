"""
readiness/rules_score.py

Rule compliance score: weighted pass rate across the validation rules.
"""

from __future__ import annotations

from typing import Any, Mapping

from app.domain.validation import ValidationResult
from readiness.base import BaseCategoryScore
from readiness.normalizer import ScoreNormalizer
from rules.invoice_rules import (
    CURRENCY_ALLOWED,
    DATE_ISO,
    LINE_MATH,
    TOTALS_BALANCE,
    TRN_PRESENT,
)

# Keyed by the rule names the engine emits. Rules absent from a result are
# excluded from both numerator and denominator.
RULE_WEIGHTS: dict[str, float] = {
    TOTALS_BALANCE: 0.20,
    DATE_ISO: 0.15,
    CURRENCY_ALLOWED: 0.20,
    LINE_MATH: 0.10,
    TRN_PRESENT: 0.10,
}


def _rule_counts(inputs: ValidationResult | Mapping[str, Any] | None) -> dict[str, tuple[int, int]] | None:
    """Extract ``{rule: (passed, failed)}`` from a result or its serialised form."""
    if isinstance(inputs, ValidationResult):
        return {
            name: (result.passed, result.failed)
            for name, result in inputs.rule_results.items()
        }
    if isinstance(inputs, Mapping):
        raw = inputs.get("ruleResults")
        if not isinstance(raw, Mapping):
            return None
        counts: dict[str, tuple[int, int]] = {}
        for name, result in raw.items():
            if isinstance(result, Mapping):
                counts[name] = (int(result.get("passed", 0) or 0), int(result.get("failed", 0) or 0))
        return counts
    return None


class RulesComplianceScore(BaseCategoryScore):
    """Weighted success rate over the rules present in a validation result."""

    category = "rules"

    def __init__(self, weights: Mapping[str, float] | None = None) -> None:
        self._weights = dict(weights or RULE_WEIGHTS)
        self._normalizer = ScoreNormalizer()

    def compute(self, inputs: ValidationResult | Mapping[str, Any] | None) -> int:
        counts = _rule_counts(inputs)
        if counts is None:
            return 0

        total_score = 0.0
        total_weight = 0.0
        for name, (passed, failed) in counts.items():
            weight = self._weights.get(name)
            if not weight:
                continue
            success_rate = self._normalizer.ratio(passed, passed + failed, empty=1.0) * 100.0
            total_score += success_rate * weight
            total_weight += weight

        if total_weight == 0:
            return 100
        return self._normalizer.to_score(total_score / total_weight)
