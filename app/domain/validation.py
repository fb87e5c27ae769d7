"""
app/domain/validation.py

Result types produced by the rule engine.

Field names in ``to_dict`` are the contract consumed by the report
renderers and the HTTP layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Issue:
    """
    One rule failure tied to a row, a standard field and its source column.
    """

    row: int
    rule: str
    error: str
    field: str | None = None
    source_field: str | None = None
    value: Any = None
    expected: Any = None
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "row": self.row,
            "field": self.field,
            "sourceField": self.source_field,
            "rule": self.rule,
            "error": self.error,
            "value": self.value,
        }
        if self.expected is not None:
            payload["expected"] = self.expected
        if self.line is not None:
            payload["line"] = self.line
        return payload


@dataclass(frozen=True)
class RuleOutcome:
    """
    Result of running one rule against one row.
    """

    ok: bool
    issues: tuple[Issue, ...] = ()

    @classmethod
    def passed(cls) -> "RuleOutcome":
        return cls(ok=True)

    @classmethod
    def failed(cls, issues: list[Issue]) -> "RuleOutcome":
        return cls(ok=False, issues=tuple(issues))


@dataclass
class RuleResult:
    """
    Per-rule row counters plus the issues the rule raised.
    """

    passed: int = 0
    failed: int = 0
    issues: list[Issue] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class ValidationResult:
    """
    Aggregate outcome of one validation run.

    ``passed + failed == rows_checked``; a row passes only when every rule
    passes for it.
    """

    rows_checked: int
    passed: int
    failed: int
    issues: list[Issue] = field(default_factory=list)
    rule_results: dict[str, RuleResult] = field(default_factory=dict)
    score: int = 0

    def issues_for_rule(self, rule: str) -> list[Issue]:
        return [issue for issue in self.issues if issue.rule == rule]

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowsChecked": self.rows_checked,
            "passed": self.passed,
            "failed": self.failed,
            "issues": [issue.to_dict() for issue in self.issues],
            "ruleResults": {
                name: result.to_dict() for name, result in self.rule_results.items()
            },
            "score": self.score,
        }
