"""
rules/engine.py

Runs the invoice rule battery over a bounded batch of rows.

Every rule runs on every row. A row passes only when all rules pass. Rule
results count rows, not issues: a row with three bad line items still adds
one to ``LINE_MATH.failed``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from app.domain.validation import Issue, RuleOutcome, RuleResult, ValidationResult
from app.logging_utils import log_event
from readiness.normalizer import round_half_up
from rules.base import BaseInvoiceRule
from rules.invoice_rules import default_rules

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 200


class BatchTooLargeError(ValueError):
    """
    Raised when a batch exceeds the synchronous validation cap.
    """

    def __init__(self, *, rows: int, max_rows: int) -> None:
        super().__init__(f"Batch of {rows} rows exceeds the limit of {max_rows} rows.")
        self.rows = rows
        self.max_rows = max_rows


class RuleEngine:
    """
    Stateless, deterministic rule runner.

    Re-running with the same rows and mapping yields an identical
    ``ValidationResult``.
    """

    def __init__(
        self,
        *,
        rules: Sequence[BaseInvoiceRule] | None = None,
        max_rows: int = DEFAULT_MAX_ROWS,
        log_rule_failures: bool = True,
    ) -> None:
        self._rules = tuple(rules) if rules is not None else default_rules()
        self._max_rows = max(1, max_rows)
        self._log_rule_failures = log_rule_failures

    @property
    def rules(self) -> tuple[BaseInvoiceRule, ...]:
        return self._rules

    def rule_definitions(self) -> dict[str, dict[str, str]]:
        return {rule.name: rule.definition() for rule in self._rules}

    def run_validation(
        self,
        rows: Sequence[Mapping[str, Any]],
        mapping: Mapping[str, str | None],
    ) -> ValidationResult:
        """
        Validate every row against every rule and aggregate the outcome.

        Raises:
            BatchTooLargeError: when ``rows`` exceeds the configured cap.
        """

        if len(rows) > self._max_rows:
            raise BatchTooLargeError(rows=len(rows), max_rows=self._max_rows)

        rule_results: dict[str, RuleResult] = {rule.name: RuleResult() for rule in self._rules}
        issues: list[Issue] = []
        passed_rows = 0

        for index, row in enumerate(rows):
            row_number = index + 1
            row_ok = True
            for rule in self._rules:
                outcome = self._run_rule(rule, row, mapping, row_number)
                result = rule_results[rule.name]
                if outcome.ok:
                    result.passed += 1
                    continue
                row_ok = False
                result.failed += 1
                result.issues.extend(outcome.issues)
                issues.extend(outcome.issues)
            if row_ok:
                passed_rows += 1

        rows_checked = len(rows)
        score = round_half_up(passed_rows / rows_checked * 100) if rows_checked else 0

        validation = ValidationResult(
            rows_checked=rows_checked,
            passed=passed_rows,
            failed=rows_checked - passed_rows,
            issues=issues,
            rule_results=rule_results,
            score=score,
        )
        log_event(
            logger,
            logging.INFO,
            "validation_completed",
            rows_checked=validation.rows_checked,
            passed=validation.passed,
            failed=validation.failed,
            issues=len(validation.issues),
            score=validation.score,
        )
        return validation

    def _run_rule(
        self,
        rule: BaseInvoiceRule,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        try:
            return rule.check(row, mapping, row_number)
        except Exception as exc:  # noqa: BLE001
            if self._log_rule_failures:
                logger.warning(
                    "Rule raised during validation rule=%s row=%s error=%s",
                    rule.name,
                    row_number,
                    exc,
                )
            return RuleOutcome.failed(
                [
                    Issue(
                        row=row_number,
                        rule=rule.name,
                        error=f"Rule validation error: {exc}",
                    )
                ]
            )
