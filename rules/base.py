"""
rules/base.py

Abstract base interface for invoice validation rules.
All rule implementations must inherit from BaseInvoiceRule.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from app.domain.validation import RuleOutcome


class BaseInvoiceRule(ABC):
    """Abstract base class for per-row invoice rules.

    A rule inspects one row through the field mapping and reports an
    explicit outcome. Rules hold no state between rows, perform no I/O and
    never mutate the row or the mapping.
    """

    name: str = ""
    title: str = ""
    description: str = ""
    category: str = ""

    @abstractmethod
    def check(
        self,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        """Evaluate the rule against one row.

        Args:
            row: Source row keyed by source column name.
            mapping: Source column -> standard path mapping.
            row_number: 1-based row index used in issue records.

        Returns:
            ``RuleOutcome.passed()`` when the row satisfies the rule or
            the rule does not apply, otherwise ``RuleOutcome.failed``
            carrying at least one issue.
        """
        raise NotImplementedError("Subclasses must implement check()")

    def definition(self) -> dict[str, str]:
        """Return the human-readable rule definition."""
        return {
            "name": self.title,
            "description": self.description,
            "category": self.category,
        }
