"""
rules/invoice_rules.py

The fixed battery of GETS business rules evaluated on every invoice row.
"""

from __future__ import annotations

import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation, Overflow
from typing import Any, Mapping

from app.domain.gets_schema import ALLOWED_CURRENCIES
from app.domain.validation import Issue, RuleOutcome
from app.mappers.field_mapper import find_mapped_source_column
from rules.base import BaseInvoiceRule

TOTALS_BALANCE = "TOTALS_BALANCE"
LINE_MATH = "LINE_MATH"
DATE_ISO = "DATE_ISO"
CURRENCY_ALLOWED = "CURRENCY_ALLOWED"
TRN_PRESENT = "TRN_PRESENT"

RULE_NAMES: tuple[str, ...] = (
    TOTALS_BALANCE,
    LINE_MATH,
    DATE_ISO,
    CURRENCY_ALLOWED,
    TRN_PRESENT,
)

# Absolute tolerance for monetary comparisons; a difference equal to it passes.
TOLERANCE = Decimal("0.01")

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_QTY_KEYS = ("qty", "quantity")
_UNIT_PRICE_KEYS = ("unit_price", "price")
_LINE_TOTAL_KEYS = ("line_total", "total")


def to_decimal(value: Any) -> Decimal | None:
    """Parse a cell into a finite Decimal, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            parsed = Decimal(raw)
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return str(value).strip() == ""


def _as_number(value: Decimal) -> float | None:
    number = float(value)
    return number if math.isfinite(number) else None


def _first_present(item: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in item and not _is_blank(item[key]):
            return item[key]
    return None


class TotalsBalanceRule(BaseInvoiceRule):
    """total_incl_vat must equal total_excl_vat + vat_amount within 0.01."""

    name = TOTALS_BALANCE
    title = "Totals Balance Validation"
    description = "Validates invoice totals: total_incl_vat = total_excl_vat + vat_amount"
    category = "Business Logic"

    def check(
        self,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        excl_column = find_mapped_source_column("invoice.total_excl_vat", mapping)
        vat_column = find_mapped_source_column("invoice.vat_amount", mapping)
        incl_column = find_mapped_source_column("invoice.total_incl_vat", mapping)
        if excl_column is None or vat_column is None or incl_column is None:
            return RuleOutcome.passed()

        total_excl = to_decimal(row.get(excl_column))
        vat_amount = to_decimal(row.get(vat_column))
        total_incl = to_decimal(row.get(incl_column))
        if total_excl is None or vat_amount is None or total_incl is None:
            return RuleOutcome.passed()

        try:
            expected = total_excl + vat_amount
            difference = abs(total_incl - expected)
        except Overflow:
            # outside the decimal exponent range: treated as non-numeric
            return RuleOutcome.passed()
        if difference <= TOLERANCE:
            return RuleOutcome.passed()

        return RuleOutcome.failed(
            [
                Issue(
                    row=row_number,
                    field="invoice.total_incl_vat",
                    source_field=incl_column,
                    rule=self.name,
                    error=(
                        f"Total including VAT ({total_incl}) does not equal total excluding "
                        f"VAT ({total_excl}) plus VAT amount ({vat_amount})"
                    ),
                    value=row.get(incl_column),
                    expected=_as_number(expected),
                )
            ]
        )


class LineMathRule(BaseInvoiceRule):
    """Every line item must satisfy line_total = qty * unit_price within 0.01."""

    name = LINE_MATH
    title = "Line Item Math Validation"
    description = "Validates line totals: line_total = qty * unit_price"
    category = "Business Logic"

    def check(
        self,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        issues: list[Issue] = []
        for column, value in row.items():
            if not isinstance(value, list):
                continue
            for line_number, item in enumerate(value, start=1):
                if not isinstance(item, Mapping):
                    continue
                qty = to_decimal(_first_present(item, _QTY_KEYS))
                unit_price = to_decimal(_first_present(item, _UNIT_PRICE_KEYS))
                line_total = to_decimal(_first_present(item, _LINE_TOTAL_KEYS))
                if qty is None or unit_price is None or line_total is None:
                    continue

                try:
                    expected = qty * unit_price
                    difference = abs(line_total - expected)
                except Overflow:
                    continue
                if difference <= TOLERANCE:
                    continue
                issues.append(
                    Issue(
                        row=row_number,
                        field="lines[].line_total",
                        source_field=column,
                        rule=self.name,
                        error=(
                            f"Line {line_number}: line total ({line_total}) does not equal "
                            f"quantity ({qty}) x unit price ({unit_price})"
                        ),
                        value=_first_present(item, _LINE_TOTAL_KEYS),
                        expected=_as_number(expected),
                        line=line_number,
                    )
                )

        return RuleOutcome.failed(issues) if issues else RuleOutcome.passed()


class DateISORule(BaseInvoiceRule):
    """invoice.issue_date must be a real calendar date written as YYYY-MM-DD."""

    name = DATE_ISO
    title = "Date Format Validation"
    description = "Validates the issue date is a real calendar date in YYYY-MM-DD format"
    category = "Data Format"

    def check(
        self,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        column = find_mapped_source_column("invoice.issue_date", mapping)
        if column is None:
            return RuleOutcome.passed()
        value = row.get(column)
        if _is_blank(value):
            return RuleOutcome.passed()

        text = value if isinstance(value, str) else str(value)
        if self._is_iso_date(text):
            return RuleOutcome.passed()

        return RuleOutcome.failed(
            [
                Issue(
                    row=row_number,
                    field="invoice.issue_date",
                    source_field=column,
                    rule=self.name,
                    error=f"Issue date '{text}' is not a valid ISO date (YYYY-MM-DD)",
                    value=value,
                    expected="YYYY-MM-DD",
                )
            ]
        )

    @staticmethod
    def _is_iso_date(text: str) -> bool:
        if not _ISO_DATE.fullmatch(text):
            return False
        try:
            return date.fromisoformat(text).isoformat() == text
        except ValueError:
            return False


class CurrencyAllowedRule(BaseInvoiceRule):
    """invoice.currency must be one of the supported currency codes."""

    name = CURRENCY_ALLOWED
    title = "Currency Validation"
    description = "Ensures currency codes are one of AED, SAR, MYR, USD"
    category = "Data Format"

    def check(
        self,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        column = find_mapped_source_column("invoice.currency", mapping)
        if column is None:
            return RuleOutcome.passed()
        value = row.get(column)
        if _is_blank(value):
            return RuleOutcome.passed()
        if isinstance(value, str) and value in ALLOWED_CURRENCIES:
            return RuleOutcome.passed()

        allowed = ", ".join(ALLOWED_CURRENCIES)
        return RuleOutcome.failed(
            [
                Issue(
                    row=row_number,
                    field="invoice.currency",
                    source_field=column,
                    rule=self.name,
                    error=f"Currency '{value}' is not allowed. Allowed values: {allowed}",
                    value=value,
                    expected=allowed,
                )
            ]
        )


class TRNPresentRule(BaseInvoiceRule):
    """Mapped seller/buyer TRN values must not be empty."""

    name = TRN_PRESENT
    title = "TRN Presence Validation"
    description = "Ensures mapped TRN values for buyer and seller are not empty"
    category = "Data Completeness"

    _TRN_FIELDS: tuple[tuple[str, str], ...] = (
        ("seller.trn", "Seller"),
        ("buyer.trn", "Buyer"),
    )

    def check(
        self,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | None],
        row_number: int,
    ) -> RuleOutcome:
        issues: list[Issue] = []
        for path, party in self._TRN_FIELDS:
            column = find_mapped_source_column(path, mapping)
            if column is None:
                continue
            value = row.get(column)
            if value is None:
                continue
            if str(value).strip() == "":
                issues.append(
                    Issue(
                        row=row_number,
                        field=path,
                        source_field=column,
                        rule=self.name,
                        error=f"{party} TRN is empty",
                        value=value,
                    )
                )

        return RuleOutcome.failed(issues) if issues else RuleOutcome.passed()


def default_rules() -> tuple[BaseInvoiceRule, ...]:
    """Return one instance of every rule, in evaluation order."""
    return (
        TotalsBalanceRule(),
        LineMathRule(),
        DateISORule(),
        CurrencyAllowedRule(),
        TRNPresentRule(),
    )
