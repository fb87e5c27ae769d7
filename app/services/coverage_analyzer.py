"""
app/services/coverage_analyzer.py

Classifies every GETS field as matched, close or missing for a mapping.

Close-match scoring (cumulative, max 100):
    +50  normalised source and target contain one another
    +30  first four characters equal
    +20  first three characters equal
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.domain.gets_schema import SchemaRegistry, StandardField, get_schema_registry
from readiness.normalizer import round_half_up

DEFAULT_FIELD_DESCRIPTION = "Standard e-invoicing field"

FIELD_DESCRIPTIONS: dict[str, str] = {
    "invoice.id": "Unique invoice identifier",
    "invoice.issue_date": "Date when invoice was issued",
    "invoice.currency": "Currency code (AED, SAR, MYR, USD)",
    "invoice.total_excl_vat": "Total amount excluding VAT",
    "invoice.vat_amount": "VAT amount",
    "invoice.total_incl_vat": "Total amount including VAT",
    "seller.name": "Seller company name",
    "seller.trn": "Seller Tax Registration Number",
    "seller.country": "Seller country code",
    "seller.city": "Seller city",
    "buyer.name": "Buyer company name",
    "buyer.trn": "Buyer Tax Registration Number",
    "buyer.country": "Buyer country code",
    "buyer.city": "Buyer city",
    "lines[].sku": "Product/service SKU",
    "lines[].description": "Product/service description",
    "lines[].qty": "Quantity",
    "lines[].unit_price": "Unit price",
    "lines[].line_total": "Line total amount",
}

MAX_CLOSE_SUGGESTIONS = 3

_SOURCE_SEPARATORS = re.compile(r"[_\s-]")
_TARGET_SEPARATORS = re.compile(r"[._\[\]]")


def describe_field(path: str) -> str:
    return FIELD_DESCRIPTIONS.get(path, DEFAULT_FIELD_DESCRIPTION)


def similarity_score(source_column: str, target_path: str) -> int:
    """
    Weighted name similarity between a source column and a standard path.
    """

    source = _SOURCE_SEPARATORS.sub("", source_column.lower())
    target = _TARGET_SEPARATORS.sub("", target_path.lower())

    score = 0
    if source in target or target in source:
        score += 50
    if source[:4] == target[:4]:
        score += 30
    if source[:3] == target[:3]:
        score += 20
    return score


@dataclass(frozen=True)
class CoverageReport:
    """
    Matched / close / missing classification plus summary counters.
    """

    matched: list[dict[str, Any]] = field(default_factory=list)
    close: list[dict[str, Any]] = field(default_factory=list)
    missing: list[dict[str, Any]] = field(default_factory=list)
    total_standard_fields: int = 0

    @property
    def coverage_percentage(self) -> int:
        if self.total_standard_fields == 0:
            return 0
        return round_half_up(len(self.matched) / self.total_standard_fields * 100)

    def summary(self) -> dict[str, int]:
        return {
            "totalStandardFields": self.total_standard_fields,
            "mappedFields": len(self.matched),
            "missingFields": len(self.missing),
            "closeMatches": len(self.close),
            "coveragePercentage": self.coverage_percentage,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "matched": list(self.matched),
            "close": list(self.close),
            "missing": list(self.missing),
            "summary": self.summary(),
        }


class CoverageAnalyzer:
    """
    Pure analysis of a validated mapping against the schema catalog.
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self._registry = registry or get_schema_registry()

    def analyze(self, mapping: Mapping[str, str | None]) -> CoverageReport:
        fields = self._registry.fields()

        matched: list[dict[str, Any]] = []
        for source_column, target in mapping.items():
            if not target:
                continue
            standard_field = self._registry.get(target)
            if standard_field is None:
                continue
            matched.append(
                {
                    "source": source_column,
                    "target": target,
                    "required": standard_field.required,
                    "type": standard_field.type,
                }
            )

        mapped_targets = {target for target in mapping.values() if target}
        missing = [
            {
                "field": standard_field.path,
                "required": standard_field.required,
                "type": standard_field.type,
                "description": describe_field(standard_field.path),
            }
            for standard_field in fields
            if standard_field.path not in mapped_targets
        ]

        close: list[dict[str, Any]] = []
        for source_column, target in mapping.items():
            if target:
                continue
            suggestions = self.find_close_matches(source_column, fields)
            if suggestions:
                close.append({"source": source_column, "suggestions": suggestions})

        return CoverageReport(
            matched=matched,
            close=close,
            missing=missing,
            total_standard_fields=len(fields),
        )

    @staticmethod
    def find_close_matches(
        source_column: str,
        fields: tuple[StandardField, ...],
        limit: int = MAX_CLOSE_SUGGESTIONS,
    ) -> list[dict[str, Any]]:
        """
        Top ``limit`` positively scored candidates, best first.
        """

        scored = [
            (similarity_score(source_column, standard_field.path), standard_field)
            for standard_field in fields
        ]
        ranked = sorted(
            (item for item in scored if item[0] > 0),
            key=lambda item: item[0],
            reverse=True,
        )
        return [
            {
                "field": standard_field.path,
                "type": standard_field.type,
                "required": standard_field.required,
                "score": score,
            }
            for score, standard_field in ranked[:limit]
        ]
