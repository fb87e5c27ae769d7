"""
tests/test_coverage_analyzer.py

Pytest unit tests for CoverageAnalyzer: matched / close / missing
classification and the close-match similarity scoring.
"""

from __future__ import annotations

import pytest

from app.domain.gets_schema import get_schema_registry
from app.services.coverage_analyzer import (
    DEFAULT_FIELD_DESCRIPTION,
    CoverageAnalyzer,
    describe_field,
    similarity_score,
)


@pytest.fixture()
def analyzer() -> CoverageAnalyzer:
    return CoverageAnalyzer()


# ---------------------------------------------------------------------------
# Similarity scoring
# ---------------------------------------------------------------------------


class TestSimilarityScore:
    def test_containment_and_prefixes_accumulate(self) -> None:
        assert similarity_score("Seller", "seller.name") == 100

    def test_containment_only(self) -> None:
        assert similarity_score("qty", "lines[].qty") == 50

    def test_three_character_prefix_only(self) -> None:
        assert similarity_score("inv_no", "invoice.id") == 20

    def test_unrelated_names_score_zero(self) -> None:
        assert similarity_score("xyz", "buyer.city") == 0

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("issue_date", "invoice.issue_date"),
            ("vat_amount", "invoice.vat_amount"),
            ("unit_price", "lines[].unit_price"),
        ],
    )
    def test_underscores_are_ignored_on_both_sides(self, source: str, target: str) -> None:
        assert similarity_score(source, target) == 50

    def test_suffixes_are_not_stripped(self) -> None:
        # "currencyid" is not contained in "invoicecurrency"
        assert similarity_score("currency_id", "invoice.currency") == 0


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestAnalyze:
    def test_partitions_fields(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze(
            {"invoice_id": "invoice.id", "currency": "invoice.currency", "qty": None}
        )

        assert [item["target"] for item in report.matched] == ["invoice.id", "invoice.currency"]
        assert len(report.missing) == 17
        assert [item["source"] for item in report.close] == ["qty"]
        assert report.close[0]["suggestions"][0]["field"] == "lines[].qty"

    def test_summary_counts(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({"invoice_id": "invoice.id", "currency": "invoice.currency"})

        assert report.summary() == {
            "totalStandardFields": 19,
            "mappedFields": 2,
            "missingFields": 17,
            "closeMatches": 0,
            "coveragePercentage": 11,
        }

    def test_single_mapped_field(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({"inv_no": "invoice.id", "amt": None})

        assert len(report.matched) == 1
        assert len(report.missing) == 18
        assert report.close == []
        assert report.coverage_percentage == 5

    def test_missing_entries_carry_descriptions(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({})
        first = report.missing[0]

        assert first == {
            "field": "invoice.id",
            "required": True,
            "type": "string",
            "description": "Unique invoice identifier",
        }

    def test_unknown_targets_are_not_matched(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({"foo": "invoice.number"})
        assert report.matched == []
        assert len(report.missing) == len(get_schema_registry())

    def test_close_suggestions_are_capped_and_stable(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({"inv_no": None})
        suggestions = report.close[0]["suggestions"]

        assert [s["field"] for s in suggestions] == [
            "invoice.id",
            "invoice.issue_date",
            "invoice.currency",
        ]
        assert all(s["score"] == 20 for s in suggestions)

    def test_multi_word_columns_get_suggestions(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({"vat_amount": None, "unit_price": None})

        assert [item["source"] for item in report.close] == ["vat_amount", "unit_price"]
        assert report.close[0]["suggestions"] == [
            {"field": "invoice.vat_amount", "type": "number", "required": True, "score": 50}
        ]
        assert report.close[1]["suggestions"][0]["field"] == "lines[].unit_price"

    def test_close_matches_may_suggest_mapped_targets(self, analyzer: CoverageAnalyzer) -> None:
        report = analyzer.analyze({"seller_name": "seller.name", "seller": None})
        fields = [s["field"] for s in report.close[0]["suggestions"]]
        assert fields[0] == "seller.name"

    def test_to_dict_shape(self, analyzer: CoverageAnalyzer) -> None:
        payload = analyzer.analyze({}).to_dict()
        assert set(payload) == {"matched", "close", "missing", "summary"}
        assert payload["summary"]["coveragePercentage"] == 0


def test_describe_field_falls_back_to_default() -> None:
    assert describe_field("seller.trn") == "Seller Tax Registration Number"
    assert describe_field("unknown.path") == DEFAULT_FIELD_DESCRIPTION
