"""
tests/test_report_service.py

Pytest unit tests for report assembly, recommendations and CSV/JSON
rendering. No database: reports are built from in-memory results.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from app.domain.validation import Issue, RuleResult, ValidationResult
from app.services.report_service import (
    FOLLOW_UP_RECOMMENDATION,
    NO_VALIDATION_RECOMMENDATION,
    UnsupportedReportFormatError,
    build_report,
    generate_recommendations,
    render_report,
    report_csv_rows,
)
from app.services.report_pdf import (
    PDF_ISSUE_LIMIT,
    issue_table_rows,
    mapping_table_rows,
    render_pdf,
    rule_table_rows,
)
from readiness.orchestrator import CategoryScores, ReadinessScore


@pytest.fixture()
def validation() -> ValidationResult:
    issue = Issue(
        row=2,
        rule="DATE_ISO",
        error="Issue date '31/01/2025' is not a valid ISO date (YYYY-MM-DD)",
        field="invoice.issue_date",
        source_field="issue_date",
        value="31/01/2025",
        expected="YYYY-MM-DD",
    )
    return ValidationResult(
        rows_checked=2,
        passed=1,
        failed=1,
        issues=[issue],
        rule_results={
            "TOTALS_BALANCE": RuleResult(passed=2, failed=0),
            "DATE_ISO": RuleResult(passed=1, failed=1, issues=[issue]),
        },
        score=50,
    )


@pytest.fixture()
def readiness() -> ReadinessScore:
    return ReadinessScore(
        category_scores=CategoryScores(data=95, coverage=70, rules=93, posture=50),
        overall_score=80,
        readiness_level="MEDIUM READINESS",
    )


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


class TestRecommendations:
    def test_without_validation(self) -> None:
        assert generate_recommendations(None) == [NO_VALIDATION_RECOMMENDATION]

    def test_band_then_failing_rules(self, validation: ValidationResult) -> None:
        assert generate_recommendations(validation) == [
            "Significant improvements needed before e-invoicing implementation",
            "Standardize date formats to YYYY-MM-DD across all records",
        ]

    def test_explicit_score_selects_band(self, validation: ValidationResult) -> None:
        assert generate_recommendations(validation, 95)[0] == (
            "Excellent data quality, ready for e-invoicing implementation"
        )

    def test_follow_up_when_nothing_failed(self) -> None:
        clean = ValidationResult(rows_checked=1, passed=1, failed=0, score=100)
        assert generate_recommendations(clean) == [
            "Excellent data quality, ready for e-invoicing implementation",
            FOLLOW_UP_RECOMMENDATION,
        ]

    def test_low_score_band(self) -> None:
        failing = {"score": 10, "ruleResults": {"TRN_PRESENT": {"passed": 0, "failed": 3}}}
        assert generate_recommendations(failing) == [
            "Urgent action required: Data quality is critically low",
            "Ensure TRN numbers are provided for both buyer and seller",
        ]


# ---------------------------------------------------------------------------
# Report document
# ---------------------------------------------------------------------------


class TestBuildReport:
    def test_summary_uses_overall_score(
        self, validation: ValidationResult, readiness: ReadinessScore
    ) -> None:
        report = build_report(
            upload_id="u_0123456789abcdef",
            rows_parsed=2,
            mapping={"issue_date": "invoice.issue_date", "notes": None},
            validation=validation,
            readiness=readiness,
            report_id="r_0000000000000001",
            generated_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )

        assert report["reportId"] == "r_0000000000000001"
        assert report["generatedAt"] == "2026-01-01T00:00:00+00:00"
        assert report["summary"] == {
            "totalRows": 2,
            "passedRows": 1,
            "failedRows": 1,
            "validationScore": 50,
            "overallScore": 80,
            "readinessLevel": "MEDIUM READINESS",
        }
        assert report["categoryScores"]["coverage"] == 70
        assert report["recommendations"][0] == "Good foundation, minor improvements recommended"

    def test_without_readiness_falls_back_to_validation_score(
        self, validation: ValidationResult
    ) -> None:
        report = build_report(upload_id="u_1", rows_parsed=2, mapping={}, validation=validation)

        assert report["summary"]["overallScore"] == 50
        assert report["summary"]["readinessLevel"] == "LOW READINESS"
        assert report["reportId"].startswith("r_")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


@pytest.fixture()
def report(validation: ValidationResult, readiness: ReadinessScore) -> dict:
    return build_report(
        upload_id="u_1",
        rows_parsed=2,
        mapping={"issue_date": "invoice.issue_date", "notes": None},
        validation=validation,
        readiness=readiness,
    )


class TestRendering:
    def test_csv_sections_in_order(self, report: dict) -> None:
        sections = [row["section"] for row in report_csv_rows(report) if row["section"]]
        ordered = list(dict.fromkeys(sections))
        assert ordered == ["SUMMARY", "FIELD_MAPPING", "RULE_BREAKDOWN", "ISSUES"]

    def test_csv_mapping_status(self, report: dict) -> None:
        mapping_rows = [
            row for row in report_csv_rows(report)
            if row["section"] == "FIELD_MAPPING" and row["field"] != "Upload Field"
        ]
        assert [(row["field"], row["details"]) for row in mapping_rows] == [
            ("issue_date", "Mapped"),
            ("notes", "Unmapped"),
        ]

    def test_render_csv(self, report: dict) -> None:
        body, media_type = render_report(report, "CSV")
        assert media_type.startswith("text/csv")
        parsed = list(csv.DictReader(io.StringIO(body)))
        assert parsed[0] == {"section": "SUMMARY", "field": "Total Rows", "value": "2", "details": ""}
        assert parsed[3]["value"] == "80%"

    def test_render_json(self, report: dict) -> None:
        body, media_type = render_report(report, "json")
        assert media_type == "application/json"
        assert json.loads(body)["summary"]["overallScore"] == 80

    def test_render_pdf(self, report: dict) -> None:
        body, media_type = render_report(report, "PDF")
        assert media_type == "application/pdf"
        assert isinstance(body, bytes)
        assert body.startswith(b"%PDF-")
        assert body.rstrip().endswith(b"%%EOF")

    def test_unknown_format(self, report: dict) -> None:
        with pytest.raises(UnsupportedReportFormatError):
            render_report(report, "xlsx")


# ---------------------------------------------------------------------------
# PDF tables
# ---------------------------------------------------------------------------


class TestPdfTables:
    def test_mapping_rows(self, report: dict) -> None:
        assert mapping_table_rows(report)[1:] == [
            ["issue_date", "invoice.issue_date", "Mapped"],
            ["notes", "Unmapped", "Unmapped"],
        ]

    def test_rule_rows_carry_success_rate(self, report: dict) -> None:
        assert rule_table_rows(report)[1:] == [
            ["TOTALS BALANCE", "2", "0", "100%"],
            ["DATE ISO", "1", "1", "50%"],
        ]

    def test_empty_report_has_placeholder_rows(self) -> None:
        assert mapping_table_rows({})[1] == ["No mappings available", "", ""]
        assert rule_table_rows({})[1][0] == "No rule results available"

    def test_issue_rows_are_capped(self) -> None:
        issues = [
            {"row": n, "rule": "DATE_ISO", "field": "invoice.issue_date", "error": "<bad> & late"}
            for n in range(1, 31)
        ]
        rows = issue_table_rows({"issues": issues})
        assert len(rows) == PDF_ISSUE_LIMIT + 1
        assert rows[-1][0] == "20"

    def test_markup_in_issue_text_renders(self) -> None:
        report = {"issues": [{"row": 1, "rule": "X", "field": None, "error": "<b>unclosed & raw"}] * 25}
        assert render_pdf(report).startswith(b"%PDF-")
