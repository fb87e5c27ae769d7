"""
app/services/report_service.py

Readiness report assembly and rendering.

A report is a plain JSON-safe document built from one analysis run:

    summary          rows checked/passed/failed, overall score, level
    categoryScores   data / coverage / rules / posture
    coverageAnalysis matched / close / missing / summary
    fieldMapping     source column -> standard path (or None)
    issues           every rule issue, in engine order
    ruleBreakdown    per-rule passed/failed counts
    recommendations  human-readable next steps

CSV rendering flattens the same document into four sections
(SUMMARY, FIELD_MAPPING, RULE_BREAKDOWN, ISSUES) separated by blank rows.
PDF rendering lives in ``app.services.report_pdf``.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from typing import Any, Mapping

from app.domain.identifiers import REPORT_PREFIX, new_public_id
from app.domain.validation import ValidationResult
from app.services.report_pdf import render_pdf
from readiness.orchestrator import ReadinessScore
from readiness.scoring import readiness_level
from rules.invoice_rules import (
    CURRENCY_ALLOWED,
    DATE_ISO,
    LINE_MATH,
    TOTALS_BALANCE,
    TRN_PRESENT,
)

REPORT_FORMATS = ("json", "csv", "pdf")

CSV_FIELDS = ("section", "field", "value", "details")

NO_VALIDATION_RECOMMENDATION = "Complete data validation to get specific recommendations."
FOLLOW_UP_RECOMMENDATION = "Consider implementing automated validation checks in your ERP system"

# Exclusive upper bounds, lowest first.
_SCORE_BAND_RECOMMENDATIONS: tuple[tuple[int, str], ...] = (
    (50, "Urgent action required: Data quality is critically low"),
    (70, "Significant improvements needed before e-invoicing implementation"),
    (90, "Good foundation, minor improvements recommended"),
)
_TOP_BAND_RECOMMENDATION = "Excellent data quality, ready for e-invoicing implementation"

# Ordered as emitted.
RULE_RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    (DATE_ISO, "Standardize date formats to YYYY-MM-DD across all records"),
    (CURRENCY_ALLOWED, "Update currency codes to valid ISO standards (AED, SAR, MYR, USD)"),
    (TOTALS_BALANCE, "Review and correct VAT calculation formulas"),
    (LINE_MATH, "Verify line item calculations (qty × unit_price = line_total)"),
    (TRN_PRESENT, "Ensure TRN numbers are provided for both buyer and seller"),
)


class UnsupportedReportFormatError(ValueError):
    """
    Raised when a report is requested in an unknown format.
    """


def new_report_id() -> str:
    return new_public_id(REPORT_PREFIX)


def _validation_payload(validation: ValidationResult | Mapping[str, Any] | None) -> dict[str, Any]:
    if validation is None:
        return {}
    if isinstance(validation, ValidationResult):
        return validation.to_dict()
    return dict(validation)


def generate_recommendations(
    validation: ValidationResult | Mapping[str, Any] | None,
    score: int | None = None,
) -> list[str]:
    """
    Score-band message, one message per failing rule, then a generic follow-up
    when only the band message applies.

    Args:
        validation: Rule engine result or its serialised form.
        score: Score used for the band message; defaults to the validation score.
    """

    payload = _validation_payload(validation)
    if not payload:
        return [NO_VALIDATION_RECOMMENDATION]

    band_score = score if score is not None else int(payload.get("score") or 0)
    recommendations = [_band_recommendation(band_score)]

    failing_rules = {issue.get("rule") for issue in payload.get("issues") or []}
    for name, result in (payload.get("ruleResults") or {}).items():
        if isinstance(result, Mapping) and result.get("failed"):
            failing_rules.add(name)

    for rule_name, message in RULE_RECOMMENDATIONS:
        if rule_name in failing_rules:
            recommendations.append(message)

    if len(recommendations) == 1:
        recommendations.append(FOLLOW_UP_RECOMMENDATION)
    return recommendations


def _band_recommendation(score: int) -> str:
    for threshold, message in _SCORE_BAND_RECOMMENDATIONS:
        if score < threshold:
            return message
    return _TOP_BAND_RECOMMENDATION


def build_report(
    *,
    upload_id: str,
    rows_parsed: int,
    mapping: Mapping[str, str | None] | None,
    validation: ValidationResult | Mapping[str, Any] | None,
    readiness: ReadinessScore | None = None,
    coverage: Mapping[str, Any] | None = None,
    mapping_id: str | None = None,
    validation_id: str | None = None,
    report_id: str | None = None,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Assemble the JSON readiness report for one analysis run.

    The summary score is the overall readiness score when one is supplied,
    otherwise the validation score.
    """

    payload = _validation_payload(validation)
    if readiness is not None:
        overall_score = readiness.overall_score
        level = readiness.readiness_level
        category_scores: dict[str, Any] = readiness.category_scores.to_dict()
    else:
        overall_score = int(payload.get("score") or 0)
        level = readiness_level(overall_score)
        category_scores = {}

    return {
        "reportId": report_id or new_report_id(),
        "generatedAt": (generated_at or datetime.now(timezone.utc)).isoformat(),
        "metadata": {
            "uploadId": upload_id,
            "rowsParsed": rows_parsed,
            "mappingId": mapping_id,
            "validationId": validation_id,
        },
        "summary": {
            "totalRows": int(payload.get("rowsChecked") or 0),
            "passedRows": int(payload.get("passed") or 0),
            "failedRows": int(payload.get("failed") or 0),
            "validationScore": int(payload.get("score") or 0),
            "overallScore": overall_score,
            "readinessLevel": level,
        },
        "categoryScores": category_scores,
        "coverageAnalysis": dict(coverage or {}),
        "fieldMapping": dict(mapping or {}),
        "issues": list(payload.get("issues") or []),
        "ruleBreakdown": dict(payload.get("ruleResults") or {}),
        "recommendations": generate_recommendations(payload or None, overall_score),
    }


def _blank_row() -> dict[str, Any]:
    return {name: "" for name in CSV_FIELDS}


def report_csv_rows(report: Mapping[str, Any]) -> list[dict[str, Any]]:
    """
    Flatten a report into section/field/value/details rows.
    """

    summary = report.get("summary") or {}
    rows: list[dict[str, Any]] = [
        {"section": "SUMMARY", "field": "Total Rows", "value": summary.get("totalRows", 0), "details": ""},
        {"section": "SUMMARY", "field": "Passed Rows", "value": summary.get("passedRows", 0), "details": ""},
        {"section": "SUMMARY", "field": "Failed Rows", "value": summary.get("failedRows", 0), "details": ""},
        {
            "section": "SUMMARY",
            "field": "Overall Score",
            "value": f"{summary.get('overallScore', 0)}%",
            "details": summary.get("readinessLevel", ""),
        },
        _blank_row(),
        {"section": "FIELD_MAPPING", "field": "Upload Field", "value": "GETS Field", "details": "Mapping Status"},
    ]

    for source_column, target in (report.get("fieldMapping") or {}).items():
        rows.append(
            {
                "section": "FIELD_MAPPING",
                "field": source_column,
                "value": target or "",
                "details": "Mapped" if target else "Unmapped",
            }
        )

    rows.append(_blank_row())
    rows.append({"section": "RULE_BREAKDOWN", "field": "Rule", "value": "Passed", "details": "Failed"})
    for rule_name, result in (report.get("ruleBreakdown") or {}).items():
        rows.append(
            {
                "section": "RULE_BREAKDOWN",
                "field": rule_name,
                "value": result.get("passed", 0),
                "details": result.get("failed", 0),
            }
        )

    rows.append(_blank_row())
    rows.append({"section": "ISSUES", "field": "Row", "value": "Field", "details": "Error Message"})
    for issue in report.get("issues") or []:
        rows.append(
            {
                "section": "ISSUES",
                "field": issue.get("row", ""),
                "value": issue.get("field") or "",
                "details": issue.get("error", ""),
            }
        )
    return rows


def render_csv(report: Mapping[str, Any]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(
        buf,
        fieldnames=list(CSV_FIELDS),
        extrasaction="ignore",
        restval="",
        lineterminator="\r\n",
    )
    writer.writeheader()
    writer.writerows(report_csv_rows(report))
    return buf.getvalue()


def render_report(report: Mapping[str, Any], report_format: str) -> tuple[str | bytes, str]:
    """
    Render a report document.

    Returns:
        ``(body, media_type)`` for the requested format; PDF bodies are bytes.

    Raises:
        UnsupportedReportFormatError: For anything other than json, csv or pdf.
    """

    fmt = report_format.strip().lower()
    if fmt == "json":
        return json.dumps(report, indent=2, default=str), "application/json"
    if fmt == "csv":
        return render_csv(report), "text/csv; charset=utf-8"
    if fmt == "pdf":
        return render_pdf(report), "application/pdf"
    raise UnsupportedReportFormatError(
        f"Unsupported report format '{report_format}'. Allowed values: {', '.join(REPORT_FORMATS)}."
    )
