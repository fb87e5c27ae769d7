"""
app/services/report_pdf.py

PDF rendering of a readiness report document (A4, reportlab platypus).

Sections follow the JSON document: upload information, validation summary,
field mapping, rule results, the first ``PDF_ISSUE_LIMIT`` issues and the
recommendations.
"""

from __future__ import annotations

import io
from typing import Any, Mapping
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from readiness.normalizer import round_half_up

PDF_TITLE = "E-Invoicing Readiness Report"
PDF_ISSUE_LIMIT = 20

_HEADER_BACKGROUND = colors.HexColor("#1f4e79")
_GRID_COLOR = colors.HexColor("#c8ccd2")

_TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BACKGROUND),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, _GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
)


def mapping_table_rows(report: Mapping[str, Any]) -> list[list[str]]:
    rows = [["Your Field", "GETS Standard Field", "Status"]]
    mapping = report.get("fieldMapping") or {}
    if not mapping:
        rows.append(["No mappings available", "", ""])
    for source_column, target in mapping.items():
        rows.append([str(source_column), target or "Unmapped", "Mapped" if target else "Unmapped"])
    return rows


def rule_table_rows(report: Mapping[str, Any]) -> list[list[str]]:
    rows = [["Rule", "Passed", "Failed", "Success Rate"]]
    breakdown = report.get("ruleBreakdown") or {}
    if not breakdown:
        rows.append(["No rule results available", "", "", ""])
    for rule_name, result in breakdown.items():
        passed = int(result.get("passed") or 0)
        failed = int(result.get("failed") or 0)
        total = passed + failed
        rate = round_half_up(passed / total * 100) if total else 0
        rows.append([rule_name.replace("_", " "), str(passed), str(failed), f"{rate}%"])
    return rows


def issue_table_rows(report: Mapping[str, Any], limit: int = PDF_ISSUE_LIMIT) -> list[list[Any]]:
    """
    Header plus at most ``limit`` issues; error text is wrapped in a Paragraph.
    """

    cell_style = getSampleStyleSheet()["BodyText"]
    rows: list[list[Any]] = [["Row", "Field", "Rule", "Error Message"]]
    for issue in (report.get("issues") or [])[:limit]:
        rows.append(
            [
                str(issue.get("row", "")),
                issue.get("field") or "",
                issue.get("rule") or "",
                Paragraph(escape(str(issue.get("error", ""))), cell_style),
            ]
        )
    return rows


def _table(rows: list[list[Any]], col_widths: list[float]) -> Table:
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(_TABLE_STYLE)
    return table


def render_pdf(report: Mapping[str, Any]) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=PDF_TITLE,
    )
    styles = getSampleStyleSheet()
    heading = ParagraphStyle("ReportHeading", parent=styles["Heading2"], spaceBefore=10, spaceAfter=6)
    body = styles["BodyText"]

    metadata = report.get("metadata") or {}
    summary = report.get("summary") or {}
    issues = report.get("issues") or []

    story: list[Any] = [
        Paragraph(PDF_TITLE, styles["Title"]),
        Paragraph(escape(f"Generated at {report.get('generatedAt', '')}"), body),
        Spacer(1, 4 * mm),
        Paragraph("Upload Information", heading),
        Paragraph(escape(f"Upload ID: {metadata.get('uploadId') or 'N/A'}"), body),
        Paragraph(escape(f"Rows Parsed: {metadata.get('rowsParsed') or 0}"), body),
        Paragraph(escape(f"Mapping ID: {metadata.get('mappingId') or 'N/A'}"), body),
        Paragraph("Validation Summary", heading),
        Paragraph(escape(f"Overall Score: {summary.get('overallScore', 0)}%"), body),
        Paragraph(escape(f"Readiness Level: {summary.get('readinessLevel', '')}"), body),
        Paragraph(
            escape(
                f"Total Rows: {summary.get('totalRows', 0)}  "
                f"Passed: {summary.get('passedRows', 0)}  "
                f"Failed: {summary.get('failedRows', 0)}  "
                f"Issues Found: {len(issues)}"
            ),
            body,
        ),
        Paragraph("Field Mapping", heading),
        _table(mapping_table_rows(report), [60 * mm, 70 * mm, 50 * mm]),
        Paragraph("Rule Validation Results", heading),
        _table(rule_table_rows(report), [70 * mm, 35 * mm, 35 * mm, 40 * mm]),
    ]

    if issues:
        story.append(Paragraph(f"Validation Issues (Top {PDF_ISSUE_LIMIT})", heading))
        story.append(_table(issue_table_rows(report), [15 * mm, 45 * mm, 35 * mm, 85 * mm]))
        if len(issues) > PDF_ISSUE_LIMIT:
            story.append(
                Paragraph(f"<i>Showing top {PDF_ISSUE_LIMIT} issues out of {len(issues)} total</i>", body)
            )

    story.append(Paragraph("Recommendations", heading))
    for recommendation in report.get("recommendations") or []:
        story.append(Paragraph(escape(str(recommendation)), body, bulletText="•"))

    doc.build(story)
    return buf.getvalue()
