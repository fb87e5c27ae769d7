"""
app/schemas/report.py

Schemas for report listing endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class ReportSummaryItem(CamelModel):
    report_id: str
    validation_id: str | None = None
    format: str
    overall_score: int | None = None
    readiness_level: str | None = None
    download_count: int = Field(..., ge=0)
    created_at: datetime


class ReportListResponse(CamelModel):
    upload_id: str
    reports: list[ReportSummaryItem] = Field(default_factory=list)
