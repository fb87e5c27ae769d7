"""
app/repositories/readiness_report_repository.py

Persistence helpers for generated readiness reports.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.readiness_report import ReadinessReport


class ReadinessReportRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def save(
        self,
        *,
        report_id: str,
        upload_id: str,
        validation_id: str | None,
        report_data: dict[str, Any],
        report_format: str,
        file_size: int | None = None,
    ) -> ReadinessReport:
        report = ReadinessReport(
            report_id=report_id,
            upload_id=upload_id,
            validation_id=validation_id,
            report_data=report_data,
            format=report_format,
            file_size=file_size,
        )
        self._session.add(report)
        self._session.flush()
        return report

    def get(self, report_id: str) -> ReadinessReport | None:
        stmt = select(ReadinessReport).where(ReadinessReport.report_id == report_id)
        return self._session.execute(stmt).scalars().first()

    def latest_for_upload(self, upload_id: str) -> ReadinessReport | None:
        stmt = (
            select(ReadinessReport)
            .where(ReadinessReport.upload_id == upload_id)
            .order_by(ReadinessReport.created_at.desc())
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def list_for_upload(self, upload_id: str) -> list[ReadinessReport]:
        stmt = (
            select(ReadinessReport)
            .where(ReadinessReport.upload_id == upload_id)
            .order_by(ReadinessReport.created_at.desc())
        )
        return list(self._session.execute(stmt).scalars().all())

    def record_download(self, report: ReadinessReport) -> ReadinessReport:
        report.download_count = (report.download_count or 0) + 1
        self._session.flush()
        return report
