"""
db/models/readiness_report.py

Generated readiness reports and their download counters.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ReportFormat:
    JSON = "json"
    CSV = "csv"
    PDF = "pdf"


class ReadinessReport(Base, TimestampMixin):
    __tablename__ = "readiness_reports"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    report_id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    upload_id: Mapped[str] = mapped_column(
        String(40),
        ForeignKey("uploads.upload_id", ondelete="CASCADE"),
        nullable=False,
    )
    validation_id: Mapped[str | None] = mapped_column(
        String(40),
        ForeignKey("validation_runs.validation_id", ondelete="SET NULL"),
        nullable=True,
    )
    report_data: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    format: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=ReportFormat.JSON,
        comment="json, csv",
    )
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_readiness_reports_upload_id", "upload_id"),
        Index("ix_readiness_reports_created_at", "created_at"),
        Index("ix_readiness_reports_format", "format"),
    )
