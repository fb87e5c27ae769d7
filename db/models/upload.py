"""
db/models/upload.py

Uploaded invoice batches awaiting mapping, validation and scoring.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

DEFAULT_RETENTION_DAYS = 7


class UploadStatus:
    UPLOADED = "uploaded"
    MAPPED = "mapped"
    VALIDATED = "validated"
    COMPLETED = "completed"


class UploadFileType:
    CSV = "csv"
    JSON = "json"


def default_expiry(retention_days: int = DEFAULT_RETENTION_DAYS) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=retention_days)


class Upload(Base, TimestampMixin):
    __tablename__ = "uploads"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    upload_id: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        unique=True,
        comment="Public identifier, u_<hex>",
    )
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="csv, json",
    )
    rows_parsed: Mapped[int] = mapped_column(Integer, nullable=False)
    raw_rows: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False)
    preview_rows: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False)
    column_types: Mapped[dict[str, str]] = mapped_column(JSONB, nullable=False)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    erp: Mapped[str | None] = mapped_column(String(120), nullable=True)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=UploadStatus.UPLOADED,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=default_expiry,
    )

    __table_args__ = (
        Index("ix_uploads_status", "status"),
        Index("ix_uploads_created_at", "created_at"),
        Index("ix_uploads_expires_at", "expires_at"),
    )
