"""
db/models/field_mapping.py

Saved source column -> standard field mappings per upload.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class FieldMappingRecord(Base, TimestampMixin):
    __tablename__ = "field_mappings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    mapping_id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    upload_id: Mapped[str] = mapped_column(
        String(40),
        ForeignKey("uploads.upload_id", ondelete="CASCADE"),
        nullable=False,
    )
    mappings: Mapped[dict[str, str | None]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Source column -> standard path (null when unmapped)",
    )
    auto_suggest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    standard_fields: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONB, nullable=True)

    __table_args__ = (
        Index("ix_field_mappings_upload_id", "upload_id"),
        Index("ix_field_mappings_created_at", "created_at"),
    )
