"""
db/models/validation_run.py

One rule-engine run over an upload with a given mapping.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ValidationRun(Base, TimestampMixin):
    __tablename__ = "validation_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    validation_id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    upload_id: Mapped[str] = mapped_column(
        String(40),
        ForeignKey("uploads.upload_id", ondelete="CASCADE"),
        nullable=False,
    )
    mapping_id: Mapped[str | None] = mapped_column(
        String(40),
        ForeignKey("field_mappings.mapping_id", ondelete="SET NULL"),
        nullable=True,
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    results: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Serialised validation result",
    )
    field_mappings: Mapped[dict[str, str | None] | None] = mapped_column(JSONB, nullable=True)

    __table_args__ = (
        Index("ix_validation_runs_upload_id", "upload_id"),
        Index("ix_validation_runs_created_at", "created_at"),
        Index("ix_validation_runs_score", "score"),
    )
