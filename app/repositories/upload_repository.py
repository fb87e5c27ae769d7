"""
app/repositories/upload_repository.py

Persistence helpers for uploaded invoice batches.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.upload import Upload, default_expiry


class UploadRepository:
    """
    Repository for uploads. Callers own commit/rollback.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        *,
        upload_id: str,
        original_filename: str,
        file_type: str,
        raw_rows: list[dict[str, Any]],
        preview_rows: list[dict[str, Any]],
        column_types: dict[str, str],
        country: str | None = None,
        erp: str | None = None,
        retention_days: int | None = None,
    ) -> Upload:
        upload = Upload(
            upload_id=upload_id,
            original_filename=original_filename,
            file_type=file_type,
            rows_parsed=len(raw_rows),
            raw_rows=raw_rows,
            preview_rows=preview_rows,
            column_types=column_types,
            country=country,
            erp=erp,
        )
        if retention_days is not None:
            upload.expires_at = default_expiry(retention_days)
        self._session.add(upload)
        self._session.flush()
        return upload

    def get(self, upload_id: str, *, include_expired: bool = False) -> Upload | None:
        """
        Fetch one upload by public id; expired uploads are hidden by default.
        """

        stmt = select(Upload).where(Upload.upload_id == upload_id)
        if not include_expired:
            stmt = stmt.where(Upload.expires_at > datetime.now(timezone.utc))
        return self._session.execute(stmt).scalars().first()

    def list_recent(self, *, limit: int, offset: int) -> list[Upload]:
        stmt = (
            select(Upload)
            .order_by(Upload.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self._session.execute(stmt).scalars().all())

    def count(self) -> int:
        return int(self._session.execute(select(func.count()).select_from(Upload)).scalar_one())

    def set_status(self, upload: Upload, status: str) -> Upload:
        upload.status = status
        self._session.flush()
        return upload
