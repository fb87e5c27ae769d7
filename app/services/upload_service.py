"""
app/services/upload_service.py

Upload intake: decode the file, derive preview and column types, persist
the batch with a retention window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_analyzer_settings, get_upload_settings
from app.domain.identifiers import UPLOAD_PREFIX, new_public_id
from app.logging_utils import log_event
from app.repositories.upload_repository import UploadRepository
from app.repositories.validation_run_repository import ValidationRunRepository
from app.services.errors import (
    AnalysisPersistenceError,
    EmptyUploadError,
    UploadNotFoundError,
    UploadTooLargeError,
)
from app.services.file_parser import (
    detect_column_types,
    file_extension,
    generate_preview,
    parse_file,
    parse_text_with_format,
    typed_preview,
)
from db.models.upload import Upload

logger = logging.getLogger(__name__)

TEXT_PAYLOAD_FILENAME = "uploaded_data"


@dataclass(frozen=True)
class UploadSummary:
    upload_id: str
    rows_parsed: int
    preview: list[dict[str, Any]] = field(default_factory=list)
    column_types: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UploadHistoryEntry:
    upload_id: str
    file_name: str
    rows_parsed: int
    status: str
    score: int | None
    created_at: Any
    validated_at: Any


@dataclass(frozen=True)
class UploadHistoryPage:
    uploads: list[UploadHistoryEntry]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.total > self.offset + self.limit


class UploadService:
    """
    Coordinates parsing and persistence of invoice uploads.
    """

    def __init__(
        self,
        *,
        max_rows: int,
        preview_rows: int,
        type_sample_size: int,
        retention_days: int,
        max_file_bytes: int,
    ) -> None:
        self._max_rows = max(1, max_rows)
        self._preview_rows = max(1, preview_rows)
        self._type_sample_size = max(1, type_sample_size)
        self._retention_days = max(1, retention_days)
        self._max_file_bytes = max(1, max_file_bytes)

    def ingest_file(
        self,
        *,
        content: bytes,
        filename: str,
        db: Session,
        country: str | None = None,
        erp: str | None = None,
    ) -> UploadSummary:
        """
        Parse an uploaded CSV/JSON file and store it as a new upload.

        Raises:
            UploadTooLargeError: file exceeds the configured byte limit.
            FileParseError: file cannot be decoded.
            EmptyUploadError: file decodes to zero rows.
            AnalysisPersistenceError: the upload cannot be stored.
        """

        if len(content) > self._max_file_bytes:
            raise UploadTooLargeError(size=len(content), max_bytes=self._max_file_bytes)

        rows = parse_file(content, filename, max_rows=self._max_rows)
        if not rows:
            raise EmptyUploadError("The uploaded file contains no data")

        return self._store(
            db=db,
            rows=rows,
            filename=filename,
            file_type=file_extension(filename),
            country=country,
            erp=erp,
        )

    def ingest_text(
        self,
        *,
        text: str,
        db: Session,
        country: str | None = None,
        erp: str | None = None,
    ) -> UploadSummary:
        """
        Store pasted JSON or CSV text as a new upload.
        """

        rows, detected_format = parse_text_with_format(text, max_rows=self._max_rows)
        if not rows:
            raise EmptyUploadError("The provided data contains no valid records")

        return self._store(
            db=db,
            rows=rows,
            filename=TEXT_PAYLOAD_FILENAME,
            file_type=detected_format,
            country=country,
            erp=erp,
        )

    def get_upload(self, *, db: Session, upload_id: str) -> Upload:
        upload = UploadRepository(db).get(upload_id)
        if upload is None:
            raise UploadNotFoundError(upload_id)
        return upload

    def history(self, *, db: Session, limit: int, offset: int) -> UploadHistoryPage:
        """
        Recent uploads, newest first, each with its latest validation score.
        """

        upload_repository = UploadRepository(db)
        validation_repository = ValidationRunRepository(db)
        uploads = upload_repository.list_recent(limit=limit, offset=offset)
        latest_runs = validation_repository.latest_for_uploads([upload.upload_id for upload in uploads])
        entries: list[UploadHistoryEntry] = []
        for upload in uploads:
            latest = latest_runs.get(upload.upload_id)
            entries.append(
                UploadHistoryEntry(
                    upload_id=upload.upload_id,
                    file_name=upload.original_filename,
                    rows_parsed=upload.rows_parsed,
                    status=upload.status,
                    score=latest.score if latest is not None else None,
                    created_at=upload.created_at,
                    validated_at=latest.created_at if latest is not None else None,
                )
            )
        return UploadHistoryPage(
            uploads=entries,
            total=upload_repository.count(),
            limit=limit,
            offset=offset,
        )

    def _store(
        self,
        *,
        db: Session,
        rows: list[dict[str, Any]],
        filename: str,
        file_type: str,
        country: str | None,
        erp: str | None,
    ) -> UploadSummary:
        column_types = detect_column_types(rows, sample_size=self._type_sample_size)
        preview = generate_preview(rows, limit=self._preview_rows)
        upload_id = new_public_id(UPLOAD_PREFIX)

        try:
            UploadRepository(db).create(
                upload_id=upload_id,
                original_filename=filename,
                file_type=file_type,
                raw_rows=rows,
                preview_rows=preview,
                column_types=column_types,
                country=country or None,
                erp=erp or None,
                retention_days=self._retention_days,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise AnalysisPersistenceError("Failed to store upload.") from exc

        log_event(
            logger,
            logging.INFO,
            "upload_stored",
            upload_id=upload_id,
            file_type=file_type,
            rows=len(rows),
            columns=len(column_types),
        )
        return UploadSummary(
            upload_id=upload_id,
            rows_parsed=len(rows),
            preview=typed_preview(preview, column_types),
            column_types=column_types,
        )


@lru_cache(maxsize=1)
def get_upload_service() -> UploadService:
    """
    Build and cache the upload service with env-driven settings.
    """
    analyzer_settings = get_analyzer_settings()
    upload_settings = get_upload_settings()
    return UploadService(
        max_rows=analyzer_settings.max_rows,
        preview_rows=analyzer_settings.preview_rows,
        type_sample_size=analyzer_settings.type_sample_size,
        retention_days=upload_settings.retention_days,
        max_file_bytes=upload_settings.max_file_bytes,
    )
