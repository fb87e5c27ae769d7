"""
app/repositories/field_mapping_repository.py

Persistence helpers for saved field mappings.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.field_mapping import FieldMappingRecord


class FieldMappingRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def save(
        self,
        *,
        mapping_id: str,
        upload_id: str,
        mappings: dict[str, str | None],
        auto_suggest: bool = False,
        standard_fields: list[dict[str, Any]] | None = None,
    ) -> FieldMappingRecord:
        record = FieldMappingRecord(
            mapping_id=mapping_id,
            upload_id=upload_id,
            mappings=mappings,
            auto_suggest=auto_suggest,
            standard_fields=standard_fields,
        )
        self._session.add(record)
        self._session.flush()
        return record

    def get(self, mapping_id: str) -> FieldMappingRecord | None:
        stmt = select(FieldMappingRecord).where(FieldMappingRecord.mapping_id == mapping_id)
        return self._session.execute(stmt).scalars().first()

    def latest_for_upload(self, upload_id: str) -> FieldMappingRecord | None:
        """
        Most recently saved mapping for an upload.
        """

        stmt = (
            select(FieldMappingRecord)
            .where(FieldMappingRecord.upload_id == upload_id)
            .order_by(FieldMappingRecord.created_at.desc())
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()
