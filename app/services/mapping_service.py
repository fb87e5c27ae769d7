"""
app/services/mapping_service.py

Field mapping workflow: expose the standard catalog, suggest mappings for
an upload's columns, and persist validated mappings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.gets_schema import NAMESPACES, SCHEMA_VERSION, SchemaRegistry, get_schema_registry
from app.domain.identifiers import MAPPING_PREFIX, new_public_id
from app.logging_utils import log_event
from app.mappers.field_mapper import FieldMapper
from app.repositories.field_mapping_repository import FieldMappingRepository
from app.repositories.upload_repository import UploadRepository
from app.services.errors import AnalysisPersistenceError, MappingNotFoundError, UploadNotFoundError
from app.validators.mapping_validator import MappingValidator
from db.models.field_mapping import FieldMappingRecord
from db.models.upload import Upload, UploadStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingSuggestionSummary:
    upload_id: str
    source_columns: list[str]
    suggestions: dict[str, str | None]
    match_strategies: dict[str, str] = field(default_factory=dict)

    @property
    def matched_fields(self) -> int:
        return sum(1 for target in self.suggestions.values() if target)


@dataclass(frozen=True)
class SavedMapping:
    mapping_id: str
    upload_id: str
    mappings: dict[str, str | None]
    mapped_fields: int
    total_standard_fields: int


def source_columns_for(upload: Upload) -> list[str]:
    """
    Distinct column names in first-seen order across the stored rows.
    """

    columns: list[str] = []
    seen: set[str] = set()
    for row in upload.raw_rows or []:
        for column in row:
            if column not in seen:
                seen.add(column)
                columns.append(column)
    return columns


class MappingService:
    """
    Coordinates suggestion, validation and persistence of field mappings.
    """

    def __init__(self, *, registry: SchemaRegistry | None = None, mapper: FieldMapper | None = None) -> None:
        self._registry = registry or get_schema_registry()
        self._mapper = mapper or FieldMapper(self._registry)
        self._validator = MappingValidator(standard_fields=self._registry.fields())

    def standard_fields(self) -> dict[str, Any]:
        fields = [standard_field.to_dict() for standard_field in self._registry.fields()]
        grouped = self._registry.by_namespace()
        return {
            "schema": {"name": "GETS", "version": SCHEMA_VERSION},
            "fields": fields,
            "categories": {
                namespace: [standard_field.to_dict() for standard_field in grouped.get(namespace, [])]
                for namespace in NAMESPACES
            },
        }

    def suggest_for_upload(self, *, db: Session, upload_id: str) -> MappingSuggestionSummary:
        upload = UploadRepository(db).get(upload_id)
        if upload is None:
            raise UploadNotFoundError(upload_id)

        columns = source_columns_for(upload)
        suggestion = self._mapper.resolve_suggestions(columns)
        return MappingSuggestionSummary(
            upload_id=upload_id,
            source_columns=columns,
            suggestions=suggestion.mappings,
            match_strategies=suggestion.match_strategies,
        )

    def save_mapping(
        self,
        *,
        db: Session,
        upload_id: str,
        mappings: Any,
        auto_suggest: bool = False,
    ) -> SavedMapping:
        """
        Validate and persist a mapping, moving the upload to ``mapped``.

        Raises:
            SchemaMappingError: payload is not an object or has unknown targets.
            UploadNotFoundError: upload id is unknown or expired.
            AnalysisPersistenceError: the mapping cannot be stored.
        """

        clean_mapping = self._validator.validate(mapping=mappings)

        upload_repository = UploadRepository(db)
        upload = upload_repository.get(upload_id)
        if upload is None:
            raise UploadNotFoundError(upload_id)

        mapping_id = new_public_id(MAPPING_PREFIX)
        try:
            FieldMappingRepository(db).save(
                mapping_id=mapping_id,
                upload_id=upload_id,
                mappings=clean_mapping,
                auto_suggest=auto_suggest,
                standard_fields=[standard_field.to_dict() for standard_field in self._registry.fields()],
            )
            upload_repository.set_status(upload, UploadStatus.MAPPED)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise AnalysisPersistenceError("Failed to store field mapping.") from exc

        mapped_fields = sum(1 for target in clean_mapping.values() if target)
        log_event(
            logger,
            logging.INFO,
            "mapping_saved",
            upload_id=upload_id,
            mapping_id=mapping_id,
            mapped_fields=mapped_fields,
            auto_suggest=auto_suggest,
        )
        return SavedMapping(
            mapping_id=mapping_id,
            upload_id=upload_id,
            mappings=clean_mapping,
            mapped_fields=mapped_fields,
            total_standard_fields=len(self._registry),
        )

    def latest_mapping(self, *, db: Session, upload_id: str) -> FieldMappingRecord:
        record = FieldMappingRepository(db).latest_for_upload(upload_id)
        if record is None:
            raise MappingNotFoundError(upload_id)
        return record


@lru_cache(maxsize=1)
def get_mapping_service() -> MappingService:
    return MappingService()
