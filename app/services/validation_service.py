"""
app/services/validation_service.py

Runs the rule engine for an upload's saved mapping and persists the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_analyzer_settings
from app.domain.identifiers import VALIDATION_PREFIX, new_public_id
from app.domain.validation import ValidationResult
from app.repositories.field_mapping_repository import FieldMappingRepository
from app.repositories.upload_repository import UploadRepository
from app.repositories.validation_run_repository import ValidationRunRepository
from app.services.errors import (
    AnalysisPersistenceError,
    MappingNotFoundError,
    UploadNotFoundError,
    ValidationNotFoundError,
)
from db.models.upload import UploadStatus
from db.models.validation_run import ValidationRun
from rules.engine import RuleEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationRunSummary:
    validation_id: str
    upload_id: str
    mapping_id: str
    result: ValidationResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "validationId": self.validation_id,
            "uploadId": self.upload_id,
            "mappingId": self.mapping_id,
            **self.result.to_dict(),
        }


class ValidationService:
    """
    Rule checks over stored uploads.
    """

    def __init__(self, *, engine: RuleEngine | None = None) -> None:
        self._engine = engine or RuleEngine()

    @property
    def engine(self) -> RuleEngine:
        return self._engine

    def rule_definitions(self) -> dict[str, dict[str, str]]:
        return self._engine.rule_definitions()

    def check_rules(self, *, db: Session, upload_id: str) -> ValidationRunSummary:
        """
        Validate the upload against its latest mapping and store the run.

        Raises:
            UploadNotFoundError: upload id is unknown or expired.
            MappingNotFoundError: no mapping saved for the upload.
            BatchTooLargeError: upload holds more rows than the engine accepts.
            AnalysisPersistenceError: the run cannot be stored.
        """

        upload_repository = UploadRepository(db)
        upload = upload_repository.get(upload_id)
        if upload is None:
            raise UploadNotFoundError(upload_id)

        mapping = FieldMappingRepository(db).latest_for_upload(upload_id)
        if mapping is None:
            raise MappingNotFoundError(upload_id)

        result = self._engine.run_validation(upload.raw_rows or [], mapping.mappings)
        validation_id = new_public_id(VALIDATION_PREFIX)
        try:
            ValidationRunRepository(db).save(
                validation_id=validation_id,
                upload_id=upload_id,
                mapping_id=mapping.mapping_id,
                results=result.to_dict(),
                field_mappings=mapping.mappings,
            )
            upload_repository.set_status(upload, UploadStatus.VALIDATED)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise AnalysisPersistenceError("Failed to store validation results.") from exc

        logger.info(
            "Validation stored validation_id=%s upload_id=%s score=%s",
            validation_id,
            upload_id,
            result.score,
        )
        return ValidationRunSummary(
            validation_id=validation_id,
            upload_id=upload_id,
            mapping_id=mapping.mapping_id,
            result=result,
        )

    def get_run(self, *, db: Session, validation_id: str) -> ValidationRun:
        run = ValidationRunRepository(db).get(validation_id)
        if run is None:
            raise ValidationNotFoundError(validation_id)
        return run

    def latest_run_for_upload(self, *, db: Session, upload_id: str) -> ValidationRun:
        run = ValidationRunRepository(db).latest_for_upload(upload_id)
        if run is None:
            raise ValidationNotFoundError(upload_id)
        return run


@lru_cache(maxsize=1)
def get_validation_service() -> ValidationService:
    """
    Build and cache the validation service with env-driven settings.
    """
    settings = get_analyzer_settings()
    return ValidationService(
        engine=RuleEngine(
            max_rows=settings.max_rows,
            log_rule_failures=settings.log_rule_failures,
        )
    )
