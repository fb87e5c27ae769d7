"""
app/repositories/validation_run_repository.py

Persistence helpers for rule-engine runs.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.validation_run import ValidationRun


class ValidationRunRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def save(
        self,
        *,
        validation_id: str,
        upload_id: str,
        mapping_id: str | None,
        results: dict[str, Any],
        field_mappings: dict[str, str | None] | None = None,
    ) -> ValidationRun:
        run = ValidationRun(
            validation_id=validation_id,
            upload_id=upload_id,
            mapping_id=mapping_id,
            score=int(results.get("score") or 0),
            results=results,
            field_mappings=field_mappings,
        )
        self._session.add(run)
        self._session.flush()
        return run

    def get(self, validation_id: str) -> ValidationRun | None:
        stmt = select(ValidationRun).where(ValidationRun.validation_id == validation_id)
        return self._session.execute(stmt).scalars().first()

    def latest_for_upload(self, upload_id: str) -> ValidationRun | None:
        stmt = (
            select(ValidationRun)
            .where(ValidationRun.upload_id == upload_id)
            .order_by(ValidationRun.created_at.desc())
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def latest_for_uploads(self, upload_ids: Sequence[str]) -> dict[str, ValidationRun]:
        """
        Newest run per upload in one query (PostgreSQL ``DISTINCT ON``).

        Uploads without a run are absent from the result.
        """

        if not upload_ids:
            return {}
        stmt = (
            select(ValidationRun)
            .where(ValidationRun.upload_id.in_(list(upload_ids)))
            .order_by(ValidationRun.upload_id, ValidationRun.created_at.desc())
            .distinct(ValidationRun.upload_id)
        )
        return {run.upload_id: run for run in self._session.execute(stmt).scalars().all()}
