"""
tests/test_repositories.py

Query-shape tests for the repositories that pick the newest row per upload,
and for the upload history page built on them.

No database: a recording session captures each statement and compiles it
with the PostgreSQL dialect.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql

from app.repositories.field_mapping_repository import FieldMappingRepository
from app.repositories.readiness_report_repository import ReadinessReportRepository
from app.repositories.validation_run_repository import ValidationRunRepository
from app.services import upload_service as upload_service_module
from app.services.upload_service import UploadService
from db.models.validation_run import ValidationRun


class RecordingSession:
    def __init__(self, rows: list[Any] | None = None) -> None:
        self.rows = rows or []
        self.statements: list[Any] = []

    def execute(self, stmt: Any) -> "RecordingSession":
        self.statements.append(stmt)
        return self

    def scalars(self) -> "RecordingSession":
        return self

    def first(self) -> Any:
        return self.rows[0] if self.rows else None

    def all(self) -> list[Any]:
        return list(self.rows)

    def sql(self, index: int = -1) -> str:
        return str(self.statements[index].compile(dialect=postgresql.dialect()))


def _run(upload_id: str, score: int) -> ValidationRun:
    return ValidationRun(
        validation_id=f"v_{upload_id[2:]}",
        upload_id=upload_id,
        mapping_id=None,
        score=score,
        results={},
    )


# ---------------------------------------------------------------------------
# Newest row per upload
# ---------------------------------------------------------------------------


class TestLatestForUpload:
    @pytest.mark.parametrize(
        "repository_cls",
        [ValidationRunRepository, FieldMappingRepository, ReadinessReportRepository],
    )
    def test_fetches_a_single_row(self, repository_cls: type) -> None:
        session = RecordingSession()
        assert repository_cls(session).latest_for_upload("u_0000000000000001") is None
        sql = session.sql()
        assert "ORDER BY" in sql
        assert "DESC" in sql
        assert "LIMIT" in sql

    def test_latest_for_uploads_is_one_distinct_on_query(self) -> None:
        runs = [_run("u_0000000000000001", 80), _run("u_0000000000000002", 40)]
        session = RecordingSession(runs)

        latest = ValidationRunRepository(session).latest_for_uploads(
            ["u_0000000000000001", "u_0000000000000002", "u_0000000000000003"]
        )

        assert len(session.statements) == 1
        assert "DISTINCT ON" in session.sql()
        assert {upload_id: run.score for upload_id, run in latest.items()} == {
            "u_0000000000000001": 80,
            "u_0000000000000002": 40,
        }

    def test_no_upload_ids_skips_the_query(self) -> None:
        session = RecordingSession()
        assert ValidationRunRepository(session).latest_for_uploads([]) == {}
        assert session.statements == []


# ---------------------------------------------------------------------------
# Upload history
# ---------------------------------------------------------------------------


class FakeUploadRepository:
    uploads: list[SimpleNamespace] = []

    def __init__(self, session: Any) -> None:
        self._session = session

    def list_recent(self, *, limit: int, offset: int) -> list[SimpleNamespace]:
        return self.uploads[offset : offset + limit]

    def count(self) -> int:
        return len(self.uploads)


class TestUploadHistory:
    def test_scores_come_from_a_single_lookup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        FakeUploadRepository.uploads = [
            SimpleNamespace(
                upload_id=f"u_000000000000000{n}",
                original_filename=f"export-{n}.csv",
                rows_parsed=n,
                status="uploaded",
                created_at=created,
            )
            for n in (1, 2, 3)
        ]
        monkeypatch.setattr(upload_service_module, "UploadRepository", FakeUploadRepository)
        session = RecordingSession([_run("u_0000000000000002", 75)])
        service = UploadService(
            max_rows=10,
            preview_rows=5,
            type_sample_size=5,
            retention_days=7,
            max_file_bytes=1024,
        )

        page = service.history(db=session, limit=10, offset=0)

        assert len(session.statements) == 1
        assert [entry.score for entry in page.uploads] == [None, 75, None]
        assert page.total == 3
        assert page.has_more is False
