"""
app/services/analysis_service.py

Full readiness analysis for one upload:

    1. load the upload and its latest mapping
    2. run the rule engine
    3. score data, coverage, rules and posture into the overall readiness
    4. classify coverage (matched / close / missing)
    5. persist the validation run and the JSON report, mark upload completed

Report lookups for download and sharing live here as well, since every
stored report is produced by this workflow.
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
from app.logging_utils import log_event
from app.repositories.field_mapping_repository import FieldMappingRepository
from app.repositories.readiness_report_repository import ReadinessReportRepository
from app.repositories.upload_repository import UploadRepository
from app.repositories.validation_run_repository import ValidationRunRepository
from app.services.coverage_analyzer import CoverageAnalyzer, CoverageReport
from app.services.errors import (
    AnalysisPersistenceError,
    MappingNotFoundError,
    ReportNotFoundError,
    UploadNotFoundError,
)
from app.services.report_service import build_report, new_report_id
from db.models.readiness_report import ReadinessReport, ReportFormat
from db.models.upload import UploadStatus
from readiness.orchestrator import ReadinessOrchestrator, ReadinessScore
from rules.engine import RuleEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    upload_id: str
    validation_id: str
    report_id: str
    readiness: ReadinessScore
    coverage: CoverageReport
    validation: ValidationResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "uploadId": self.upload_id,
            "validationId": self.validation_id,
            "reportId": self.report_id,
            "analysis": {
                **self.readiness.to_dict(),
                "coverageAnalysis": self.coverage.to_dict(),
                "validationResults": self.validation.to_dict(),
            },
            "reportUrl": f"/report/share/{self.report_id}",
            "message": f"Analysis complete. Overall readiness: {self.readiness.overall_score}%",
        }


class AnalysisService:
    """
    Orchestrates validation, scoring, coverage and report persistence.
    """

    def __init__(
        self,
        *,
        engine: RuleEngine | None = None,
        orchestrator: ReadinessOrchestrator | None = None,
        coverage_analyzer: CoverageAnalyzer | None = None,
    ) -> None:
        self._engine = engine or RuleEngine()
        self._orchestrator = orchestrator or ReadinessOrchestrator()
        self._coverage_analyzer = coverage_analyzer or CoverageAnalyzer()

    def analyze(
        self,
        *,
        db: Session,
        upload_id: str,
        questionnaire: Any = None,
    ) -> AnalysisOutcome:
        """
        Run the complete analysis pipeline and store its report.

        Raises:
            UploadNotFoundError: upload id is unknown or expired.
            MappingNotFoundError: no mapping saved for the upload.
            BatchTooLargeError: upload holds more rows than the engine accepts.
            AnalysisPersistenceError: results cannot be stored.
        """

        upload_repository = UploadRepository(db)
        upload = upload_repository.get(upload_id)
        if upload is None:
            raise UploadNotFoundError(upload_id)

        mapping_record = FieldMappingRepository(db).latest_for_upload(upload_id)
        if mapping_record is None:
            raise MappingNotFoundError(upload_id)

        rows = upload.raw_rows or []
        mapping = mapping_record.mappings
        validation = self._engine.run_validation(rows, mapping)
        readiness = self._orchestrator.score(
            rows=rows,
            mapping=mapping,
            validation=validation,
            questionnaire=questionnaire,
        )
        coverage = self._coverage_analyzer.analyze(mapping)

        validation_id = new_public_id(VALIDATION_PREFIX)
        report_id = new_report_id()
        report = build_report(
            upload_id=upload_id,
            rows_parsed=upload.rows_parsed,
            mapping=mapping,
            validation=validation,
            readiness=readiness,
            coverage=coverage.to_dict(),
            mapping_id=mapping_record.mapping_id,
            validation_id=validation_id,
            report_id=report_id,
        )

        try:
            ValidationRunRepository(db).save(
                validation_id=validation_id,
                upload_id=upload_id,
                mapping_id=mapping_record.mapping_id,
                results={
                    **validation.to_dict(),
                    **readiness.to_dict(),
                    "coverageAnalysis": coverage.to_dict(),
                },
                field_mappings=mapping,
            )
            ReadinessReportRepository(db).save(
                report_id=report_id,
                upload_id=upload_id,
                validation_id=validation_id,
                report_data=report,
                report_format=ReportFormat.JSON,
            )
            upload_repository.set_status(upload, UploadStatus.COMPLETED)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise AnalysisPersistenceError("Failed to store analysis results.") from exc

        log_event(
            logger,
            logging.INFO,
            "analysis_completed",
            upload_id=upload_id,
            validation_id=validation_id,
            report_id=report_id,
            overall_score=readiness.overall_score,
            readiness_level=readiness.readiness_level,
            coverage_percentage=coverage.coverage_percentage,
        )
        return AnalysisOutcome(
            upload_id=upload_id,
            validation_id=validation_id,
            report_id=report_id,
            readiness=readiness,
            coverage=coverage,
            validation=validation,
        )

    def latest_report(self, *, db: Session, upload_id: str) -> ReadinessReport:
        report = ReadinessReportRepository(db).latest_for_upload(upload_id)
        if report is None:
            raise ReportNotFoundError(upload_id)
        return report

    def shared_report(self, *, db: Session, report_id: str) -> ReadinessReport:
        report = ReadinessReportRepository(db).get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    def list_reports(self, *, db: Session, upload_id: str) -> list[ReadinessReport]:
        return ReadinessReportRepository(db).list_for_upload(upload_id)

    def record_download(self, *, db: Session, report: ReadinessReport) -> None:
        """
        Bump the download counter; counter failures never block a download.
        """

        try:
            ReadinessReportRepository(db).record_download(report)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Failed to record report download report_id=%s error=%s", report.report_id, exc)


@lru_cache(maxsize=1)
def get_analysis_service() -> AnalysisService:
    """
    Build and cache the analysis service with env-driven settings.
    """
    settings = get_analyzer_settings()
    return AnalysisService(
        engine=RuleEngine(
            max_rows=settings.max_rows,
            log_rule_failures=settings.log_rule_failures,
        )
    )
