"""
app/api/routers/report.py

Readiness report download and sharing endpoints.

Downloads carry an attachment Content-Disposition; CSV bodies are streamed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.orm import Session

from app.config import get_report_settings
from app.schemas.report import ReportListResponse, ReportSummaryItem
from app.services.analysis_service import AnalysisService, get_analysis_service
from app.services.errors import ReportNotFoundError
from app.services.report_service import (
    REPORT_FORMATS,
    UnsupportedReportFormatError,
    render_report,
)
from db.session import get_db

router = APIRouter(prefix="/report", tags=["report"])


@router.get("/share/{report_id}")
def get_shared_report(
    report_id: str,
    db: Session = Depends(get_db),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> dict:
    """
    Return a stored report document by its public id.
    """

    try:
        report = analysis_service.shared_report(db=db, report_id=report_id)
    except ReportNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return report.report_data


@router.get("/{upload_id}/reports", response_model=ReportListResponse)
def list_reports(
    upload_id: str,
    db: Session = Depends(get_db),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> ReportListResponse:
    reports = analysis_service.list_reports(db=db, upload_id=upload_id)
    return ReportListResponse(
        upload_id=upload_id,
        reports=[
            ReportSummaryItem(
                report_id=report.report_id,
                validation_id=report.validation_id,
                format=report.format,
                overall_score=(report.report_data.get("summary") or {}).get("overallScore"),
                readiness_level=(report.report_data.get("summary") or {}).get("readinessLevel"),
                download_count=report.download_count,
                created_at=report.created_at,
            )
            for report in reports
        ],
    )


@router.get("/{upload_id}")
def download_report(
    upload_id: str,
    report_format: str | None = Query(
        default=None,
        alias="format",
        description=f"One of: {', '.join(REPORT_FORMATS)}",
    ),
    db: Session = Depends(get_db),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> Response:
    """
    Download the latest report for an upload as JSON, CSV or PDF.
    """

    fmt = report_format or get_report_settings().default_format
    try:
        report = analysis_service.latest_report(db=db, upload_id=upload_id)
        body, media_type = render_report(report.report_data, fmt)
    except ReportNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except UnsupportedReportFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    analysis_service.record_download(db=db, report=report)

    filename = f"readiness-report-{upload_id}.{fmt.strip().lower()}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if media_type.startswith("text/csv"):
        return StreamingResponse(content=iter([body]), media_type=media_type, headers=headers)
    return Response(content=body, media_type=media_type, headers=headers)
