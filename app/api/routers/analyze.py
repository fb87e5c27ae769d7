"""
app/api/routers/analyze.py

Full readiness analysis HTTP endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.schemas.analysis import AnalyzeRequest, AnalyzeResponse
from app.services.analysis_service import AnalysisService, get_analysis_service
from app.services.errors import AnalysisPersistenceError, MappingNotFoundError, UploadNotFoundError
from db.session import get_db
from rules.engine import BatchTooLargeError

router = APIRouter(tags=["analyze"])


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    payload: AnalyzeRequest,
    db: Session = Depends(get_db),
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> AnalyzeResponse:
    """
    Validate, score and report on one upload.
    """

    try:
        outcome = analysis_service.analyze(
            db=db,
            upload_id=payload.upload_id,
            questionnaire=payload.questionnaire,
        )
    except UploadNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (MappingNotFoundError, BatchTooLargeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except AnalysisPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to store analysis results.",
        ) from exc

    return AnalyzeResponse.model_validate(outcome.to_dict())
