"""
app/api/routers/rules.py

Rule validation HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.schemas.rules import (
    RuleCheckRequest,
    RuleCheckResponse,
    RuleDefinitionResponse,
    ValidationRunResponse,
)
from app.services.errors import (
    AnalysisPersistenceError,
    MappingNotFoundError,
    UploadNotFoundError,
    ValidationNotFoundError,
)
from app.services.validation_service import ValidationService, get_validation_service
from db.models.validation_run import ValidationRun
from db.session import get_db
from rules.engine import BatchTooLargeError

router = APIRouter(prefix="/rules", tags=["rules"])


def _run_response(run: ValidationRun) -> ValidationRunResponse:
    return ValidationRunResponse(
        validation_id=run.validation_id,
        upload_id=run.upload_id,
        mapping_id=run.mapping_id,
        results=run.results,
        field_mappings=run.field_mappings,
        created_at=run.created_at,
    )


@router.get("/definitions", response_model=dict[str, RuleDefinitionResponse])
def rule_definitions(
    validation_service: ValidationService = Depends(get_validation_service),
) -> dict[str, dict[str, str]]:
    return validation_service.rule_definitions()


@router.post("/check", response_model=RuleCheckResponse)
def check_rules(
    payload: RuleCheckRequest,
    db: Session = Depends(get_db),
    validation_service: ValidationService = Depends(get_validation_service),
) -> RuleCheckResponse:
    """
    Run the five invoice rules over the upload using its latest mapping.
    """

    try:
        summary = validation_service.check_rules(db=db, upload_id=payload.upload_id)
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
            detail="Unable to store validation results.",
        ) from exc

    result = summary.result
    return RuleCheckResponse.model_validate(
        {
            **summary.to_dict(),
            "message": f"Validation complete. {result.passed} rows passed, {result.failed} rows failed.",
        }
    )


@router.get("/results/{validation_id}", response_model=ValidationRunResponse)
def get_validation_results(
    validation_id: str,
    db: Session = Depends(get_db),
    validation_service: ValidationService = Depends(get_validation_service),
) -> ValidationRunResponse:
    try:
        run = validation_service.get_run(db=db, validation_id=validation_id)
    except ValidationNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return _run_response(run)


@router.get("/upload/{upload_id}", response_model=ValidationRunResponse)
def get_latest_validation(
    upload_id: str,
    db: Session = Depends(get_db),
    validation_service: ValidationService = Depends(get_validation_service),
) -> ValidationRunResponse:
    try:
        run = validation_service.latest_run_for_upload(db=db, upload_id=upload_id)
    except ValidationNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return _run_response(run)
