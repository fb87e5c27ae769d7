"""
app/api/routers/fields.py

Standard catalog and field mapping HTTP endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.schemas.fields import (
    FieldMappingResponse,
    MapFieldsRequest,
    MapFieldsResponse,
    MappingSuggestionResponse,
    StandardFieldsResponse,
)
from app.services.errors import AnalysisPersistenceError, MappingNotFoundError, UploadNotFoundError
from app.services.mapping_service import MappingService, get_mapping_service
from app.validators.mapping_validator import SchemaMappingError
from db.session import get_db

router = APIRouter(prefix="/fields", tags=["fields"])


@router.get("", response_model=StandardFieldsResponse)
def list_standard_fields(
    mapping_service: MappingService = Depends(get_mapping_service),
) -> dict[str, Any]:
    return mapping_service.standard_fields()


@router.get("/suggest/{upload_id}", response_model=MappingSuggestionResponse)
def suggest_mappings(
    upload_id: str,
    db: Session = Depends(get_db),
    mapping_service: MappingService = Depends(get_mapping_service),
) -> MappingSuggestionResponse:
    """
    Suggest a target for each uploaded column; no target is suggested twice.
    """

    try:
        summary = mapping_service.suggest_for_upload(db=db, upload_id=upload_id)
    except UploadNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return MappingSuggestionResponse(
        upload_id=summary.upload_id,
        source_columns=summary.source_columns,
        suggestions=summary.suggestions,
        match_strategies=summary.match_strategies,
        matched_fields=summary.matched_fields,
    )


@router.post("/map", response_model=MapFieldsResponse)
def map_fields(
    payload: MapFieldsRequest,
    db: Session = Depends(get_db),
    mapping_service: MappingService = Depends(get_mapping_service),
) -> MapFieldsResponse:
    try:
        saved = mapping_service.save_mapping(
            db=db,
            upload_id=payload.upload_id,
            mappings=payload.mappings,
            auto_suggest=payload.auto_suggest,
        )
    except SchemaMappingError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except UploadNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except AnalysisPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to store field mapping.",
        ) from exc

    return MapFieldsResponse(
        mapping_id=saved.mapping_id,
        upload_id=saved.upload_id,
        mappings=saved.mappings,
        mapped_fields=saved.mapped_fields,
        total_standard_fields=saved.total_standard_fields,
    )


@router.get("/mappings/{upload_id}", response_model=FieldMappingResponse)
def get_field_mapping(
    upload_id: str,
    db: Session = Depends(get_db),
    mapping_service: MappingService = Depends(get_mapping_service),
) -> FieldMappingResponse:
    try:
        record = mapping_service.latest_mapping(db=db, upload_id=upload_id)
    except MappingNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return FieldMappingResponse(
        mapping_id=record.mapping_id,
        upload_id=record.upload_id,
        mappings=record.mappings,
        auto_suggest=record.auto_suggest,
        created_at=record.created_at,
    )
