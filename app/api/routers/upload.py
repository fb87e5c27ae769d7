"""
app/api/routers/upload.py

Upload intake HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_invoice_upload
from app.schemas.upload import (
    LABEL_MAX_LENGTH,
    Pagination,
    TextUploadRequest,
    UploadDetailResponse,
    UploadHistoryItem,
    UploadHistoryResponse,
    UploadResponse,
)
from app.services.errors import (
    AnalysisPersistenceError,
    EmptyUploadError,
    UploadNotFoundError,
    UploadTooLargeError,
)
from app.services.file_parser import FileParseError
from app.services.upload_service import UploadService, UploadSummary, get_upload_service
from db.session import get_db

router = APIRouter(prefix="/upload", tags=["upload"])


def _to_response(summary: UploadSummary) -> UploadResponse:
    return UploadResponse(
        upload_id=summary.upload_id,
        rows_parsed=summary.rows_parsed,
        preview=summary.preview,
        column_types=summary.column_types,
    )


@router.post("", response_model=UploadResponse)
def upload_file(
    file: UploadFile = Depends(get_invoice_upload),
    country: str | None = Form(default=None, max_length=LABEL_MAX_LENGTH),
    erp: str | None = Form(default=None, max_length=LABEL_MAX_LENGTH),
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    """
    Parse one CSV/JSON invoice export and store it for mapping.
    """

    try:
        content = file.file.read()
        summary = upload_service.ingest_file(
            content=content,
            filename=file.filename or "",
            db=db,
            country=country,
            erp=erp,
        )
    except UploadTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(exc),
        ) from exc
    except (FileParseError, EmptyUploadError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except AnalysisPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to store upload.",
        ) from exc
    finally:
        file.file.close()

    return _to_response(summary)


@router.post("/json", response_model=UploadResponse)
def upload_text(
    payload: TextUploadRequest,
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    """
    Store pasted JSON (or CSV) text as an upload.
    """

    try:
        summary = upload_service.ingest_text(
            text=payload.text,
            db=db,
            country=payload.country,
            erp=payload.erp,
        )
    except (FileParseError, EmptyUploadError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except AnalysisPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to store upload.",
        ) from exc

    return _to_response(summary)


@router.get("/history", response_model=UploadHistoryResponse)
def upload_history(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadHistoryResponse:
    page = upload_service.history(db=db, limit=limit, offset=offset)
    return UploadHistoryResponse(
        uploads=[
            UploadHistoryItem(
                upload_id=entry.upload_id,
                file_name=entry.file_name,
                rows_parsed=entry.rows_parsed,
                status=entry.status,
                score=entry.score,
                created_at=entry.created_at,
                validated_at=entry.validated_at,
            )
            for entry in page.uploads
        ],
        pagination=Pagination(
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
        ),
    )


@router.get("/{upload_id}", response_model=UploadDetailResponse)
def get_upload(
    upload_id: str,
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadDetailResponse:
    try:
        upload = upload_service.get_upload(db=db, upload_id=upload_id)
    except UploadNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return UploadDetailResponse(
        upload_id=upload.upload_id,
        file_name=upload.original_filename,
        rows_parsed=upload.rows_parsed,
        preview=upload.preview_rows,
        column_types=upload.column_types,
        country=upload.country,
        erp=upload.erp,
        status=upload.status,
        created_at=upload.created_at,
        expires_at=upload.expires_at,
    )
