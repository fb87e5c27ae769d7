"""
app/schemas/upload.py

Request/response schemas for upload endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.base import CamelModel

# Matches the uploads.country and uploads.erp column widths.
LABEL_MAX_LENGTH = 120


class TextUploadRequest(CamelModel):
    """
    Pasted CSV or JSON text.
    """

    text: str = Field(..., min_length=1)
    country: str | None = Field(default=None, max_length=LABEL_MAX_LENGTH)
    erp: str | None = Field(default=None, max_length=LABEL_MAX_LENGTH)


class UploadResponse(CamelModel):
    upload_id: str
    rows_parsed: int = Field(..., ge=0)
    preview: list[dict[str, Any]] = Field(default_factory=list)
    column_types: dict[str, str] = Field(default_factory=dict)


class UploadDetailResponse(CamelModel):
    upload_id: str
    file_name: str
    rows_parsed: int = Field(..., ge=0)
    preview: list[dict[str, Any]] = Field(default_factory=list)
    column_types: dict[str, str] = Field(default_factory=dict)
    country: str | None = None
    erp: str | None = None
    status: str
    created_at: datetime
    expires_at: datetime


class UploadHistoryItem(CamelModel):
    upload_id: str
    file_name: str
    rows_parsed: int = Field(..., ge=0)
    status: str
    score: int | None = None
    created_at: datetime
    validated_at: datetime | None = None


class Pagination(CamelModel):
    total: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)
    has_more: bool


class UploadHistoryResponse(CamelModel):
    uploads: list[UploadHistoryItem] = Field(default_factory=list)
    pagination: Pagination
