"""
app/schemas/fields.py

Schemas for the standard catalog and field mapping endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel


class StandardFieldResponse(BaseModel):
    path: str
    type: str
    required: bool
    format: str | None = None
    enum: list[str] | None = None
    pattern: str | None = None


class StandardFieldsResponse(BaseModel):
    schema_info: dict[str, str] = Field(..., alias="schema")
    fields: list[StandardFieldResponse]
    categories: dict[str, list[StandardFieldResponse]]


class MappingSuggestionResponse(CamelModel):
    upload_id: str
    source_columns: list[str]
    suggestions: dict[str, str | None]
    match_strategies: dict[str, str] = Field(default_factory=dict)
    matched_fields: int = Field(..., ge=0)


class MapFieldsRequest(CamelModel):
    """
    ``mappings`` is typed loosely so a non-object payload reaches the
    mapping validator and fails with its structured error.
    """

    upload_id: str = Field(..., min_length=1)
    mappings: Any
    auto_suggest: bool = False


class MapFieldsResponse(CamelModel):
    success: bool = True
    mapping_id: str
    upload_id: str
    mappings: dict[str, str | None]
    message: str = "Field mappings saved successfully"
    mapped_fields: int = Field(..., ge=0)
    total_standard_fields: int = Field(..., ge=0)


class FieldMappingResponse(CamelModel):
    mapping_id: str
    upload_id: str
    mappings: dict[str, str | None]
    auto_suggest: bool
    created_at: datetime
