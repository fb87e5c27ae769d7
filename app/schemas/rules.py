"""
app/schemas/rules.py

Schemas for rule validation endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.base import CamelModel


class RuleCheckRequest(CamelModel):
    upload_id: str = Field(..., min_length=1)


class RuleResultResponse(CamelModel):
    passed: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    issues: list[dict[str, Any]] = Field(default_factory=list)


class RuleCheckResponse(CamelModel):
    success: bool = True
    validation_id: str
    upload_id: str
    mapping_id: str
    rows_checked: int = Field(..., ge=0)
    passed: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    score: int = Field(..., ge=0, le=100)
    issues: list[dict[str, Any]] = Field(default_factory=list)
    rule_results: dict[str, RuleResultResponse] = Field(default_factory=dict)
    message: str


class ValidationRunResponse(CamelModel):
    validation_id: str
    upload_id: str
    mapping_id: str | None = None
    results: dict[str, Any]
    field_mappings: dict[str, str | None] | None = None
    created_at: datetime


class RuleDefinitionResponse(CamelModel):
    name: str
    description: str
    category: str
