"""
app/schemas/analysis.py

Schemas for the analyze endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel


class AnalyzeRequest(CamelModel):
    upload_id: str = Field(..., min_length=1)
    # Passed through untouched: only literal true/false answers score, any
    # other value (or a non-object questionnaire) counts as unknown.
    questionnaire: Any = None


class CategoryScoresResponse(BaseModel):
    data: int = Field(..., ge=0, le=100)
    coverage: int = Field(..., ge=0, le=100)
    rules: int = Field(..., ge=0, le=100)
    posture: int = Field(..., ge=0, le=100)


class AnalysisBody(CamelModel):
    category_scores: CategoryScoresResponse
    overall_score: int = Field(..., ge=0, le=100)
    readiness_level: str
    coverage_analysis: dict[str, Any]
    validation_results: dict[str, Any]


class AnalyzeResponse(CamelModel):
    success: bool = True
    upload_id: str
    validation_id: str
    report_id: str
    analysis: AnalysisBody
    report_url: str
    message: str
