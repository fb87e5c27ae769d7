"""
app/schemas package marker.
"""

from app.schemas.analysis import AnalyzeRequest, AnalyzeResponse
from app.schemas.fields import (
    FieldMappingResponse,
    MapFieldsRequest,
    MapFieldsResponse,
    MappingSuggestionResponse,
    StandardFieldsResponse,
)
from app.schemas.report import ReportListResponse, ReportSummaryItem
from app.schemas.rules import (
    RuleCheckRequest,
    RuleCheckResponse,
    RuleDefinitionResponse,
    ValidationRunResponse,
)
from app.schemas.upload import (
    TextUploadRequest,
    UploadDetailResponse,
    UploadHistoryResponse,
    UploadResponse,
)

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "FieldMappingResponse",
    "MapFieldsRequest",
    "MapFieldsResponse",
    "MappingSuggestionResponse",
    "StandardFieldsResponse",
    "ReportListResponse",
    "ReportSummaryItem",
    "RuleCheckRequest",
    "RuleCheckResponse",
    "RuleDefinitionResponse",
    "ValidationRunResponse",
    "TextUploadRequest",
    "UploadDetailResponse",
    "UploadHistoryResponse",
    "UploadResponse",
]
