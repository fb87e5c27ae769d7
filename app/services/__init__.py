"""
app/services package marker.
"""

from app.services.analysis_service import AnalysisService, get_analysis_service
from app.services.coverage_analyzer import CoverageAnalyzer, CoverageReport
from app.services.errors import (
    AnalysisPersistenceError,
    EmptyUploadError,
    MappingNotFoundError,
    ReportNotFoundError,
    UploadNotFoundError,
    UploadTooLargeError,
    ValidationNotFoundError,
)
from app.services.file_parser import FileParseError
from app.services.mapping_service import MappingService, get_mapping_service
from app.services.upload_service import UploadService, get_upload_service
from app.services.validation_service import ValidationService, get_validation_service

__all__ = [
    "AnalysisPersistenceError",
    "AnalysisService",
    "get_analysis_service",
    "CoverageAnalyzer",
    "CoverageReport",
    "EmptyUploadError",
    "FileParseError",
    "MappingNotFoundError",
    "MappingService",
    "get_mapping_service",
    "ReportNotFoundError",
    "UploadNotFoundError",
    "UploadService",
    "UploadTooLargeError",
    "get_upload_service",
    "ValidationNotFoundError",
    "ValidationService",
    "get_validation_service",
]
