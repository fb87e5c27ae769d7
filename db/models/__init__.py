"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.field_mapping import FieldMappingRecord
from db.models.readiness_report import ReadinessReport, ReportFormat
from db.models.upload import Upload, UploadFileType, UploadStatus
from db.models.validation_run import ValidationRun

__all__ = [
    "Upload",
    "UploadStatus",
    "UploadFileType",
    "FieldMappingRecord",
    "ValidationRun",
    "ReadinessReport",
    "ReportFormat",
]
