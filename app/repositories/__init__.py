"""
app/repositories package marker.
"""

from app.repositories.field_mapping_repository import FieldMappingRepository
from app.repositories.readiness_report_repository import ReadinessReportRepository
from app.repositories.upload_repository import UploadRepository
from app.repositories.validation_run_repository import ValidationRunRepository

__all__ = [
    "FieldMappingRepository",
    "ReadinessReportRepository",
    "UploadRepository",
    "ValidationRunRepository",
]
