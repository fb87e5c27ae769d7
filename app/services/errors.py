"""
app/services/errors.py

Service-layer exceptions for the upload -> mapping -> validation -> report
workflow. Routers translate these into HTTP errors.
"""

from __future__ import annotations


class EmptyUploadError(ValueError):
    """Raised when an upload decodes to zero rows."""


class UploadTooLargeError(ValueError):
    """Raised when an uploaded file exceeds the configured byte limit."""

    def __init__(self, *, size: int, max_bytes: int) -> None:
        super().__init__(f"File of {size} bytes exceeds the limit of {max_bytes} bytes.")
        self.size = size
        self.max_bytes = max_bytes


class UploadNotFoundError(ValueError):
    """Raised when an upload id is unknown or expired."""

    def __init__(self, upload_id: str) -> None:
        super().__init__(f"Upload with ID {upload_id} not found")
        self.upload_id = upload_id


class MappingNotFoundError(ValueError):
    """Raised when an upload has no saved field mapping."""

    def __init__(self, upload_id: str) -> None:
        super().__init__(f"No field mapping saved for upload {upload_id}. Complete field mapping first.")
        self.upload_id = upload_id


class ValidationNotFoundError(ValueError):
    """Raised when a validation run id is unknown."""

    def __init__(self, validation_id: str) -> None:
        super().__init__(f"Validation with ID {validation_id} not found")
        self.validation_id = validation_id


class ReportNotFoundError(ValueError):
    """Raised when no report exists for the requested id or upload."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Report for {identifier} not found")
        self.identifier = identifier


class AnalysisPersistenceError(RuntimeError):
    """Raised when workflow results cannot be persisted."""
