"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

UPLOAD_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/json",
    "text/plain",
    "application/vnd.ms-excel",
}

UPLOAD_EXTENSIONS = (".csv", ".json")


def get_invoice_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is CSV or JSON by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    has_allowed_extension = filename.endswith(UPLOAD_EXTENSIONS)
    has_allowed_content_type = content_type in UPLOAD_CONTENT_TYPES

    if not has_allowed_extension and not has_allowed_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV and JSON files are allowed.",
        )

    return file
