"""
app/validators package marker.
"""

from app.validators.mapping_validator import (
    MappingErrorDetail,
    MappingValidationResult,
    MappingValidator,
    SchemaMappingError,
)

__all__ = [
    "MappingErrorDetail",
    "MappingValidationResult",
    "MappingValidator",
    "SchemaMappingError",
]
