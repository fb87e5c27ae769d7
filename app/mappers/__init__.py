"""
app/mappers package marker.
"""

from app.mappers.field_mapper import (
    FieldMapper,
    MappingSuggestion,
    find_mapped_source_column,
    normalize_source_column,
    normalize_standard_path,
)

__all__ = [
    "FieldMapper",
    "MappingSuggestion",
    "find_mapped_source_column",
    "normalize_source_column",
    "normalize_standard_path",
]
