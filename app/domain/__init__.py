"""
app/domain package marker.
"""

from app.domain.gets_schema import GETS_FIELDS, SchemaRegistry, StandardField, get_schema_registry
from app.domain.validation import Issue, RuleOutcome, RuleResult, ValidationResult

__all__ = [
    "GETS_FIELDS",
    "Issue",
    "RuleOutcome",
    "RuleResult",
    "SchemaRegistry",
    "StandardField",
    "ValidationResult",
    "get_schema_registry",
]
