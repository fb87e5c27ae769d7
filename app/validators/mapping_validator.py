"""
app/validators/mapping_validator.py

Validation for source-column to GETS field mappings.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from app.domain.gets_schema import StandardField


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping error detail.
    """

    code: str
    message: str
    target_field: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None


INVALID_TARGET_CODES = ("invalid_target_field", "invalid_target_type")


class SchemaMappingError(ValueError):
    """
    Raised when a field mapping cannot be accepted.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    @property
    def invalid_targets(self) -> list[str]:
        return [
            error.target_field
            for error in self.errors
            if error.code in INVALID_TARGET_CODES and error.target_field
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "invalid_fields": self.invalid_targets,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "target_field": error.target_field,
                    "source_column": error.source_column,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


@dataclass(frozen=True)
class MappingValidationResult:
    """
    Outcome of checking mapping targets against the schema.
    """

    valid: bool
    invalid_targets: list[str] = field(default_factory=list)
    errors: list[MappingErrorDetail] = field(default_factory=list)


class MappingValidator:
    """
    Validates source -> standard path mappings.
    """

    def __init__(self, *, standard_fields: Sequence[StandardField]) -> None:
        self._standard_paths = tuple(item.path for item in standard_fields)
        self._standard_set = set(self._standard_paths)

    def check(self, mapping: Mapping[str, Any]) -> MappingValidationResult:
        """
        Collect every non-empty target that is not a known standard path.

        Only ``None`` and ``""`` mean unmapped; any other non-string target
        (number, boolean, list, object) is invalid.
        """

        invalid_targets: list[str] = []
        errors: list[MappingErrorDetail] = []
        for source_column, target in mapping.items():
            if target is None or target == "":
                continue
            if not isinstance(target, str):
                shown = json.dumps(target, default=str)
                invalid_targets.append(shown)
                errors.append(
                    MappingErrorDetail(
                        code="invalid_target_type",
                        message="Mapped target must be a string path or null.",
                        target_field=shown,
                        source_column=str(source_column),
                        context={"received_type": type(target).__name__},
                    )
                )
                continue
            if target not in self._standard_set:
                invalid_targets.append(target)
                errors.append(
                    MappingErrorDetail(
                        code="invalid_target_field",
                        message="Mapped target is not a standard field.",
                        target_field=target,
                        source_column=source_column,
                    )
                )
        return MappingValidationResult(
            valid=not invalid_targets,
            invalid_targets=invalid_targets,
            errors=errors,
        )

    def validate(self, *, mapping: Any) -> dict[str, str | None]:
        """
        Validate mapping and raise structured errors if invalid.

        Returns the mapping as a plain dict with empty targets normalised
        to ``None``.
        """

        if not isinstance(mapping, Mapping):
            raise SchemaMappingError(
                message="Mappings must be an object.",
                errors=[
                    MappingErrorDetail(
                        code="invalid_mapping_payload",
                        message="Mapping payload must be a JSON object of source -> target.",
                        context={"received_type": type(mapping).__name__},
                    )
                ],
            )

        result = self.check(mapping)
        if not result.valid:
            invalid_csv = ", ".join(result.invalid_targets)
            raise SchemaMappingError(
                message=f"The following target fields are not valid: {invalid_csv}",
                errors=result.errors,
            )

        return {
            str(source_column): (target if target else None)
            for source_column, target in mapping.items()
        }
