"""
app/mappers/field_mapper.py

Heuristic mapping of uploaded column names onto GETS standard field paths.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Sequence

from app.domain.gets_schema import SchemaRegistry, StandardField, get_schema_registry
from app.validators.mapping_validator import MappingValidationResult, MappingValidator

_SOURCE_SEPARATORS = re.compile(r"[_\s-]")
_PATH_SEPARATORS = re.compile(r"[._\[\]]")

PREFIX_LENGTH = 4

STRATEGY_SUBSTRING = "substring"
STRATEGY_PREFIX = "prefix"


def _strip_suffixes(value: str) -> str:
    value = re.sub(r"id$", "", value)
    return re.sub(r"date$", "", value)


def normalize_source_column(column: str, *, strip_suffixes: bool = True) -> str:
    """
    Lower-case a source column and drop separators (and optionally the
    trailing ``id`` / ``date`` suffixes).
    """

    normalized = _SOURCE_SEPARATORS.sub("", column.lower())
    return _strip_suffixes(normalized) if strip_suffixes else normalized


def normalize_standard_path(path: str, *, strip_suffixes: bool = True) -> str:
    """
    Lower-case a standard path and drop path punctuation.
    """

    normalized = _PATH_SEPARATORS.sub("", path.lower())
    return _strip_suffixes(normalized) if strip_suffixes else normalized


def find_mapped_source_column(
    standard_path: str,
    mapping: Mapping[str, str | None],
) -> str | None:
    """
    Reverse lookup: first source column whose target equals ``standard_path``.
    """

    for source_column, target in mapping.items():
        if target == standard_path:
            return source_column
    return None


@dataclass(frozen=True)
class MappingSuggestion:
    """
    Suggested mapping plus the pass that produced each match.
    """

    mappings: dict[str, str | None]
    match_strategies: dict[str, str]

    @property
    def matched_count(self) -> int:
        return sum(1 for target in self.mappings.values() if target)


class FieldMapper:
    """
    Proposes and validates source -> standard field mappings.
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self._registry = registry or get_schema_registry()

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    def suggest_mappings(
        self,
        source_columns: Sequence[str],
        schema: Sequence[StandardField] | None = None,
    ) -> dict[str, str | None]:
        """
        Best-effort mapping, first match wins and no target is used twice.
        """

        return self.resolve_suggestions(source_columns, schema).mappings

    def resolve_suggestions(
        self,
        source_columns: Sequence[str],
        schema: Sequence[StandardField] | None = None,
    ) -> MappingSuggestion:
        fields = tuple(schema) if schema is not None else self._registry.fields()
        suggestions: dict[str, str | None] = {column: None for column in source_columns}
        strategies: dict[str, str] = {}
        used_targets: set[str] = set()

        for column in source_columns:
            normalized_source = normalize_source_column(column)
            for standard_field in fields:
                if standard_field.path in used_targets:
                    continue
                normalized_target = normalize_standard_path(standard_field.path)
                if normalized_target in normalized_source or normalized_source in normalized_target:
                    suggestions[column] = standard_field.path
                    strategies[column] = STRATEGY_SUBSTRING
                    used_targets.add(standard_field.path)
                    break

        for column in source_columns:
            if suggestions[column]:
                continue
            normalized_source = normalize_source_column(column, strip_suffixes=False)
            for standard_field in fields:
                if standard_field.path in used_targets:
                    continue
                normalized_target = normalize_standard_path(standard_field.path, strip_suffixes=False)
                if (
                    normalized_source[:PREFIX_LENGTH] in normalized_target
                    or normalized_target[:PREFIX_LENGTH] in normalized_source
                ):
                    suggestions[column] = standard_field.path
                    strategies[column] = STRATEGY_PREFIX
                    used_targets.add(standard_field.path)
                    break

        return MappingSuggestion(mappings=suggestions, match_strategies=strategies)

    def validate_mapping(
        self,
        mapping: Mapping[str, str | None],
        schema: Sequence[StandardField] | None = None,
    ) -> MappingValidationResult:
        """
        Check every non-empty target against the schema; collects all failures.
        """

        fields = tuple(schema) if schema is not None else self._registry.fields()
        return MappingValidator(standard_fields=fields).check(mapping)

    @staticmethod
    def find_mapped_source_column(
        standard_path: str,
        mapping: Mapping[str, str | None],
    ) -> str | None:
        return find_mapped_source_column(standard_path, mapping)
