"""
tests/test_schema_contract.py

Contract tests for the GETS field catalog and public identifiers.

The catalog order and the serialised field shape are consumed by the
/fields endpoint and by every scoring model; any change here is a
breaking change for API clients.
"""

from __future__ import annotations

import re

import pytest

from app.domain.gets_schema import (
    ALLOWED_CURRENCIES,
    GETS_FIELDS,
    NAMESPACES,
    get_schema_registry,
)
from app.domain.identifiers import (
    MAPPING_PREFIX,
    REPORT_PREFIX,
    UPLOAD_PREFIX,
    VALIDATION_PREFIX,
    new_public_id,
)


class TestCatalog:
    def test_field_counts(self) -> None:
        registry = get_schema_registry()
        assert len(registry) == 19
        assert len(registry.required_fields()) == 13
        assert len(registry.optional_fields()) == 6

    def test_paths_are_unique(self) -> None:
        paths = [field.path for field in GETS_FIELDS]
        assert len(paths) == len(set(paths))

    def test_catalog_starts_with_invoice_header(self) -> None:
        assert get_schema_registry().paths()[:3] == (
            "invoice.id",
            "invoice.issue_date",
            "invoice.currency",
        )

    def test_currency_enum(self) -> None:
        currency = get_schema_registry().get("invoice.currency")
        assert currency is not None
        assert currency.enum == ALLOWED_CURRENCIES == ("AED", "SAR", "MYR", "USD")

    def test_issue_date_serialisation(self) -> None:
        issue_date = get_schema_registry().get("invoice.issue_date")
        assert issue_date is not None
        assert issue_date.to_dict() == {
            "path": "invoice.issue_date",
            "type": "date",
            "required": True,
            "format": "YYYY-MM-DD",
            "enum": None,
            "pattern": r"^\d{4}-\d{2}-\d{2}$",
        }

    def test_namespaces(self) -> None:
        grouped = get_schema_registry().by_namespace()
        assert tuple(grouped) == NAMESPACES
        assert [field.path for field in grouped["lines"]][-1] == "lines[].line_total"

    def test_registry_is_shared(self) -> None:
        assert get_schema_registry() is get_schema_registry()

    def test_is_valid_path(self) -> None:
        registry = get_schema_registry()
        assert registry.is_valid_path("buyer.trn")
        assert not registry.is_valid_path("buyer.email")


@pytest.mark.parametrize("prefix", [UPLOAD_PREFIX, MAPPING_PREFIX, VALIDATION_PREFIX, REPORT_PREFIX])
def test_public_id_format(prefix: str) -> None:
    identifier = new_public_id(prefix)
    assert re.fullmatch(rf"{prefix}_[0-9a-f]{{16}}", identifier)
