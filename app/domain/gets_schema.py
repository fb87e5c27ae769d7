"""
app/domain/gets_schema.py

GETS v0.1 standard field catalog and the read-only registry over it.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

FIELD_TYPE_STRING = "string"
FIELD_TYPE_NUMBER = "number"
FIELD_TYPE_DATE = "date"

ALLOWED_CURRENCIES: tuple[str, ...] = ("AED", "SAR", "MYR", "USD")

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

SCHEMA_VERSION = "0.1"

NAMESPACES: tuple[str, ...] = ("invoice", "seller", "buyer", "lines")


@dataclass(frozen=True)
class StandardField:
    """
    One field of the standard e-invoicing schema.
    """

    path: str
    type: str
    required: bool
    enum: tuple[str, ...] | None = None
    pattern: str | None = None
    format: str | None = None

    @property
    def namespace(self) -> str:
        return self.path.split(".", 1)[0].replace("[]", "")

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "type": self.type,
            "required": self.required,
            "format": self.format,
            "enum": list(self.enum) if self.enum is not None else None,
            "pattern": self.pattern,
        }


GETS_FIELDS: tuple[StandardField, ...] = (
    StandardField("invoice.id", FIELD_TYPE_STRING, True),
    StandardField(
        "invoice.issue_date",
        FIELD_TYPE_DATE,
        True,
        pattern=ISO_DATE_PATTERN,
        format="YYYY-MM-DD",
    ),
    StandardField("invoice.currency", FIELD_TYPE_STRING, True, enum=ALLOWED_CURRENCIES),
    StandardField("invoice.total_excl_vat", FIELD_TYPE_NUMBER, True),
    StandardField("invoice.vat_amount", FIELD_TYPE_NUMBER, True),
    StandardField("invoice.total_incl_vat", FIELD_TYPE_NUMBER, True),
    StandardField("seller.name", FIELD_TYPE_STRING, True),
    StandardField("seller.trn", FIELD_TYPE_STRING, True),
    StandardField("seller.country", FIELD_TYPE_STRING, False),
    StandardField("seller.city", FIELD_TYPE_STRING, False),
    StandardField("buyer.name", FIELD_TYPE_STRING, True),
    StandardField("buyer.trn", FIELD_TYPE_STRING, True),
    StandardField("buyer.country", FIELD_TYPE_STRING, False),
    StandardField("buyer.city", FIELD_TYPE_STRING, False),
    StandardField("lines[].sku", FIELD_TYPE_STRING, False),
    StandardField("lines[].description", FIELD_TYPE_STRING, False),
    StandardField("lines[].qty", FIELD_TYPE_NUMBER, True),
    StandardField("lines[].unit_price", FIELD_TYPE_NUMBER, True),
    StandardField("lines[].line_total", FIELD_TYPE_NUMBER, True),
)


class SchemaRegistry:
    """
    Immutable view over a standard field catalog.

    Built once and shared by reference; nothing on this class mutates the
    catalog after construction.
    """

    def __init__(self, fields: Sequence[StandardField] = GETS_FIELDS) -> None:
        self._fields = tuple(fields)
        self._by_path = {field.path: field for field in self._fields}

    def fields(self) -> tuple[StandardField, ...]:
        return self._fields

    def paths(self) -> tuple[str, ...]:
        return tuple(field.path for field in self._fields)

    def is_valid_path(self, path: str) -> bool:
        return path in self._by_path

    def get(self, path: str) -> StandardField | None:
        return self._by_path.get(path)

    def required_fields(self) -> tuple[StandardField, ...]:
        return tuple(field for field in self._fields if field.required)

    def optional_fields(self) -> tuple[StandardField, ...]:
        return tuple(field for field in self._fields if not field.required)

    def by_namespace(self) -> dict[str, list[StandardField]]:
        """
        Group fields by their top-level namespace, in catalog order.
        """

        grouped: dict[str, list[StandardField]] = {namespace: [] for namespace in NAMESPACES}
        for field in self._fields:
            grouped.setdefault(field.namespace, []).append(field)
        return grouped

    def __len__(self) -> int:
        return len(self._fields)


@lru_cache(maxsize=1)
def get_schema_registry() -> SchemaRegistry:
    """
    Return the process-wide GETS registry.
    """

    return SchemaRegistry(GETS_FIELDS)
