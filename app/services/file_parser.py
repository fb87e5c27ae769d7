"""
app/services/file_parser.py

Parses uploaded CSV/JSON invoice exports into row dictionaries and derives
the preview shown before mapping.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
from typing import Any, Sequence

from app.config import get_analyzer_settings

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "json")

COLUMN_TYPE_DATE = "date"
COLUMN_TYPE_NUMBER = "number"
COLUMN_TYPE_TEXT = "text"

_DATE_VALUE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class FileParseError(ValueError):
    """
    Raised when an upload cannot be decoded into rows.
    """


def file_extension(filename: str) -> str:
    return filename.strip().lower().rsplit(".", 1)[-1] if "." in filename else ""


def parse_file(content: bytes, filename: str, *, max_rows: int | None = None) -> list[dict[str, Any]]:
    """
    Decode an upload by extension. Rows beyond ``max_rows`` are dropped.
    """

    limit = max_rows if max_rows is not None else get_analyzer_settings().max_rows
    extension = file_extension(filename)
    if extension == "csv":
        rows = parse_csv(content, max_rows=limit)
    elif extension == "json":
        rows = parse_json(content, max_rows=limit)
    else:
        raise FileParseError("Unsupported file format. Only CSV and JSON are allowed.")

    logger.info("Parsed %s rows from %s", len(rows), filename)
    return rows


def parse_csv(content: bytes, *, max_rows: int) -> list[dict[str, Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FileParseError(f"CSV file is not valid UTF-8: {exc}") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""))
    rows: list[dict[str, Any]] = []
    try:
        for raw_row in reader:
            if len(rows) >= max_rows:
                break
            rows.append({key: value for key, value in raw_row.items() if key is not None})
    except csv.Error as exc:
        raise FileParseError(f"Invalid CSV format: {exc}") from exc
    return rows


def parse_json(content: bytes | str, *, max_rows: int) -> list[dict[str, Any]]:
    """
    Accept a JSON array of objects or a single object.
    """

    try:
        data = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FileParseError(f"Invalid JSON format: {exc}") from exc

    records = data if isinstance(data, list) else [data]
    rows = [record for record in records[:max_rows] if isinstance(record, dict)]
    if len(rows) != len(records[:max_rows]):
        raise FileParseError("Invalid JSON format: every record must be an object.")
    return rows


def parse_text_with_format(
    text: str, *, max_rows: int | None = None
) -> tuple[list[dict[str, Any]], str]:
    """
    Parse pasted data: JSON first, falling back to CSV.

    Returns:
        ``(rows, fmt)`` where ``fmt`` is the format that parsed, ``json`` or ``csv``.
    """

    limit = max_rows if max_rows is not None else get_analyzer_settings().max_rows
    try:
        return parse_json(text, max_rows=limit), "json"
    except FileParseError:
        logger.debug("Text payload is not JSON; parsing as CSV")
    return parse_csv(text.encode("utf-8"), max_rows=limit), "csv"


def parse_text_payload(text: str, *, max_rows: int | None = None) -> list[dict[str, Any]]:
    rows, _ = parse_text_with_format(text, max_rows=max_rows)
    return rows


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value))
    except ValueError:
        return False
    return True


def detect_column_types(rows: Sequence[dict[str, Any]], sample_size: int | None = None) -> dict[str, str]:
    """
    Classify each column seen in the sample as date, number or text.

    Empty values are ignored; a column with no sampled values is text.
    """

    if not rows:
        return {}

    size = sample_size if sample_size is not None else get_analyzer_settings().type_sample_size
    sample = rows[:size]

    columns: list[str] = []
    for row in sample:
        for column in row:
            if column not in columns:
                columns.append(column)

    types: dict[str, str] = {}
    for column in columns:
        values = [row.get(column) for row in sample]
        values = [value for value in values if value is not None and value != ""]
        if not values:
            types[column] = COLUMN_TYPE_TEXT
        elif all(isinstance(value, str) and _DATE_VALUE.fullmatch(value) for value in values):
            types[column] = COLUMN_TYPE_DATE
        elif all(_is_number(value) for value in values):
            types[column] = COLUMN_TYPE_NUMBER
        else:
            types[column] = COLUMN_TYPE_TEXT
    return types


def generate_preview(rows: Sequence[dict[str, Any]], limit: int | None = None) -> list[dict[str, Any]]:
    size = limit if limit is not None else get_analyzer_settings().preview_rows
    return [dict(row) for row in rows[:size]]


def typed_preview(preview: Sequence[dict[str, Any]], column_types: dict[str, str]) -> list[dict[str, Any]]:
    """
    Convert number columns in the preview to numeric values for display.
    """

    typed_rows: list[dict[str, Any]] = []
    for row in preview:
        typed_row: dict[str, Any] = {}
        for key, value in row.items():
            if column_types.get(key) == COLUMN_TYPE_NUMBER and isinstance(value, str) and _is_number(value):
                number = float(value)
                typed_row[key] = int(number) if number.is_integer() and "." not in value else number
            else:
                typed_row[key] = value
        typed_rows.append(typed_row)
    return typed_rows
