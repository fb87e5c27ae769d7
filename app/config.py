"""
app/config.py

Environment-driven settings for the analyzer, uploads and reports.

Every factory is cached; values are read once per process after the
project `.env` files have been loaded.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_REPORT_FORMATS = ("json", "csv", "pdf")
_TRUE_VALUES = {"1", "true", "yes", "on"}

MIB = 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _env(name: str) -> str | None:
    """Stripped value of ``name``, or None when unset or blank."""
    _load_env_once()
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _get_bool_env(name: str, default: bool) -> bool:
    value = _env(name)
    return default if value is None else value.lower() in _TRUE_VALUES


def _get_int_env(name: str, default: int, *, minimum: int = 1) -> int:
    """
    Integer setting; unparsable values fall back to ``default`` and the
    result is never below ``minimum``.
    """

    value = _env(name)
    if value is None:
        return default
    try:
        return max(minimum, int(value))
    except ValueError:
        return default


@dataclass(frozen=True)
class AnalyzerSettings:
    """
    Runtime settings for parsing and validating uploaded invoice batches.
    """

    max_rows: int = 200
    preview_rows: int = 20
    type_sample_size: int = 10
    log_rule_failures: bool = True


@dataclass(frozen=True)
class UploadSettings:
    """
    Upload storage and retention settings.
    """

    retention_days: int = 7
    max_file_bytes: int = 10 * MIB


@dataclass(frozen=True)
class ReportSettings:
    """
    Readiness report rendering settings.
    """

    default_format: str = "json"


@lru_cache(maxsize=1)
def get_analyzer_settings() -> AnalyzerSettings:
    """
    Return cached analyzer settings from environment variables.
    """

    return AnalyzerSettings(
        max_rows=_get_int_env("ANALYZER_MAX_ROWS", 200),
        preview_rows=_get_int_env("ANALYZER_PREVIEW_ROWS", 20),
        type_sample_size=_get_int_env("ANALYZER_TYPE_SAMPLE_SIZE", 10),
        log_rule_failures=_get_bool_env("ANALYZER_LOG_RULE_FAILURES", True),
    )


@lru_cache(maxsize=1)
def get_upload_settings() -> UploadSettings:
    """
    Return cached upload settings from environment variables.
    """

    return UploadSettings(
        retention_days=_get_int_env("UPLOAD_RETENTION_DAYS", 7),
        max_file_bytes=_get_int_env("UPLOAD_MAX_FILE_BYTES", 10 * MIB),
    )


@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """
    Return cached report settings from environment variables.
    """

    default_format = (_env("REPORT_DEFAULT_FORMAT") or "json").lower()
    if default_format not in _REPORT_FORMATS:
        default_format = "json"
    return ReportSettings(default_format=default_format)
