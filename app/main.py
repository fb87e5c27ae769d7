"""
app/main.py

FastAPI entrypoint for the e-invoicing readiness API.

Startup order: environment checks, logging, then (inside the lifespan)
database reachability and table presence. Any failure aborts the boot.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _environment_problems() -> list[str]:
    """
    Collect every startup misconfiguration instead of stopping at the first.
    """

    from app.services.report_service import REPORT_FORMATS
    from db.config import DATABASE_URL_VARS, configured_database_vars, load_env_files

    load_env_files()
    problems: list[str] = []

    mode = os.getenv("APP_MODE", "").strip().lower()
    if mode != "cloud":
        shown = mode or "<unset>"
        problems.append(f"APP_MODE must be 'cloud' (got {shown}).")

    if not configured_database_vars():
        problems.append("No database URL configured. Set one of: " + ", ".join(DATABASE_URL_VARS) + ".")

    report_format = os.getenv("REPORT_DEFAULT_FORMAT", "json").strip().lower()
    if report_format not in REPORT_FORMATS:
        problems.append(
            f"REPORT_DEFAULT_FORMAT '{report_format}' is not one of {', '.join(REPORT_FORMATS)}."
        )
    return problems


def _validate_env() -> None:
    problems = _environment_problems()
    if problems:
        raise RuntimeError(
            "Readiness API cannot start:\n" + "\n".join(f"  - {problem}" for problem in problems)
        )


def _configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def _check_db() -> None:
    from app.api.routers.health import database_status

    if database_status() != "connected":
        raise RuntimeError("Readiness store is unreachable.")


def _check_schema() -> None:
    """
    Refuse to serve when a readiness table is missing; migrations are never
    applied automatically.
    """

    from sqlalchemy import inspect

    import db.models  # noqa: F401  registers ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    present = set(inspect(get_engine()).get_table_names())
    absent = sorted(set(Base.metadata.tables) - present)
    if absent:
        logger.critical("Readiness tables missing: %s. Run 'alembic upgrade head'.", ", ".join(absent))
        raise RuntimeError(f"Readiness tables missing: {', '.join(absent)}.")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _check_db()
    _check_schema()
    logger.info("Readiness store reachable and schema present")
    yield


def create_app() -> FastAPI:
    """
    Build the API with every readiness router mounted.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="E-Invoicing Readiness API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import (
        analyze_router,
        fields_router,
        health_router,
        report_router,
        rules_router,
        upload_router,
    )

    for router in (health_router, upload_router, fields_router, rules_router, analyze_router, report_router):
        application.include_router(router)

    return application


app = create_app()
