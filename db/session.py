"""
db/session.py

Engine and session factory for the readiness store.

Nothing connects at import time: the engine is built on the first session
request, so models, routers and tests can be imported without a database.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url

# env var -> (engine keyword, default)
_POOL_OPTIONS: dict[str, tuple[str, int]] = {
    "DB_POOL_SIZE": ("pool_size", 5),
    "DB_MAX_OVERFLOW": ("max_overflow", 10),
    "DB_POOL_RECYCLE": ("pool_recycle", 1800),
}

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def _engine_options() -> dict[str, Any]:
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": os.getenv("SQL_ECHO", "").strip().lower() in {"1", "true", "yes", "on"},
    }
    for env_name, (keyword, default) in _POOL_OPTIONS.items():
        raw = os.getenv(env_name, "").strip()
        options[keyword] = int(raw) if raw.isdigit() else default
    return options


def create_db_engine() -> Engine:
    """
    Build the PostgreSQL engine; the JSONB columns rule out other backends.
    """

    url = resolve_database_url()
    if not url.startswith("postgresql"):
        raise RuntimeError("The readiness store requires a PostgreSQL database URL.")
    return create_engine(url, **_engine_options())


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def SessionLocal() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: one session per request, always closed.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
