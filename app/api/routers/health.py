"""
app/api/routers/health.py

Liveness and database connectivity endpoint.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from db.session import SessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def database_status() -> str:
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.warning("Health check database probe failed: %s", exc)
        return "disconnected"
    return "connected"


@router.get("/health")
def healthcheck() -> dict[str, str]:
    db_status = database_status()
    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
