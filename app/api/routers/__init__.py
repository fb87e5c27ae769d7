"""
app/api/routers package marker.
"""

from app.api.routers.analyze import router as analyze_router
from app.api.routers.fields import router as fields_router
from app.api.routers.health import router as health_router
from app.api.routers.report import router as report_router
from app.api.routers.rules import router as rules_router
from app.api.routers.upload import router as upload_router

__all__ = [
    "analyze_router",
    "fields_router",
    "health_router",
    "report_router",
    "rules_router",
    "upload_router",
]
