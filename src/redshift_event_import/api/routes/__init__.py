"""Route modules public API."""

from redshift_event_import.api.routes.health import router as health_router
from redshift_event_import.api.routes.imports import router as import_router

__all__ = ["health_router", "import_router"]
