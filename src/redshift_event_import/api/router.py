"""Top-level API router composition."""

from fastapi import APIRouter

from redshift_event_import.api.routes import health_router, import_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(import_router)

__all__ = ["api_router"]
