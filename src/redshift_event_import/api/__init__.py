"""HTTP API."""

from redshift_event_import.api.router import api_router

__all__ = ["api_router"]
