"""Dependency providers for FastAPI routes."""

from functools import lru_cache

from redshift_event_import.application.services import ImportLifecycle
from redshift_event_import.bootstrap import build_import_lifecycle
from redshift_event_import.config import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings."""

    return Settings()


@lru_cache(maxsize=1)
def get_import_lifecycle() -> ImportLifecycle:
    """Return singleton import graph."""

    return build_import_lifecycle(get_settings())


__all__ = ["get_import_lifecycle", "get_settings"]
