"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from redshift_event_import import __version__
from redshift_event_import.api import api_router
from redshift_event_import.api.dependencies import get_import_lifecycle, get_settings
from redshift_event_import.application.services import ImportLifecycle


def create_app(lifecycle: ImportLifecycle | None = None) -> FastAPI:
    """Build FastAPI application.

    The import starts with the application and persists its offset when the
    application shuts down. Startup errors abort the application after its
    resources are released.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        active = lifecycle if lifecycle is not None else get_import_lifecycle()
        try:
            await active.startup()
            yield
        finally:
            await active.shutdown()

    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(api_router, prefix=settings.api_prefix)
    if lifecycle is not None:
        app.dependency_overrides[get_import_lifecycle] = lambda: lifecycle
    return app


app = create_app()


def run() -> None:
    """Run the importer behind a local server."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "redshift_event_import.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


__all__ = ["app", "create_app", "run"]
