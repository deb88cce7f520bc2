"""Liveness and readiness routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from redshift_event_import.api.dependencies import get_import_lifecycle
from redshift_event_import.application.services import ImportLifecycle

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    lifecycle: ImportLifecycle = Depends(get_import_lifecycle),
) -> JSONResponse:
    """Ready once startup has seeded the offset counter and scheduled the first batch."""

    context = lifecycle.context
    if context is None:
        return JSONResponse(status_code=503, content={"status": "starting"})
    return JSONResponse(
        status_code=200,
        content={
            "status": "ready",
            "table": lifecycle.job.execution_context.table_name,
            "rowCeiling": context.row_ceiling,
        },
    )


__all__ = ["router"]
