"""Import monitoring routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from redshift_event_import.api.dependencies import get_import_lifecycle
from redshift_event_import.application.services import ImportLifecycle
from redshift_event_import.domain.monitoring_models import ImportStatusResponse

router = APIRouter(prefix="/import", tags=["import"])


@router.get(
    "/status",
    response_model=ImportStatusResponse,
    response_model_by_alias=True,
    status_code=200,
)
async def get_import_status(
    lifecycle: ImportLifecycle = Depends(get_import_lifecycle),
) -> ImportStatusResponse:
    """Report the offset cursor, row ceiling and batch counters."""

    status = await lifecycle.status()
    if status is None:
        raise HTTPException(status_code=503, detail="Import has not started yet.")
    return status


__all__ = ["router"]
