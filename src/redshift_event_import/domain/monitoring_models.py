"""Monitoring models for the operator-facing import status route."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from redshift_event_import.domain.import_types import ImportMechanism


class MonitoringModel(BaseModel):
    """Base model for monitoring routes."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ImportProgressResponse(MonitoringModel):
    """What the batch job has done since startup."""

    batches_completed: int = Field(default=0, alias="batchesCompleted")
    events_ingested: int = Field(default=0, alias="eventsIngested")
    retries_scheduled: int = Field(default=0, alias="retriesScheduled")
    batches_abandoned: int = Field(default=0, alias="batchesAbandoned")
    batches_failed: int = Field(default=0, alias="batchesFailed")
    done: bool = False
    last_error: str | None = Field(default=None, alias="lastError")


class ImportStatusResponse(MonitoringModel):
    """Cursor position and progress of the running import."""

    table_name: str = Field(alias="tableName")
    import_mechanism: ImportMechanism = Field(alias="importMechanism")
    transformation_name: str = Field(alias="transformationName")
    row_ceiling: int = Field(alias="rowCeiling")
    initial_offset: int = Field(alias="initialOffset")
    next_offset: int = Field(alias="nextOffset")
    percent_complete: float | None = Field(default=None, alias="percentComplete")
    started: bool = True
    progress: ImportProgressResponse


__all__ = ["ImportProgressResponse", "ImportStatusResponse", "MonitoringModel"]
