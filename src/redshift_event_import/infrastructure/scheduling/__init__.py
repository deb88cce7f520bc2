"""Job scheduler implementations."""

from redshift_event_import.infrastructure.scheduling.asyncio_job_scheduler import (
    AsyncioJobScheduler,
)

__all__ = ["AsyncioJobScheduler"]
