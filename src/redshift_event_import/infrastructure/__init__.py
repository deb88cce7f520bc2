"""Infrastructure layer public API."""

from redshift_event_import.infrastructure.attachments import AttachmentLoader
from redshift_event_import.infrastructure.scheduling import AsyncioJobScheduler
from redshift_event_import.infrastructure.sinks import (
    HttpCaptureEventSink,
    InMemoryEventSink,
    MqttEventSink,
)
from redshift_event_import.infrastructure.source import PostgresQueryExecutor
from redshift_event_import.infrastructure.stores import (
    InMemoryCounterStore,
    InMemoryDurableStore,
    PostgresCounterStore,
    PostgresDurableStore,
    PostgresStatePool,
)
from redshift_event_import.infrastructure.transformations import build_default_registry

__all__ = [
    "AsyncioJobScheduler",
    "AttachmentLoader",
    "HttpCaptureEventSink",
    "InMemoryCounterStore",
    "InMemoryDurableStore",
    "InMemoryEventSink",
    "MqttEventSink",
    "PostgresCounterStore",
    "PostgresDurableStore",
    "PostgresQueryExecutor",
    "PostgresStatePool",
    "build_default_registry",
]
