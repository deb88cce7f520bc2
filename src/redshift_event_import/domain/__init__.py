"""Domain public API."""

from redshift_event_import.domain.entities import (
    BatchJobPayload,
    ExecutionContext,
    ImportProgress,
    QueryResult,
    Row,
    SourceConnectionOptions,
    Transform,
    TransformationEntry,
    TransformedEvent,
)
from redshift_event_import.domain.errors import (
    AttachmentError,
    CounterSeedError,
    EventImportError,
    EventSinkError,
    ImportConfigurationError,
    QueryExecutionError,
    SourceUnavailableError,
    TransformationError,
    UnknownTransformationError,
    UnsafeIdentifierError,
)
from redshift_event_import.domain.import_context import ImportContext
from redshift_event_import.domain.import_types import (
    EVENTS_PER_BATCH,
    IMPORT_JOB_NAME,
    MAX_RETRIES_PER_OFFSET,
    OFFSET_KEY,
    TOTAL_ROWS_SNAPSHOT_KEY,
    BatchOutcome,
    BatchState,
    ImportMechanism,
    retry_delay_seconds,
)
from redshift_event_import.domain.monitoring_models import (
    ImportProgressResponse,
    ImportStatusResponse,
)
from redshift_event_import.domain.ports import (
    ClosableResource,
    CounterStore,
    DurableStore,
    EventSink,
    JobHandler,
    JobScheduler,
    QueryExecutor,
)
from redshift_event_import.domain.sql import (
    build_batch_query,
    build_count_query,
    sanitize_identifier,
)
from redshift_event_import.domain.transformation_registry import TransformationRegistry

__all__ = [
    "AttachmentError",
    "BatchJobPayload",
    "BatchOutcome",
    "BatchState",
    "ClosableResource",
    "CounterSeedError",
    "CounterStore",
    "DurableStore",
    "EVENTS_PER_BATCH",
    "EventImportError",
    "EventSink",
    "EventSinkError",
    "ExecutionContext",
    "IMPORT_JOB_NAME",
    "ImportConfigurationError",
    "ImportContext",
    "ImportMechanism",
    "ImportProgress",
    "ImportProgressResponse",
    "ImportStatusResponse",
    "JobHandler",
    "JobScheduler",
    "MAX_RETRIES_PER_OFFSET",
    "OFFSET_KEY",
    "QueryExecutionError",
    "QueryExecutor",
    "QueryResult",
    "Row",
    "SourceConnectionOptions",
    "SourceUnavailableError",
    "TOTAL_ROWS_SNAPSHOT_KEY",
    "Transform",
    "TransformationEntry",
    "TransformationError",
    "TransformationRegistry",
    "TransformedEvent",
    "UnknownTransformationError",
    "UnsafeIdentifierError",
    "build_batch_query",
    "build_count_query",
    "retry_delay_seconds",
    "sanitize_identifier",
]
