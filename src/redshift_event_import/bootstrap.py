"""Application bootstrap/wiring."""

import logging
from dataclasses import dataclass

from redshift_event_import.application.services import BatchImportJob, ImportLifecycle
from redshift_event_import.config import Settings, SinkBackend, StateBackend
from redshift_event_import.domain.entities import ExecutionContext, SourceConnectionOptions
from redshift_event_import.domain.ports import (
    ClosableResource,
    CounterStore,
    DurableStore,
    EventSink,
    QueryExecutor,
)
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
from redshift_event_import.infrastructure.transformations import (
    ROW_TO_EVENT_MAP_ATTACHMENT,
    build_default_registry,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _StateWiring:
    counter_store: CounterStore
    durable_store: DurableStore
    resource: ClosableResource | None


def _connection_options(settings: Settings) -> SourceConnectionOptions:
    return SourceConnectionOptions(
        host=settings.cluster_host,
        port=settings.cluster_port,
        database=settings.db_name,
        username=settings.db_username,
        password=settings.db_password,
    )


def _build_state(settings: Settings) -> _StateWiring:
    if settings.state_backend == StateBackend.POSTGRES:
        if settings.state_postgres_dsn is None:
            raise ValueError(
                "REDSHIFT_IMPORT_STATE_POSTGRES_DSN is required when "
                "REDSHIFT_IMPORT_STATE_BACKEND=postgres."
            )
        pool = PostgresStatePool(
            dsn=settings.state_postgres_dsn,
            min_pool_size=settings.state_postgres_pool_min_size,
            max_pool_size=settings.state_postgres_pool_max_size,
        )
        namespace = settings.table_name or ""
        return _StateWiring(
            counter_store=PostgresCounterStore(pool, namespace),
            durable_store=PostgresDurableStore(pool, namespace),
            resource=pool,
        )
    logger.warning(
        "Using in-memory import state; the import offset will not survive a restart."
    )
    return _StateWiring(
        counter_store=InMemoryCounterStore(),
        durable_store=InMemoryDurableStore(),
        resource=None,
    )


def _build_event_sink(settings: Settings) -> EventSink:
    if settings.sink_backend == SinkBackend.HTTP:
        if settings.capture_endpoint is None or settings.capture_api_key is None:
            raise ValueError(
                "REDSHIFT_IMPORT_CAPTURE_ENDPOINT and REDSHIFT_IMPORT_CAPTURE_API_KEY are "
                "required when REDSHIFT_IMPORT_SINK_BACKEND=http."
            )
        return HttpCaptureEventSink(
            endpoint=settings.capture_endpoint,
            api_key=settings.capture_api_key,
            timeout_seconds=settings.capture_timeout_seconds,
        )
    if settings.sink_backend == SinkBackend.MQTT:
        if settings.mqtt_host is None:
            raise ValueError(
                "REDSHIFT_IMPORT_MQTT_HOST is required when REDSHIFT_IMPORT_SINK_BACKEND=mqtt."
            )
        return MqttEventSink(
            table_name=settings.table_name or "unknown",
            broker_host=settings.mqtt_host,
            broker_port=settings.mqtt_port,
            topic_prefix=settings.mqtt_topic_prefix,
            qos=settings.mqtt_qos,
            username=settings.mqtt_username,
            password=settings.mqtt_password,
        )
    logger.warning("Using in-memory event sink; imported events are only kept in memory.")
    return InMemoryEventSink()


def _build_execution_context(settings: Settings) -> ExecutionContext:
    loader = AttachmentLoader(region=settings.aws_region)
    return ExecutionContext(
        table_name=settings.table_name or "",
        order_by_column=settings.order_by_column or "",
        events_to_ignore=frozenset(settings.events_to_ignore),
        attachments={
            ROW_TO_EVENT_MAP_ATTACHMENT: loader.load(settings.row_to_event_map_path),
        },
    )


def build_import_lifecycle(
    settings: Settings,
    *,
    query_executor: QueryExecutor | None = None,
    event_sink: EventSink | None = None,
) -> ImportLifecycle:
    """Compose the import graph."""

    connection_options = _connection_options(settings)
    if query_executor is None:
        query_executor = PostgresQueryExecutor(
            connection_options,
            timeout_seconds=settings.query_timeout_seconds,
        )
    if event_sink is None:
        event_sink = _build_event_sink(settings)
    state = _build_state(settings)
    scheduler = AsyncioJobScheduler()

    job = BatchImportJob(
        query_executor=query_executor,
        scheduler=scheduler,
        sink=event_sink,
        registry=build_default_registry(),
        execution_context=_build_execution_context(settings),
        transformation_name=settings.transformation_name,
        strict_identifiers=settings.strict_identifiers,
    )

    resources: list[ClosableResource] = []
    if isinstance(event_sink, ClosableResource):
        resources.append(event_sink)
    if state.resource is not None:
        resources.append(state.resource)

    return ImportLifecycle(
        connection_options=connection_options,
        query_executor=query_executor,
        counter_store=state.counter_store,
        durable_store=state.durable_store,
        scheduler=scheduler,
        job=job,
        import_mechanism=settings.import_mechanism,
        startup_delay_seconds=settings.startup_delay_seconds,
        strict_identifiers=settings.strict_identifiers,
        resources=resources,
    )


__all__ = ["build_import_lifecycle"]
