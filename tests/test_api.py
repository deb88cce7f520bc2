from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import pytest
from fastapi.testclient import TestClient

from redshift_event_import.application.services import BatchImportJob, ImportLifecycle
from redshift_event_import.domain.entities import (
    ExecutionContext,
    QueryResult,
    SourceConnectionOptions,
)
from redshift_event_import.domain.errors import (
    ImportConfigurationError,
    QueryExecutionError,
    SourceUnavailableError,
)
from redshift_event_import.domain.import_types import OFFSET_KEY
from redshift_event_import.infrastructure.scheduling import AsyncioJobScheduler
from redshift_event_import.infrastructure.sinks import InMemoryEventSink
from redshift_event_import.infrastructure.stores import InMemoryCounterStore, InMemoryDurableStore
from redshift_event_import.infrastructure.transformations import build_default_registry
from redshift_event_import.main import create_app


class StaticQueryExecutor:
    def __init__(self, row_count: int, *, available: bool = True) -> None:
        self.row_count = row_count
        self.available = available

    async def execute(self, query: str, parameters: Sequence[Any] = ()) -> QueryResult:
        if not self.available:
            return QueryResult.failure(QueryExecutionError("could not connect"))
        if query.startswith("SELECT COUNT(1)"):
            return QueryResult.success([{"count": self.row_count}])
        offset = int(parameters[0])
        return QueryResult.success(
            [
                {
                    "event": "purchase",
                    "timestamp": "2024-03-01T12:00:00Z",
                    "distinct_id": f"customer-{index}",
                    "properties": json.dumps({}),
                }
                for index in range(offset, min(offset + 10, self.row_count))
            ]
        )


class ClosableSink(InMemoryEventSink):
    def __init__(self) -> None:
        super().__init__()
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def build_lifecycle(
    executor: StaticQueryExecutor,
    durable_store: InMemoryDurableStore | None = None,
    *,
    sink: InMemoryEventSink | None = None,
    port: int | None = 5439,
) -> ImportLifecycle:
    scheduler = AsyncioJobScheduler()
    sink = sink or InMemoryEventSink()
    job = BatchImportJob(
        query_executor=executor,
        scheduler=scheduler,
        sink=sink,
        registry=build_default_registry(),
        execution_context=ExecutionContext(table_name="purchases", order_by_column="id"),
        transformation_name="default",
    )
    return ImportLifecycle(
        connection_options=SourceConnectionOptions(
            host="analytics.abc123xyz.us-east-1.redshift.amazonaws.com",
            port=port,
            database="analytics",
            username="importer",
            password="secret",
        ),
        query_executor=executor,
        counter_store=InMemoryCounterStore(),
        durable_store=durable_store or InMemoryDurableStore(),
        scheduler=scheduler,
        job=job,
        startup_delay_seconds=60.0,
        resources=[sink] if isinstance(sink, ClosableSink) else [],
    )


def test_healthz() -> None:
    app = create_app(build_lifecycle(StaticQueryExecutor(10)))

    with TestClient(app) as client:
        response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_import_status_after_startup() -> None:
    app = create_app(build_lifecycle(StaticQueryExecutor(80)))

    with TestClient(app) as client:
        response = client.get("/import/status")

    assert response.status_code == 200
    body = response.json()
    assert body["tableName"] == "purchases"
    assert body["importMechanism"] == "Import continuously"
    assert body["transformationName"] == "default"
    assert body["rowCeiling"] == 80
    assert body["initialOffset"] == 0
    assert body["nextOffset"] == 0
    assert body["percentComplete"] == 0.0
    assert body["started"] is True
    assert body["progress"]["eventsIngested"] == 0


def test_import_status_is_unavailable_before_startup() -> None:
    app = create_app(build_lifecycle(StaticQueryExecutor(10)))
    client = TestClient(app)

    response = client.get("/import/status")

    assert response.status_code == 503


def test_shutdown_persists_offset() -> None:
    durable = InMemoryDurableStore({OFFSET_KEY: 30})
    app = create_app(build_lifecycle(StaticQueryExecutor(50), durable))

    with TestClient(app) as client:
        assert client.get("/import/status").json()["nextOffset"] == 30

    assert durable.snapshot()[OFFSET_KEY] == 30


def test_startup_failure_aborts_application() -> None:
    app = create_app(build_lifecycle(StaticQueryExecutor(10, available=False)))

    with pytest.raises(SourceUnavailableError):
        with TestClient(app):
            pass


def test_startup_failure_releases_resources() -> None:
    sink = ClosableSink()
    durable = InMemoryDurableStore()
    app = create_app(build_lifecycle(StaticQueryExecutor(10, available=False), durable, sink=sink))

    with pytest.raises(SourceUnavailableError):
        with TestClient(app):
            pass

    assert sink.closed is True
    assert durable.snapshot() == {}


def test_missing_cluster_port_aborts_application() -> None:
    sink = ClosableSink()
    app = create_app(build_lifecycle(StaticQueryExecutor(10), sink=sink, port=None))

    with pytest.raises(ImportConfigurationError, match="clusterPort"):
        with TestClient(app):
            pass

    assert sink.closed is True


def test_readyz_reports_ready_after_startup() -> None:
    app = create_app(build_lifecycle(StaticQueryExecutor(40)))

    with TestClient(app) as client:
        response = client.get("/readyz")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "table": "purchases", "rowCeiling": 40}


def test_readyz_is_unavailable_before_startup() -> None:
    app = create_app(build_lifecycle(StaticQueryExecutor(40)))
    client = TestClient(app)

    response = client.get("/readyz")

    assert response.status_code == 503
    assert response.json() == {"status": "starting"}
