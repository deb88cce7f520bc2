"""Ports for the source store, state stores, scheduler and event sink."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from redshift_event_import.domain.entities import QueryResult

JobHandler = Callable[[dict[str, Any]], Awaitable[None]]


class QueryExecutor(Protocol):
    """Run one parameterized statement against the source store."""

    async def execute(self, query: str, parameters: Sequence[Any] = ()) -> QueryResult:
        """Return rows or a failed result. Must not raise on query failure."""


class CounterStore(Protocol):
    """Fast, process-shared counter store. Possibly non-durable."""

    async def get(self, key: str, default: int | None = None) -> int | None:
        """Return the current counter value."""

    async def set(self, key: str, value: int) -> None:
        """Overwrite the counter value."""

    async def incr(self, key: str) -> int:
        """Atomically increment the counter and return the new value."""


class DurableStore(Protocol):
    """Durable key/value store surviving process restarts."""

    async def get(self, key: str, default: Any = None) -> Any:
        """Return a stored value."""

    async def set(self, key: str, value: Any) -> None:
        """Store a value."""


class JobScheduler(Protocol):
    """Host scheduler running named jobs now or after a delay."""

    def register(self, job_name: str, handler: JobHandler) -> None:
        """Bind a handler to a job name."""

    async def enqueue_now(self, job_name: str, payload: Mapping[str, Any]) -> None:
        """Run the job as soon as the host allows."""

    async def enqueue_after(
        self,
        job_name: str,
        payload: Mapping[str, Any],
        delay_seconds: float,
    ) -> None:
        """Run the job after the given delay."""


class EventSink(Protocol):
    """Fire-and-forget destination for transformed events."""

    async def ingest(self, event_name: str, properties: Mapping[str, Any]) -> None:
        """Hand one event to the sink."""


@runtime_checkable
class ClosableResource(Protocol):
    """Adapter owning connections that must be released at shutdown."""

    async def close(self) -> None:
        """Release held resources."""


__all__ = [
    "ClosableResource",
    "CounterStore",
    "DurableStore",
    "EventSink",
    "JobHandler",
    "JobScheduler",
    "QueryExecutor",
]
