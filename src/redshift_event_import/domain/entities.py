"""Domain entities."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

Row = Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class SourceConnectionOptions:
    """Connection parameters for the source cluster."""

    host: str | None = None
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None

    def missing_options(self) -> list[str]:
        """Return option names that are required but unset."""

        values = {
            "clusterHost": self.host,
            "clusterPort": self.port,
            "dbName": self.database,
            "dbUsername": self.username,
            "dbPassword": self.password,
        }
        return [name for name, value in values.items() if value is None or value == ""]


@dataclass(slots=True, frozen=True)
class BatchJobPayload:
    """Unit of work passed between scheduling and execution.

    A payload without an offset asks for a fresh allocation. A payload with an
    offset is a retry of that already-allocated range.
    """

    offset: int | None = None
    retries_performed_so_far: int = 0

    def __post_init__(self) -> None:
        if self.offset is not None and self.offset < 0:
            raise ValueError("offset must be >= 0.")
        if self.retries_performed_so_far < 0:
            raise ValueError("retries_performed_so_far must be >= 0.")

    @property
    def is_retry(self) -> bool:
        """Whether this payload is pinned to an allocated offset."""

        return self.offset is not None

    def retry_of(self, offset: int) -> BatchJobPayload:
        """Return the payload for the next attempt at the same offset."""

        return BatchJobPayload(
            offset=offset,
            retries_performed_so_far=self.retries_performed_so_far + 1,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the mapping handed to the host scheduler."""

        payload: dict[str, Any] = {"retriesPerformedSoFar": self.retries_performed_so_far}
        if self.offset is not None:
            payload["offset"] = self.offset
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> BatchJobPayload:
        """Parse a payload mapping received from the host scheduler."""

        offset = payload.get("offset")
        return cls(
            offset=None if offset is None else int(offset),
            retries_performed_so_far=int(payload.get("retriesPerformedSoFar", 0)),
        )


@dataclass(slots=True, frozen=True)
class TransformedEvent:
    """Sink-ready event produced from one source row."""

    event_name: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))


@dataclass(slots=True, frozen=True)
class ExecutionContext:
    """Read-only import configuration visible to transformations."""

    table_name: str
    order_by_column: str
    events_to_ignore: frozenset[str] = frozenset()
    attachments: Mapping[str, bytes | None] = field(default_factory=dict)

    def attachment(self, name: str) -> bytes | None:
        """Return raw attachment contents, or None when not provided."""

        return self.attachments.get(name)


Transform = Callable[[Row, ExecutionContext], TransformedEvent]


@dataclass(slots=True, frozen=True)
class TransformationEntry:
    """A registered transformation and its contributor."""

    author: str
    transform: Transform


@dataclass(slots=True, frozen=True)
class QueryResult:
    """Either the fetched rows or the error that prevented fetching them."""

    rows: list[dict[str, Any]] | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.rows is None) == (self.error is None):
            raise ValueError("QueryResult requires exactly one of rows or error.")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, rows: list[dict[str, Any]]) -> QueryResult:
        return cls(rows=rows)

    @classmethod
    def failure(cls, error: Exception) -> QueryResult:
        return cls(error=error)


@dataclass(slots=True)
class ImportProgress:
    """Counters describing what the batch job has done in this process."""

    batches_completed: int = 0
    events_ingested: int = 0
    retries_scheduled: int = 0
    batches_abandoned: int = 0
    batches_failed: int = 0
    done: bool = False
    last_error: str | None = None


__all__ = [
    "BatchJobPayload",
    "ExecutionContext",
    "ImportProgress",
    "QueryResult",
    "Row",
    "SourceConnectionOptions",
    "Transform",
    "TransformationEntry",
    "TransformedEvent",
]
