"""Query executor for Redshift over the PostgreSQL wire protocol."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import asyncpg  # type: ignore[import-untyped]

from redshift_event_import.domain.entities import QueryResult, SourceConnectionOptions
from redshift_event_import.domain.errors import QueryExecutionError
from redshift_event_import.domain.ports import QueryExecutor

logger = logging.getLogger(__name__)

Connect = Callable[..., Awaitable[Any]]


class PostgresQueryExecutor(QueryExecutor):
    """Open one connection per statement and report failures as results."""

    def __init__(
        self,
        options: SourceConnectionOptions,
        timeout_seconds: float = 30.0,
        connect: Connect | None = None,
    ) -> None:
        self._options = options
        self._timeout_seconds = timeout_seconds
        self._connect = connect or asyncpg.connect

    async def execute(self, query: str, parameters: Sequence[Any] = ()) -> QueryResult:
        try:
            connection = await self._connect(
                host=self._options.host,
                port=self._options.port,
                database=self._options.database,
                user=self._options.username,
                password=self._options.password,
                timeout=self._timeout_seconds,
                # Each connection runs one statement, so nothing is cached.
                statement_cache_size=0,
            )
        except Exception as exc:
            return QueryResult.failure(
                QueryExecutionError(f"Connecting to {self._options.host} failed: {exc}")
            )

        try:
            records = await connection.fetch(
                query,
                *parameters,
                timeout=self._timeout_seconds,
            )
            return QueryResult.success([dict(record) for record in records])
        except Exception as exc:
            return QueryResult.failure(QueryExecutionError(f"Query failed: {exc}"))
        finally:
            try:
                await connection.close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Closing source connection failed: %s", exc)


__all__ = ["PostgresQueryExecutor"]
