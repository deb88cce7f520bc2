"""PostgreSQL-backed counter and durable stores sharing one asyncpg pool."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import asyncpg  # type: ignore[import-untyped]

from redshift_event_import.domain.ports import CounterStore, DurableStore


class PostgresStatePool:
    """Lazily created asyncpg pool holding the import state tables."""

    def __init__(
        self,
        dsn: str,
        min_pool_size: int = 1,
        max_pool_size: int = 5,
    ) -> None:
        if not dsn.strip():
            raise ValueError("dsn cannot be empty.")
        self._dsn = dsn
        self._min_pool_size = min_pool_size
        self._max_pool_size = max_pool_size
        self._pool: asyncpg.Pool | None = None
        self._pool_lock = asyncio.Lock()

    async def get(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool

        async with self._pool_lock:
            if self._pool is None:
                pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_pool_size,
                    max_size=self._max_pool_size,
                )
                await self._ensure_schema(pool)
                self._pool = pool
        assert self._pool is not None
        return self._pool

    async def close(self) -> None:
        """Close the pool if it was opened."""

        pool = self._pool
        self._pool = None
        if pool is not None:
            await pool.close()

    async def _ensure_schema(self, pool: asyncpg.Pool) -> None:
        await pool.execute(
            """
            CREATE TABLE IF NOT EXISTS import_counters (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value BIGINT NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                PRIMARY KEY (namespace, key)
            );
            """
        )
        await pool.execute(
            """
            CREATE TABLE IF NOT EXISTS import_state (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                PRIMARY KEY (namespace, key)
            );
            """
        )


class PostgresCounterStore(CounterStore):
    """Counter store whose increments are single atomic upserts."""

    def __init__(self, pool: PostgresStatePool, namespace: str) -> None:
        self._pool = pool
        self._namespace = namespace

    async def get(self, key: str, default: int | None = None) -> int | None:
        pool = await self._pool.get()
        value = await pool.fetchval(
            "SELECT value FROM import_counters WHERE namespace = $1 AND key = $2",
            self._namespace,
            key,
        )
        if value is None:
            return default
        return int(value)

    async def set(self, key: str, value: int) -> None:
        pool = await self._pool.get()
        await pool.execute(
            """
            INSERT INTO import_counters (namespace, key, value)
            VALUES ($1, $2, $3)
            ON CONFLICT (namespace, key)
            DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
            """,
            self._namespace,
            key,
            int(value),
        )

    async def incr(self, key: str) -> int:
        pool = await self._pool.get()
        value = await pool.fetchval(
            """
            INSERT INTO import_counters (namespace, key, value)
            VALUES ($1, $2, 1)
            ON CONFLICT (namespace, key)
            DO UPDATE SET value = import_counters.value + 1, updated_at = NOW()
            RETURNING value
            """,
            self._namespace,
            key,
        )
        return int(value)


class PostgresDurableStore(DurableStore):
    """Durable store keeping JSON values per namespace."""

    def __init__(self, pool: PostgresStatePool, namespace: str) -> None:
        self._pool = pool
        self._namespace = namespace

    async def get(self, key: str, default: Any = None) -> Any:
        pool = await self._pool.get()
        raw = await pool.fetchval(
            "SELECT value::text FROM import_state WHERE namespace = $1 AND key = $2",
            self._namespace,
            key,
        )
        if raw is None:
            return default
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        pool = await self._pool.get()
        await pool.execute(
            """
            INSERT INTO import_state (namespace, key, value)
            VALUES ($1, $2, $3::jsonb)
            ON CONFLICT (namespace, key)
            DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
            """,
            self._namespace,
            key,
            json.dumps(value),
        )


__all__ = ["PostgresCounterStore", "PostgresDurableStore", "PostgresStatePool"]
