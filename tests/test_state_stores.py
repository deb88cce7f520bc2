from __future__ import annotations

import asyncio

import pytest

from redshift_event_import.infrastructure.stores import (
    InMemoryCounterStore,
    InMemoryDurableStore,
    PostgresStatePool,
)


def test_in_memory_counter_incr_is_atomic_under_concurrency() -> None:
    async def scenario() -> tuple[list[int], int | None]:
        store = InMemoryCounterStore()
        values = await asyncio.gather(*(store.incr("import_offset") for _ in range(100)))
        return list(values), await store.get("import_offset")

    values, final = asyncio.run(scenario())

    assert sorted(values) == list(range(1, 101))
    assert final == 100


def test_in_memory_counter_get_returns_default_for_missing_key() -> None:
    assert asyncio.run(InMemoryCounterStore().get("missing", 7)) == 7


def test_in_memory_durable_store_round_trips_values() -> None:
    async def scenario() -> tuple[object, object]:
        store = InMemoryDurableStore()
        await store.set("import_offset", 40)
        return await store.get("import_offset"), await store.get("missing", 0)

    assert asyncio.run(scenario()) == (40, 0)


def test_in_memory_durable_store_returns_copies() -> None:
    async def scenario() -> object:
        store = InMemoryDurableStore()
        value = {"offset": 1}
        await store.set("state", value)
        value["offset"] = 2
        return await store.get("state")

    assert asyncio.run(scenario()) == {"offset": 1}


def test_postgres_state_pool_requires_dsn() -> None:
    with pytest.raises(ValueError):
        PostgresStatePool(dsn=" ")


def test_postgres_state_pool_close_without_connection_is_noop() -> None:
    asyncio.run(PostgresStatePool(dsn="postgresql://localhost/import_state").close())
