"""In-memory counter and durable stores for local development and tests."""

from __future__ import annotations

import asyncio
import copy
from typing import Any

from redshift_event_import.domain.ports import CounterStore, DurableStore


class InMemoryCounterStore(CounterStore):
    """Process-local counter store. Values are lost on restart."""

    def __init__(self) -> None:
        self._values: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str, default: int | None = None) -> int | None:
        return self._values.get(key, default)

    async def set(self, key: str, value: int) -> None:
        async with self._lock:
            self._values[key] = int(value)

    async def incr(self, key: str) -> int:
        async with self._lock:
            value = self._values.get(key, 0) + 1
            self._values[key] = value
            return value


class InMemoryDurableStore(DurableStore):
    """Key/value store that only outlives a restart when the instance is reused."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            if key not in self._values:
                return default
            return copy.deepcopy(self._values[key])

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            self._values[key] = copy.deepcopy(value)

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of every stored value."""

        return copy.deepcopy(self._values)


__all__ = ["InMemoryCounterStore", "InMemoryDurableStore"]
