"""Race-free batch offset allocation on top of the shared counter store."""

from __future__ import annotations

from redshift_event_import.domain.import_types import EVENTS_PER_BATCH, OFFSET_KEY
from redshift_event_import.domain.ports import CounterStore


def seed_value(durable_offset: int, batch_size: int = EVENTS_PER_BATCH) -> int:
    """Counter value published at startup for a given durable offset."""

    return durable_offset // batch_size


def offset_for_counter(
    initial_offset: int,
    counter_value: int,
    batch_size: int = EVENTS_PER_BATCH,
) -> int:
    """Absolute offset that corresponds to a counter reading.

    The counter starts at `seed_value(initial_offset)`, so that reading maps
    back to `initial_offset` itself and every tick advances one batch.
    """

    return initial_offset + (counter_value - seed_value(initial_offset, batch_size)) * batch_size


class OffsetAllocator:
    """Turn job triggers into distinct, increasing, batch-aligned offsets.

    Two concurrent callers always receive different ranges because each
    allocation is exactly one atomic increment at the counter store.
    """

    def __init__(
        self,
        counter_store: CounterStore,
        batch_size: int = EVENTS_PER_BATCH,
        key: str = OFFSET_KEY,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1.")
        self._counter_store = counter_store
        self._batch_size = batch_size
        self._key = key

    async def seed(self, durable_offset: int) -> int:
        """Publish the counter value matching the durable offset."""

        value = seed_value(durable_offset, self._batch_size)
        await self._counter_store.set(self._key, value)
        return value

    async def allocate(self, initial_offset: int) -> int:
        """Claim the next batch and return its absolute start offset."""

        counter_value = await self._counter_store.incr(self._key)
        return offset_for_counter(initial_offset, counter_value - 1, self._batch_size)

    def to_absolute(self, initial_offset: int, counter_value: int) -> int:
        """Convert a counter reading into the next unissued absolute offset."""

        return offset_for_counter(initial_offset, counter_value, self._batch_size)

    async def next_offset(self, initial_offset: int) -> int:
        """Return the first offset that has not been handed out yet."""

        default = seed_value(initial_offset, self._batch_size)
        counter_value = await self._counter_store.get(self._key, default)
        if counter_value is None:
            counter_value = default
        return self.to_absolute(initial_offset, int(counter_value))


__all__ = ["OffsetAllocator", "offset_for_counter", "seed_value"]
