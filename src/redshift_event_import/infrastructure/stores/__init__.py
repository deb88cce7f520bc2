"""Counter and durable store implementations."""

from redshift_event_import.infrastructure.stores.in_memory_state_store import (
    InMemoryCounterStore,
    InMemoryDurableStore,
)
from redshift_event_import.infrastructure.stores.postgres_state_store import (
    PostgresCounterStore,
    PostgresDurableStore,
    PostgresStatePool,
)

__all__ = [
    "InMemoryCounterStore",
    "InMemoryDurableStore",
    "PostgresCounterStore",
    "PostgresDurableStore",
    "PostgresStatePool",
]
