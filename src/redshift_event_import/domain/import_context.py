"""Snapshot of import state threaded through every batch job run."""

from __future__ import annotations

from dataclasses import dataclass

from redshift_event_import.domain.import_types import EVENTS_PER_BATCH, ImportMechanism
from redshift_event_import.domain.ports import CounterStore


@dataclass(slots=True, frozen=True)
class ImportContext:
    """Values fixed at startup plus the handle to the shared offset counter.

    `initial_offset` is the durable offset read at startup and `row_ceiling`
    the offset beyond which the import is complete for this process lifetime.
    """

    counter_store: CounterStore
    initial_offset: int
    row_ceiling: int
    import_mechanism: ImportMechanism = ImportMechanism.CONTINUOUS
    batch_size: int = EVENTS_PER_BATCH

    def __post_init__(self) -> None:
        if self.initial_offset < 0:
            raise ValueError("initial_offset must be >= 0.")
        if self.row_ceiling < 0:
            raise ValueError("row_ceiling must be >= 0.")
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1.")


__all__ = ["ImportContext"]
