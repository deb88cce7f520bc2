"""Application services public API."""

from redshift_event_import.application.services.batch_import_job import BatchImportJob
from redshift_event_import.application.services.import_lifecycle import ImportLifecycle
from redshift_event_import.application.services.offset_allocator import (
    OffsetAllocator,
    offset_for_counter,
    seed_value,
)

__all__ = [
    "BatchImportJob",
    "ImportLifecycle",
    "OffsetAllocator",
    "offset_for_counter",
    "seed_value",
]
