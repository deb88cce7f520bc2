"""Import mechanism, batch state and fixed import constants."""

from enum import StrEnum

EVENTS_PER_BATCH = 10
MAX_RETRIES_PER_OFFSET = 15
RETRY_BASE_DELAY_SECONDS = 3
DEFAULT_STARTUP_DELAY_SECONDS = 10.0

IMPORT_JOB_NAME = "importAndIngestEvents"
OFFSET_KEY = "import_offset"
TOTAL_ROWS_SNAPSHOT_KEY = "total_rows_snapshot"

REDSHIFT_HOST_SUFFIX = "redshift.amazonaws.com"
IMPORT_SOURCE_MARKER = "redshift_import"


class ImportMechanism(StrEnum):
    """How the row ceiling is chosen."""

    CONTINUOUS = "Import continuously"
    HISTORICAL = "Only import historical data"


class BatchState(StrEnum):
    """Steps one batch job run goes through."""

    ALLOCATING = "ALLOCATING"
    FETCHING = "FETCHING"
    TRANSFORMING = "TRANSFORMING"
    DELIVERING = "DELIVERING"


class BatchOutcome(StrEnum):
    """Terminal result of one batch job run."""

    RESCHEDULED = "RESCHEDULED"
    RETRYING = "RETRYING"
    DONE = "DONE"
    ABANDONED = "ABANDONED"
    FAILED = "FAILED"


def retry_delay_seconds(retries_performed_so_far: int) -> int:
    """Backoff before retrying the same offset: 3, 6, 12, 24, ... seconds."""

    return RETRY_BASE_DELAY_SECONDS * 2 ** max(retries_performed_so_far, 0)


__all__ = [
    "BatchOutcome",
    "BatchState",
    "DEFAULT_STARTUP_DELAY_SECONDS",
    "EVENTS_PER_BATCH",
    "IMPORT_JOB_NAME",
    "IMPORT_SOURCE_MARKER",
    "ImportMechanism",
    "MAX_RETRIES_PER_OFFSET",
    "OFFSET_KEY",
    "REDSHIFT_HOST_SUFFIX",
    "RETRY_BASE_DELAY_SECONDS",
    "TOTAL_ROWS_SNAPSHOT_KEY",
    "retry_delay_seconds",
]
