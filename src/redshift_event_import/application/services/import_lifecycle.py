"""Startup and shutdown hooks for the import, plus its status view."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from redshift_event_import.application.services.batch_import_job import BatchImportJob
from redshift_event_import.application.services.offset_allocator import (
    OffsetAllocator,
    seed_value,
)
from redshift_event_import.domain.entities import BatchJobPayload, SourceConnectionOptions
from redshift_event_import.domain.errors import (
    CounterSeedError,
    ImportConfigurationError,
    SourceUnavailableError,
)
from redshift_event_import.domain.import_context import ImportContext
from redshift_event_import.domain.import_types import (
    DEFAULT_STARTUP_DELAY_SECONDS,
    EVENTS_PER_BATCH,
    OFFSET_KEY,
    REDSHIFT_HOST_SUFFIX,
    TOTAL_ROWS_SNAPSHOT_KEY,
    ImportMechanism,
)
from redshift_event_import.domain.monitoring_models import (
    ImportProgressResponse,
    ImportStatusResponse,
)
from redshift_event_import.domain.ports import (
    ClosableResource,
    CounterStore,
    DurableStore,
    JobScheduler,
    QueryExecutor,
)
from redshift_event_import.domain.sql import build_batch_query, build_count_query

logger = logging.getLogger(__name__)


@runtime_checkable
class _StartableScheduler(Protocol):
    """Optional scheduler lifecycle hooks."""

    async def start(self) -> None:
        """Begin accepting and running jobs."""

    async def stop(self) -> None:
        """Cancel pending jobs and stop accepting new ones."""


class ImportLifecycle:
    """Owns the import between process startup and shutdown."""

    def __init__(
        self,
        connection_options: SourceConnectionOptions,
        query_executor: QueryExecutor,
        counter_store: CounterStore,
        durable_store: DurableStore,
        scheduler: JobScheduler,
        job: BatchImportJob,
        *,
        import_mechanism: ImportMechanism = ImportMechanism.CONTINUOUS,
        startup_delay_seconds: float = DEFAULT_STARTUP_DELAY_SECONDS,
        batch_size: int = EVENTS_PER_BATCH,
        expected_host_suffix: str = REDSHIFT_HOST_SUFFIX,
        strict_identifiers: bool = True,
        resources: Sequence[ClosableResource] = (),
    ) -> None:
        self._connection_options = connection_options
        self._query_executor = query_executor
        self._counter_store = counter_store
        self._durable_store = durable_store
        self._scheduler = scheduler
        self._job = job
        self._import_mechanism = import_mechanism
        self._startup_delay_seconds = max(startup_delay_seconds, 0.0)
        self._batch_size = batch_size
        self._expected_host_suffix = expected_host_suffix
        self._strict_identifiers = strict_identifiers
        self._resources = list(resources)
        self._context: ImportContext | None = None

    @property
    def context(self) -> ImportContext | None:
        """Snapshot produced by the last successful startup."""

        return self._context

    @property
    def job(self) -> BatchImportJob:
        return self._job

    async def startup(self) -> ImportContext:
        """Validate, snapshot the row ceiling, seed the counter, schedule the first job.

        Any failure here aborts startup before a job is scheduled.
        """

        self._validate_configuration()
        table_name = self._job.execution_context.table_name

        count_result = await self._query_executor.execute(
            build_count_query(table_name, strict=self._strict_identifiers)
        )
        if not count_result.ok or not count_result.rows:
            raise SourceUnavailableError("Unable to connect to Redshift!") from count_result.error
        row_ceiling = _row_count(count_result.rows[0])

        if self._import_mechanism is ImportMechanism.HISTORICAL:
            snapshot = await self._durable_store.get(TOTAL_ROWS_SNAPSHOT_KEY, None)
            if snapshot is None:
                await self._durable_store.set(TOTAL_ROWS_SNAPSHOT_KEY, row_ceiling)
                logger.info("Recorded historical row snapshot of %s for %s.", row_ceiling, table_name)
            else:
                row_ceiling = int(snapshot)

        durable_offset = int(await self._durable_store.get(OFFSET_KEY, 0) or 0)
        allocator = OffsetAllocator(self._counter_store, self._batch_size)
        try:
            await allocator.seed(durable_offset)
        except Exception as exc:
            logger.error(
                "Could not seed offset counter with %s, calculated from durable offset %s "
                "divided by batch size %s.",
                seed_value(durable_offset, self._batch_size),
                durable_offset,
                self._batch_size,
            )
            raise CounterSeedError("Unable to seed the import offset counter.") from exc

        context = ImportContext(
            counter_store=self._counter_store,
            initial_offset=durable_offset,
            row_ceiling=row_ceiling,
            import_mechanism=self._import_mechanism,
            batch_size=self._batch_size,
        )
        self._context = context

        if isinstance(self._scheduler, _StartableScheduler):
            await self._scheduler.start()
        self._scheduler.register(self._job.job_name, self._handle_job)
        await self._scheduler.enqueue_after(
            self._job.job_name,
            BatchJobPayload().to_dict(),
            self._startup_delay_seconds,
        )
        logger.info(
            "Import of %s started at offset %s with row ceiling %s (%s).",
            table_name,
            durable_offset,
            row_ceiling,
            self._import_mechanism,
        )
        return context

    async def shutdown(self) -> None:
        """Persist the reached offset, clamped to the row ceiling, and release resources."""

        try:
            if isinstance(self._scheduler, _StartableScheduler):
                await self._scheduler.stop()

            context = self._context
            if context is None:
                return

            allocator = OffsetAllocator(self._counter_store, context.batch_size)
            reached_offset = await allocator.next_offset(context.initial_offset)
            offset_to_store = min(reached_offset, context.row_ceiling)
            await self._durable_store.set(OFFSET_KEY, offset_to_store)
            logger.info(
                "Persisted import offset %s for %s.",
                offset_to_store,
                self._job.execution_context.table_name,
            )
        finally:
            await self._close_resources()

    async def status(self) -> ImportStatusResponse | None:
        """Return the cursor and progress, or None before startup completed."""

        context = self._context
        if context is None:
            return None

        allocator = OffsetAllocator(self._counter_store, context.batch_size)
        next_offset = await allocator.next_offset(context.initial_offset)
        percent_complete = None
        if context.row_ceiling > 0:
            ratio = min(next_offset, context.row_ceiling) / context.row_ceiling * 100
            percent_complete = round(ratio, 2)

        progress = self._job.progress
        return ImportStatusResponse(
            table_name=self._job.execution_context.table_name,
            import_mechanism=context.import_mechanism,
            transformation_name=self._job.transformation_name,
            row_ceiling=context.row_ceiling,
            initial_offset=context.initial_offset,
            next_offset=next_offset,
            percent_complete=percent_complete,
            progress=ImportProgressResponse(
                batches_completed=progress.batches_completed,
                events_ingested=progress.events_ingested,
                retries_scheduled=progress.retries_scheduled,
                batches_abandoned=progress.batches_abandoned,
                batches_failed=progress.batches_failed,
                done=progress.done,
                last_error=progress.last_error,
            ),
        )

    async def _handle_job(self, payload: Mapping[str, Any]) -> None:
        context = self._context
        if context is None:
            raise RuntimeError("Import job triggered before startup completed.")
        await self._job.run(BatchJobPayload.from_dict(payload), context)

    def _validate_configuration(self) -> None:
        missing = self._connection_options.missing_options()
        execution_context = self._job.execution_context
        if not execution_context.table_name:
            missing.append("tableName")
        if not execution_context.order_by_column:
            missing.append("orderByColumn")
        if missing:
            raise ImportConfigurationError(f"Required config option {missing[0]} is missing!")

        host = (self._connection_options.host or "").strip().lower()
        if not host.endswith(self._expected_host_suffix):
            raise ImportConfigurationError("Cluster host must be a valid AWS Redshift host")

        # Rejects unsafe identifiers before anything is scheduled.
        build_batch_query(
            execution_context.table_name,
            execution_context.order_by_column,
            self._batch_size,
            strict=self._strict_identifiers,
        )

        if self._job.transformation_name not in self._job.registry:
            logger.warning(
                "Transformation '%s' is not registered; every batch will fail until it is.",
                self._job.transformation_name,
            )

    async def _close_resources(self) -> None:
        for resource in self._resources:
            try:
                await resource.close()
            except Exception:
                logger.exception("Failed to close %s.", type(resource).__name__)


def _row_count(row: Mapping[str, Any]) -> int:
    if "count" in row:
        return int(row["count"])
    return int(next(iter(row.values())))


__all__ = ["ImportLifecycle"]
