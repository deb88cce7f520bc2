"""The self-perpetuating batch import job."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from redshift_event_import.application.services.offset_allocator import OffsetAllocator
from redshift_event_import.domain.entities import (
    BatchJobPayload,
    ExecutionContext,
    ImportProgress,
    Row,
    TransformedEvent,
)
from redshift_event_import.domain.errors import TransformationError
from redshift_event_import.domain.import_context import ImportContext
from redshift_event_import.domain.import_types import (
    IMPORT_JOB_NAME,
    MAX_RETRIES_PER_OFFSET,
    BatchOutcome,
    BatchState,
    retry_delay_seconds,
)
from redshift_event_import.domain.ports import EventSink, JobScheduler, QueryExecutor
from redshift_event_import.domain.sql import build_batch_query
from redshift_event_import.domain.transformation_registry import TransformationRegistry

logger = logging.getLogger(__name__)


class BatchImportJob:
    """Fetch, transform and deliver one batch, then schedule what comes next.

    Each run is one host-scheduled unit of work. A successful run enqueues a
    fresh allocation immediately. A failed fetch enqueues a delayed retry of
    the same offset and a failed allocation enqueues a delayed fresh attempt.
    Every other outcome stops scheduling.
    """

    def __init__(
        self,
        query_executor: QueryExecutor,
        scheduler: JobScheduler,
        sink: EventSink,
        registry: TransformationRegistry,
        execution_context: ExecutionContext,
        transformation_name: str,
        *,
        job_name: str = IMPORT_JOB_NAME,
        max_retries: int = MAX_RETRIES_PER_OFFSET,
        strict_identifiers: bool = True,
    ) -> None:
        self._query_executor = query_executor
        self._scheduler = scheduler
        self._sink = sink
        self._registry = registry
        self._execution_context = execution_context
        self._transformation_name = transformation_name
        self._job_name = job_name
        self._max_retries = max_retries
        self._strict_identifiers = strict_identifiers
        self.progress = ImportProgress()

    @property
    def job_name(self) -> str:
        return self._job_name

    @property
    def transformation_name(self) -> str:
        return self._transformation_name

    @property
    def execution_context(self) -> ExecutionContext:
        return self._execution_context

    @property
    def registry(self) -> TransformationRegistry:
        return self._registry

    async def run(self, payload: BatchJobPayload, context: ImportContext) -> BatchOutcome:
        """Execute one batch for `payload` and return how it ended."""

        if payload.retries_performed_so_far >= self._max_retries:
            if payload.offset is None:
                logger.error(
                    "Import error: Unable to allocate an offset after %s attempts. "
                    "Import halted; restart once the counter store is reachable.",
                    payload.retries_performed_so_far,
                )
            else:
                logger.error(
                    "Import error: Unable to process rows %s-%s. Skipped them.",
                    payload.offset,
                    payload.offset + context.batch_size,
                )
            self.progress.batches_abandoned += 1
            return BatchOutcome.ABANDONED

        self._log_state(BatchState.ALLOCATING, payload)
        if payload.offset is None:
            allocator = OffsetAllocator(context.counter_store, context.batch_size)
            try:
                offset = await allocator.allocate(context.initial_offset)
            except Exception as exc:
                return await self._retry_allocation(payload, exc)
            # Fetch retries for the new offset start from zero.
            payload = BatchJobPayload()
        else:
            offset = payload.offset
        batch_end = offset + context.batch_size

        if offset > context.row_ceiling:
            logger.info(
                "Done processing all rows in %s (offset %s > row ceiling %s).",
                self._execution_context.table_name,
                offset,
                context.row_ceiling,
            )
            self.progress.done = True
            return BatchOutcome.DONE

        self._log_state(BatchState.FETCHING, payload, offset)
        query = build_batch_query(
            self._execution_context.table_name,
            self._execution_context.order_by_column,
            context.batch_size,
            strict=self._strict_identifiers,
        )
        result = await self._query_executor.execute(query, [offset])
        if not result.ok or result.rows is None:
            delay_seconds = retry_delay_seconds(payload.retries_performed_so_far)
            logger.warning(
                "Unable to process rows %s-%s. Retrying in %s seconds. Error: %s",
                offset,
                batch_end,
                delay_seconds,
                result.error,
            )
            await self._scheduler.enqueue_after(
                self._job_name,
                payload.retry_of(offset).to_dict(),
                delay_seconds,
            )
            self.progress.retries_scheduled += 1
            self.progress.last_error = str(result.error)
            return BatchOutcome.RETRYING

        self._log_state(BatchState.TRANSFORMING, payload, offset)
        try:
            events = self._transform_rows(result.rows)
        except TransformationError as exc:
            logger.error(
                "Unable to transform rows %s-%s with transformation '%s': %s. "
                "Import halted; fix the configuration and restart.",
                offset,
                batch_end,
                self._transformation_name,
                exc,
            )
            self.progress.batches_failed += 1
            self.progress.last_error = str(exc)
            return BatchOutcome.FAILED

        self._log_state(BatchState.DELIVERING, payload, offset)
        for event in events:
            await self._sink.ingest(event.event_name, dict(event.properties))

        logger.info(
            "Processed rows %s-%s and ingested %s event%s from them.",
            offset,
            batch_end,
            len(events),
            "" if len(events) == 1 else "s",
        )
        self.progress.batches_completed += 1
        self.progress.events_ingested += len(events)

        await self._scheduler.enqueue_now(self._job_name, BatchJobPayload().to_dict())
        return BatchOutcome.RESCHEDULED

    async def _retry_allocation(self, payload: BatchJobPayload, exc: Exception) -> BatchOutcome:
        delay_seconds = retry_delay_seconds(payload.retries_performed_so_far)
        logger.warning(
            "Unable to allocate the next offset. Retrying in %s seconds. Error: %s",
            delay_seconds,
            exc,
        )
        await self._scheduler.enqueue_after(
            self._job_name,
            BatchJobPayload(retries_performed_so_far=payload.retries_performed_so_far + 1).to_dict(),
            delay_seconds,
        )
        self.progress.retries_scheduled += 1
        self.progress.last_error = str(exc)
        return BatchOutcome.RETRYING

    def _transform_rows(self, rows: Iterable[Row]) -> list[TransformedEvent]:
        entry = self._registry.get_entry(self._transformation_name)
        events: list[TransformedEvent] = []
        for row in rows:
            try:
                events.append(entry.transform(row, self._execution_context))
            except TransformationError:
                raise
            except Exception as exc:
                raise TransformationError(
                    f"Transformation '{self._transformation_name}' failed: {exc}"
                ) from exc
        return events

    def _log_state(
        self,
        state: BatchState,
        payload: BatchJobPayload,
        offset: int | None = None,
    ) -> None:
        logger.debug(
            "Batch job %s (offset=%s, retries=%s)",
            state,
            offset if offset is not None else payload.offset,
            payload.retries_performed_so_far,
        )


__all__ = ["BatchImportJob"]
