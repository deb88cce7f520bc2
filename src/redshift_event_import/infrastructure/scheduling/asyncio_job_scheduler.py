"""In-process job scheduler built on asyncio tasks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from redshift_event_import.domain.ports import JobHandler, JobScheduler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _ScheduledJob:
    job_name: str
    delay_seconds: float
    running: bool = False


class AsyncioJobScheduler(JobScheduler):
    """Run registered handlers as asyncio tasks, immediately or after a delay.

    Stopping cancels jobs still waiting for their delay and waits for jobs
    already running to finish.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, JobHandler] = {}
        self._jobs: dict[asyncio.Task[None], _ScheduledJob] = {}
        self._accepting = False
        self._stopped = False
        self._lifecycle_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._accepting

    def register(self, job_name: str, handler: JobHandler) -> None:
        if job_name in self._handlers:
            raise ValueError(f"Job '{job_name}' already has a handler.")
        self._handlers[job_name] = handler

    async def start(self) -> None:
        """Begin accepting jobs."""

        async with self._lifecycle_lock:
            self._accepting = True
            self._stopped = False

    async def stop(self) -> None:
        """Stop accepting jobs, drop waiting ones and drain running ones."""

        async with self._lifecycle_lock:
            if not self._accepting and not self._jobs:
                return
            self._accepting = False
            self._stopped = True
            jobs = dict(self._jobs)

        for task, job in jobs.items():
            if not job.running:
                task.cancel()
        for task in jobs:
            with suppress(asyncio.CancelledError):
                await task
        logger.debug("Job scheduler stopped with %s job(s) drained.", len(jobs))

    async def enqueue_now(self, job_name: str, payload: Mapping[str, Any]) -> None:
        self._schedule(job_name, payload, 0.0)

    async def enqueue_after(
        self,
        job_name: str,
        payload: Mapping[str, Any],
        delay_seconds: float,
    ) -> None:
        self._schedule(job_name, payload, max(delay_seconds, 0.0))

    def pending_jobs(self) -> int:
        """Number of jobs waiting for their delay or still running."""

        return len(self._jobs)

    async def wait_idle(self) -> None:
        """Wait until no job is waiting or running."""

        while self._jobs:
            await asyncio.gather(*list(self._jobs), return_exceptions=True)

    def _schedule(self, job_name: str, payload: Mapping[str, Any], delay_seconds: float) -> None:
        if self._stopped:
            logger.info("Job scheduler stopped; dropping job %s.", job_name)
            return
        if not self._accepting:
            raise RuntimeError("Job scheduler is not running.")
        if job_name not in self._handlers:
            raise KeyError(f"No handler registered for job '{job_name}'.")

        job = _ScheduledJob(job_name=job_name, delay_seconds=delay_seconds)
        task = asyncio.create_task(
            self._run_job(job, dict(payload)),
            name=f"job-{job_name}",
        )
        self._jobs[task] = job
        task.add_done_callback(self._jobs.pop)

    async def _run_job(self, job: _ScheduledJob, payload: dict[str, Any]) -> None:
        if job.delay_seconds > 0:
            await asyncio.sleep(job.delay_seconds)
        if not self._accepting:
            return

        job.running = True
        handler = self._handlers[job.job_name]
        try:
            await handler(payload)
        except Exception:
            logger.exception("Job %s failed.", job.job_name)


__all__ = ["AsyncioJobScheduler"]
