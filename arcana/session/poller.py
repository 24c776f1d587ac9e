"""
Job Poller.

One asyncio task per backend job, kept in a registry keyed by job id.
Each task checks the job's status every `interval` seconds until the job
reaches a terminal status or a status check fails, then removes itself
from the registry. shutdown() cancels whatever is still running.
"""

import asyncio
import json
from typing import Any

from arcana.cli.gateway import CommandGateway, JobStatus
from arcana.core.config import get_app_config
from arcana.core.exceptions import GatewayError
from arcana.core.logging import get_logger, log_with_source
from arcana.session.state import (
    TERMINAL_JOB_STATUSES,
    TranscriptEntry,
    append_entries,
    log_error,
    merge_job_status,
    stop_polling,
)
from arcana.session.store import SessionStore

logger = get_logger(__name__)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, indent=2)


def final_output(status: JobStatus) -> str:
    """Text shown when a job finishes: final_result, else error, else a placeholder."""
    for value in (status.final_result, status.error):
        if value:
            return _as_text(value)
    return "No output."


class JobPoller:
    """
    Registry of polling tasks.

    Invariant: at most one live task per job id.

    Usage:
        poller = JobPoller(store, gateway)
        poller.start("J1")
        ...
        await poller.shutdown()
    """

    def __init__(self, store: SessionStore, gateway: CommandGateway, interval: float | None = None) -> None:
        self.store = store
        self.gateway = gateway
        self.interval = (
            interval if interval is not None
            else get_app_config().application.polling.interval_seconds
        )
        self._tasks: dict[str, asyncio.Task] = {}

    def is_polling(self, job_id: str) -> bool:
        task = self._tasks.get(job_id)
        return task is not None and not task.done()

    @property
    def active_job_ids(self) -> list[str]:
        return [job_id for job_id in self._tasks if self.is_polling(job_id)]

    def start(self, job_id: str) -> bool:
        """
        Start polling a job.

        Returns:
            False if the job already has a live task, True otherwise.
        """
        if self.is_polling(job_id):
            return False
        self._tasks[job_id] = asyncio.create_task(self._poll(job_id), name=f"poll-job-{job_id}")
        log_with_source(logger, "session", "info", "Job polling started", job_id=job_id, interval=self.interval)
        return True

    async def _poll(self, job_id: str) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                try:
                    status = await self.gateway.fetch_job_status(job_id)
                except GatewayError as e:
                    log_with_source(logger, "session", "warning", "Job polling failed", job_id=job_id, error=e.message)
                    self.store.apply(
                        stop_polling(job_id),
                        log_error(f"Job Polling Error ({job_id}): {e.message}"),
                    )
                    return
                if self._apply_status(job_id, status):
                    return
        finally:
            if self._tasks.get(job_id) is asyncio.current_task():
                del self._tasks[job_id]

    def _apply_status(self, job_id: str, status: JobStatus) -> bool:
        """Merge one status report. Returns True when the job is finished."""
        merge = merge_job_status(job_id, status.model_dump(exclude_unset=True))

        if status.status not in TERMINAL_JOB_STATUSES:
            self.store.apply(merge)
            return False

        kind = "success" if status.status == "completed" else "error"
        self.store.apply(
            merge,
            stop_polling(job_id),
            append_entries(
                TranscriptEntry(kind, f"Job {job_id} {status.status}."),
                TranscriptEntry("output", final_output(status)),
            ),
        )
        log_with_source(logger, "session", "info", "Job finished", job_id=job_id, status=status.status)
        return True

    async def shutdown(self) -> None:
        """Cancel every live polling task and wait for them to unwind."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            log_with_source(logger, "session", "debug", "Job polling cancelled", count=len(tasks))
