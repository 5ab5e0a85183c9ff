"""Telegram JobQueue adapter — implements SchedulerPort.

Wraps a telegram.ext.JobQueue so recurring core tasks run on the bot's
own scheduler.
"""

from __future__ import annotations

import logging
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from telegram.ext import ContextTypes, Job, JobQueue

logger = logging.getLogger(__name__)


class JobHandle:
    """ScheduledTask backed by a telegram Job."""

    def __init__(self, job: Job) -> None:
        self._job = job
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        try:
            self._job.schedule_removal()
        except JobLookupError:
            # a stopped job queue has already dropped its jobs
            logger.debug("Job '%s' already gone from the stopped job queue", self._job.name)
        else:
            logger.debug("Job '%s' removed", self._job.name)
        self._cancelled = True


class JobQueueScheduler:
    """Telegram implementation of SchedulerPort."""

    def __init__(self, job_queue: JobQueue) -> None:
        self._job_queue = job_queue

    def run_repeating(
        self, callback: Callable[[], None], interval: float, name: str
    ) -> JobHandle:
        async def _job_callback(context: ContextTypes.DEFAULT_TYPE) -> None:
            callback()

        job = self._job_queue.run_repeating(
            _job_callback,
            interval=interval,
            first=interval,
            name=name,
        )
        logger.debug("Job '%s' scheduled every %.1fs", name, interval)
        return JobHandle(job)
