"""Tests for src.adapters.job_queue_scheduler — SchedulerPort over JobQueue."""

import logging
from unittest.mock import MagicMock

import pytest
from apscheduler.jobstores.base import JobLookupError
from telegram.ext import ApplicationBuilder

from src.adapters.job_queue_scheduler import JobHandle, JobQueueScheduler


class TestJobQueueScheduler:
    def test_registers_repeating_job(self):
        job_queue = MagicMock()
        scheduler = JobQueueScheduler(job_queue)
        handle = scheduler.run_repeating(lambda: None, 6.0, "levels:1")

        job_queue.run_repeating.assert_called_once()
        kwargs = job_queue.run_repeating.call_args.kwargs
        assert kwargs["interval"] == 6.0
        assert kwargs["first"] == 6.0
        assert kwargs["name"] == "levels:1"
        assert isinstance(handle, JobHandle)

    @pytest.mark.asyncio
    async def test_job_callback_invokes_core_callback(self):
        job_queue = MagicMock()
        calls = []
        JobQueueScheduler(job_queue).run_repeating(lambda: calls.append(1), 6.0, "x")

        job_callback = job_queue.run_repeating.call_args.args[0]
        await job_callback(MagicMock())
        assert calls == [1]


class TestJobHandle:
    def test_cancel_removes_job_once(self):
        job = MagicMock()
        handle = JobHandle(job)
        handle.cancel()
        handle.cancel()
        job.schedule_removal.assert_called_once()
        assert handle.cancelled is True

    def test_not_cancelled_initially(self):
        assert JobHandle(MagicMock()).cancelled is False

    def test_cancel_tolerates_job_already_dropped(self, caplog):
        job = MagicMock()
        job.name = "levels:1"
        job.schedule_removal.side_effect = JobLookupError("levels:1")
        handle = JobHandle(job)

        with caplog.at_level(logging.DEBUG, logger="src.adapters.job_queue_scheduler"):
            handle.cancel()
            handle.cancel()

        assert handle.cancelled is True
        job.schedule_removal.assert_called_once()
        assert "already gone" in caplog.text


class TestJobQueueLifecycle:
    """Runs against a real telegram JobQueue, no network involved."""

    @pytest.mark.asyncio
    async def test_cancel_while_queue_running(self):
        app = ApplicationBuilder().token("123456:fake-token").build()
        await app.job_queue.start()
        try:
            handle = JobQueueScheduler(app.job_queue).run_repeating(lambda: None, 60.0, "levels:1")
            assert [j.name for j in app.job_queue.jobs()] == ["levels:1"]
            handle.cancel()
            assert handle.cancelled is True
        finally:
            await app.job_queue.stop()

    @pytest.mark.asyncio
    async def test_cancel_after_queue_stopped(self):
        app = ApplicationBuilder().token("123456:fake-token").build()
        await app.job_queue.start()
        handle = JobQueueScheduler(app.job_queue).run_repeating(lambda: None, 60.0, "levels:1")
        await app.job_queue.stop()

        handle.cancel()
        assert handle.cancelled is True
