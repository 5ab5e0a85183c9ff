"""Scheduler port — abstract interface for recurring timer tasks.

Core modules depend on this protocol, never on a specific event loop or
job queue.
"""

from __future__ import annotations

from typing import Callable, Protocol


class ScheduledTask(Protocol):
    """Handle to a recurring task. Cancelling stops all future runs."""

    def cancel(self) -> None: ...


class SchedulerPort(Protocol):
    """Abstract recurring-timer interface used by core modules."""

    def run_repeating(
        self, callback: Callable[[], None], interval: float, name: str
    ) -> ScheduledTask: ...
