"""
PetCare Dashboard — Level Simulator.

Emulates reservoir telemetry: every tick nudges the food and water levels
by a small random step, biased slightly downward to model consumption
between refills. Levels are pinned to [LEVEL_MIN, LEVEL_MAX].

The simulator is scheduler-agnostic: it depends on SchedulerPort and takes
an injectable random source so ticks are reproducible in tests.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from src.data.models import LiveLevels
    from src.ports.scheduler_port import ScheduledTask, SchedulerPort

logger = logging.getLogger(__name__)

LEVEL_MIN = 10.0
LEVEL_MAX = 100.0
DEFAULT_INTERVAL_SECONDS = 6.0

# (bias, amplitude): step = (rand() - bias) * amplitude
_FOOD_STEP = (0.55, 6.0)
_WATER_STEP = (0.45, 5.0)


class SimulatorState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


def clamp(value: float, low: float = LEVEL_MIN, high: float = LEVEL_MAX) -> float:
    """Pin *value* to [low, high]."""
    return min(high, max(low, value))


def next_levels(
    food: float, water: float, rand: Callable[[], float]
) -> tuple[float, float]:
    """Return (food, water) after one random-walk step."""
    bias, amplitude = _FOOD_STEP
    new_food = clamp(food + (rand() - bias) * amplitude)
    bias, amplitude = _WATER_STEP
    new_water = clamp(water + (rand() - bias) * amplitude)
    return new_food, new_water


class LevelSimulator:
    """Periodically perturbs a LiveLevels instance in place."""

    def __init__(
        self,
        levels: LiveLevels,
        scheduler: SchedulerPort,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        rand: Callable[[], float] | None = None,
        name: str = "level_simulator",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.levels = levels
        self._scheduler = scheduler
        self._interval = interval_seconds
        self._rand = rand or random.random
        self._name = name
        self._task: ScheduledTask | None = None
        self._state = SimulatorState.STOPPED
        self.ticks = 0

    @property
    def state(self) -> SimulatorState:
        return self._state

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def start(self) -> None:
        """Schedule the recurring tick. No-op if already running."""
        if self._state is SimulatorState.RUNNING:
            return
        self._task = self._scheduler.run_repeating(
            self._on_tick, self._interval, self._name,
        )
        self._state = SimulatorState.RUNNING
        logger.info("Level simulator '%s' started (every %.1fs)", self._name, self._interval)

    def stop(self) -> None:
        """Cancel the recurring tick. Safe to call more than once."""
        if self._state is SimulatorState.STOPPED:
            return
        self._state = SimulatorState.STOPPED
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
        logger.info("Level simulator '%s' stopped after %d ticks", self._name, self.ticks)

    def tick(self) -> None:
        """Advance the levels by one step."""
        self.levels.food, self.levels.water = next_levels(
            self.levels.food, self.levels.water, self._rand,
        )
        self.ticks += 1
        logger.debug(
            "Levels now food=%.1f water=%.1f", self.levels.food, self.levels.water,
        )

    def _on_tick(self) -> None:
        # A run already queued when stop() was called must not touch the levels.
        if self._state is not SimulatorState.RUNNING:
            return
        self.tick()
