"""
PetCare Dashboard — Session state.

One DashboardSession holds everything a dashboard view owns: the three
stores, the live levels, the simulator driving them and the selected
history mode. Opening seeds the defaults and starts the simulator;
closing cancels it. Nothing outlives the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from src.core import history
from src.core.dashboard import Stat, build_stats, day_panel
from src.core.level_simulator import (
    DEFAULT_INTERVAL_SECONDS,
    LevelSimulator,
    SimulatorState,
)
from src.core.recommendation import Recommendation, recommend
from src.data.defaults import (
    default_alerts,
    default_levels,
    default_profile,
    default_schedule,
)
from src.data.models import HistoryMode, HistorySeries, LiveLevels, ScheduleEntry
from src.data.stores import AlertStore, ProfileStore, ScheduleStore

if TYPE_CHECKING:
    from src.ports.scheduler_port import SchedulerPort

logger = logging.getLogger(__name__)


@dataclass
class DashboardSession:
    schedule: ScheduleStore
    alerts: AlertStore
    profile: ProfileStore
    levels: LiveLevels
    simulator: LevelSimulator
    history_mode: HistoryMode = HistoryMode.DAILY

    @classmethod
    def open(
        cls,
        scheduler: SchedulerPort,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        rand: Callable[[], float] | None = None,
        name: str = "level_simulator",
        id_factory: Callable[[], str] | None = None,
    ) -> DashboardSession:
        """Seed a fresh session from the defaults and start its simulator."""
        levels = default_levels()
        session = cls(
            schedule=ScheduleStore(default_schedule(), id_factory=id_factory),
            alerts=AlertStore(default_alerts()),
            profile=ProfileStore(default_profile()),
            levels=levels,
            simulator=LevelSimulator(
                levels, scheduler, interval_seconds=interval_seconds, rand=rand, name=name,
            ),
        )
        session.simulator.start()
        logger.info("Dashboard session '%s' opened", name)
        return session

    @property
    def is_open(self) -> bool:
        return self.simulator.state is SimulatorState.RUNNING

    def close(self) -> None:
        """Tear the session down. Idempotent."""
        if not self.is_open:
            return
        self.simulator.stop()
        logger.info("Dashboard session closed")

    def select_history(self, mode: HistoryMode | str) -> HistorySeries:
        series = history.select(mode)
        self.history_mode = series.mode
        return series

    def current_history(self) -> HistorySeries:
        return history.select(self.history_mode)

    def recommendation(self) -> Recommendation:
        return recommend(self.profile.get_profile())

    def stats(self) -> list[Stat]:
        return build_stats(self.levels, self.schedule.list_entries())

    def day_panel(self) -> list[ScheduleEntry]:
        return day_panel(self.schedule.list_entries())
