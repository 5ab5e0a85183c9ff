"""Monitoring tiles and day panel — pure presentation data.

Derives the four monitoring stats and the day-panel preview from the
current levels and schedule.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.recommendation import round_half_up
from src.data.models import EntryType, LiveLevels, ScheduleEntry

DAY_PANEL_LIMIT = 4


@dataclass(frozen=True)
class Stat:
    label: str
    value: str


def build_stats(levels: LiveLevels, schedule: list[ScheduleEntry]) -> list[Stat]:
    """Food/water fill (rounded percent) plus counts of scheduled portions and refills."""
    portions = sum(1 for e in schedule if e.type is EntryType.FOOD)
    refills = sum(1 for e in schedule if e.type is EntryType.WATER)
    return [
        Stat("Croquetas disponibles", f"{round_half_up(levels.food)}%"),
        Stat("Agua disponible", f"{round_half_up(levels.water)}%"),
        Stat("Porciones programadas", f"{portions} porciones"),
        Stat("Recargas de agua", f"{refills} recargas"),
    ]


def day_panel(
    schedule: list[ScheduleEntry], limit: int = DAY_PANEL_LIMIT
) -> list[ScheduleEntry]:
    """The first *limit* entries of the (already time-sorted) schedule."""
    return schedule[:limit]
