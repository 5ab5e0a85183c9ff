"""
PetCare Dashboard — Data Models.

Every entity lives in memory for the lifetime of one dashboard session.
Nothing here is persisted; re-opening a session reseeds from defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryType(str, Enum):
    """Kind of scheduled event: a food portion or a water refill."""

    FOOD = "comida"
    WATER = "agua"

    @property
    def label(self) -> str:
        return "Comida" if self is EntryType.FOOD else "Agua"


class Diet(str, Enum):
    """Diet plan; the value is the label shown to the user."""

    STANDARD = "Balanceada premium"
    HIGH_ENERGY = "Alta energía"
    LIGHT = "Light"
    HYPOALLERGENIC = "Hipoalergénica"


class HistoryMode(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass
class ScheduleEntry:
    """A planned feeding or water-refill event with a time-of-day trigger."""

    id: str
    time: str             # HH:MM, 24h, zero padded
    title: str
    detail: str           # e.g. "70 g de croquetas + 200 ml de agua fresca"
    type: EntryType


@dataclass
class AlertItem:
    """A dispenser alert. Only `acknowledged` ever changes."""

    id: str
    status: str
    message: str
    tone: str             # presentation tag: "danger" | "warning" | "info"
    acknowledged: bool = False


@dataclass
class PetProfile:
    name: str
    weight: float         # kg
    age: float            # years
    diet: Diet = Diet.STANDARD


@dataclass
class LiveLevels:
    """Simulated reservoir fill, in percent. Kept within [10, 100]."""

    food: float
    water: float


@dataclass(frozen=True)
class HistorySeries:
    """A fixed consumption series with one label per sample."""

    mode: HistoryMode
    values: tuple[int, ...]
    labels: tuple[str, ...]
    unit: str             # e.g. "g por día"
