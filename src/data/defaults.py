"""
PetCare Dashboard — Seed data.

The content every new session starts from. Factories return fresh objects
so one session's mutations never leak into another.
"""

from __future__ import annotations

from src.data.models import (
    AlertItem,
    Diet,
    EntryType,
    HistoryMode,
    HistorySeries,
    LiveLevels,
    PetProfile,
    ScheduleEntry,
)

DAY_LABELS = ("L", "M", "X", "J", "V", "S", "D")
WEEK_LABELS = ("Sem1", "Sem2", "Sem3", "Sem4", "Sem5", "Sem6", "Sem7")

DAILY_HISTORY = (320, 280, 290, 340, 305, 295, 310)
WEEKLY_HISTORY = (2150, 2080, 2200, 2300, 2180, 2240, 2210)

HISTORY: dict[HistoryMode, HistorySeries] = {
    HistoryMode.DAILY: HistorySeries(
        mode=HistoryMode.DAILY,
        values=DAILY_HISTORY,
        labels=DAY_LABELS,
        unit="g por día",
    ),
    HistoryMode.WEEKLY: HistorySeries(
        mode=HistoryMode.WEEKLY,
        values=WEEKLY_HISTORY,
        labels=WEEK_LABELS,
        unit="g por semana",
    ),
}


def default_schedule() -> list[ScheduleEntry]:
    return [
        ScheduleEntry(
            id="schedule-1",
            time="07:00",
            title="Desayuno energético",
            detail="70 g de croquetas + 200 ml de agua fresca",
            type=EntryType.FOOD,
        ),
        ScheduleEntry(
            id="schedule-2",
            time="13:30",
            title="Snack saludable",
            detail="40 g de dieta húmeda con suplemento de omega-3",
            type=EntryType.FOOD,
        ),
        ScheduleEntry(
            id="schedule-3",
            time="19:00",
            title="Cena balanceada",
            detail="80 g de croquetas light + 150 ml de agua",
            type=EntryType.FOOD,
        ),
        ScheduleEntry(
            id="schedule-4",
            time="21:30",
            title="Recarga nocturna",
            detail="250 ml de agua filtrada y fresca",
            type=EntryType.WATER,
        ),
    ]


def default_alerts() -> list[AlertItem]:
    return [
        AlertItem(
            id="alert-1",
            status="Nivel de agua bajo",
            message="Quedan 15% en el depósito. Recomendado recargar hoy.",
            tone="danger",
            acknowledged=False,
        ),
        AlertItem(
            id="alert-2",
            status="Próxima limpieza",
            message="Faltan 3 días para la limpieza preventiva del dispensador.",
            tone="warning",
            acknowledged=False,
        ),
        AlertItem(
            id="alert-3",
            status="Filtro de agua",
            message="Último cambio hace 28 días. Programa un reemplazo pronto.",
            tone="info",
            acknowledged=True,
        ),
    ]


def default_profile() -> PetProfile:
    return PetProfile(name="Luna", weight=6.5, age=3, diet=Diet.STANDARD)


def default_levels() -> LiveLevels:
    return LiveLevels(food=78.0, water=72.0)
