"""
PetCare Dashboard — In-memory stores.

Schedule, alerts and pet profile for a single dashboard session. Each store
owns its collection outright; reads hand out copies so callers can't bypass
the store's invariants.
"""

from __future__ import annotations

import logging
import math
import time
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable

from src.core.profile_updates import SetAge, SetDiet, SetName, SetWeight
from src.data.models import AlertItem, EntryType, PetProfile, ScheduleEntry

logger = logging.getLogger(__name__)


class InvalidEntryError(ValueError):
    """Raised when a schedule entry is rejected. The store is left unchanged."""


def _new_entry_id() -> str:
    """Millisecond timestamp plus a short random suffix, e.g. "1718000000000-3fa9c1"."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def normalize_time(raw: str) -> str:
    """Return *raw* as zero-padded HH:MM, so string order equals time order.

    Raises InvalidEntryError on anything that isn't a 24h time of day.
    """
    try:
        return datetime.strptime(raw.strip(), "%H:%M").strftime("%H:%M")
    except (ValueError, AttributeError) as exc:
        raise InvalidEntryError(f"Invalid time {raw!r}, expected HH:MM") from exc


class ScheduleStore:
    """Ordered feeding/water schedule, always sorted by time of day."""

    def __init__(
        self,
        entries: list[ScheduleEntry] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._id_factory = id_factory or _new_entry_id
        self._entries: list[ScheduleEntry] = list(entries or [])
        self._entries.sort(key=lambda e: e.time)
        self._issued_ids: set[str] = {e.id for e in self._entries}

    def _fresh_id(self) -> str:
        entry_id = self._id_factory()
        while entry_id in self._issued_ids:
            entry_id = self._id_factory()
        self._issued_ids.add(entry_id)
        return entry_id

    def add_entry(
        self,
        time: str,
        title: str,
        detail: str,
        type: EntryType | str,
    ) -> str:
        """Insert a new entry and return its id.

        Title and detail are trimmed; either being empty rejects the entry.
        The sort is stable, so entries sharing a time keep insertion order.

        Raises:
            InvalidEntryError: empty title/detail, bad time or unknown type.
        """
        title = (title or "").strip()
        detail = (detail or "").strip()
        if not title or not detail:
            logger.warning("Rejected schedule entry with empty title or detail")
            raise InvalidEntryError("Title and detail are required")

        hhmm = normalize_time(time)
        try:
            entry_type = EntryType(type)
        except ValueError as exc:
            raise InvalidEntryError(f"Unknown entry type {type!r}") from exc

        entry = ScheduleEntry(
            id=self._fresh_id(),
            time=hhmm,
            title=title,
            detail=detail,
            type=entry_type,
        )
        self._entries.append(entry)
        self._entries.sort(key=lambda e: e.time)
        logger.info("Schedule entry %s added at %s (%s)", entry.id, hhmm, entry_type.value)
        return entry.id

    def remove_entry(self, entry_id: str) -> bool:
        """Remove the entry with *entry_id*. Unknown ids are a no-op (returns False)."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        removed = len(self._entries) < before
        if removed:
            logger.info("Schedule entry %s removed", entry_id)
        else:
            logger.debug("Schedule entry %s not found, nothing removed", entry_id)
        return removed

    def get_entry(self, entry_id: str) -> ScheduleEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return replace(entry)
        return None

    def list_entries(self) -> list[ScheduleEntry]:
        return [replace(e) for e in self._entries]

    def count_by_type(self, entry_type: EntryType) -> int:
        return sum(1 for e in self._entries if e.type is entry_type)


class AlertStore:
    """Fixed alert list; only the acknowledged flag can change."""

    def __init__(self, alerts: list[AlertItem]) -> None:
        self._alerts = [replace(a) for a in alerts]

    def toggle_acknowledged(self, alert_id: str) -> AlertItem | None:
        """Flip the acknowledged flag. Returns the updated alert, or None if unknown."""
        for alert in self._alerts:
            if alert.id == alert_id:
                alert.acknowledged = not alert.acknowledged
                logger.info(
                    "Alert %s acknowledged=%s", alert_id, alert.acknowledged,
                )
                return replace(alert)
        logger.debug("Alert %s not found, nothing toggled", alert_id)
        return None

    def get_alert(self, alert_id: str) -> AlertItem | None:
        for alert in self._alerts:
            if alert.id == alert_id:
                return replace(alert)
        return None

    def list_alerts(self) -> list[AlertItem]:
        """Alerts in their original order, regardless of acknowledgment."""
        return [replace(a) for a in self._alerts]

    def pending_count(self) -> int:
        return sum(1 for a in self._alerts if not a.acknowledged)


def _non_negative(value: float) -> float:
    if math.isnan(value) or value < 0:
        return 0.0
    return float(value)


class ProfileStore:
    """The pet's profile. Updated one field at a time via explicit update variants."""

    def __init__(self, profile: PetProfile) -> None:
        self._profile = replace(profile)

    def apply(self, update: SetName | SetWeight | SetAge | SetDiet) -> PetProfile:
        """Apply a single-field update and return the new profile snapshot.

        Weight and age are clamped to non-negative so downstream
        recommendations never go negative.
        """
        if isinstance(update, SetName):
            self._profile.name = update.name
        elif isinstance(update, SetWeight):
            if update.weight < 0:
                logger.warning("Negative weight %s clamped to 0", update.weight)
            self._profile.weight = _non_negative(update.weight)
        elif isinstance(update, SetAge):
            if update.age < 0:
                logger.warning("Negative age %s clamped to 0", update.age)
            self._profile.age = _non_negative(update.age)
        elif isinstance(update, SetDiet):
            self._profile.diet = update.diet
        else:
            raise TypeError(f"Unsupported profile update: {type(update).__name__}")

        logger.info("Profile updated: %s", update.kind)
        return self.get_profile()

    def get_profile(self) -> PetProfile:
        return replace(self._profile)
