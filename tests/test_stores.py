"""Tests for src.data.stores — schedule, alert and profile stores."""

import pytest

from src.core.profile_updates import SetAge, SetDiet, SetName, SetWeight
from src.data.models import AlertItem, Diet, EntryType, PetProfile
from src.data.stores import (
    AlertStore,
    InvalidEntryError,
    ProfileStore,
    ScheduleStore,
    normalize_time,
)


def _times(store):
    return [e.time for e in store.list_entries()]


# ---------------------------------------------------------------------------
# ScheduleStore
# ---------------------------------------------------------------------------


class TestNormalizeTime:
    def test_zero_padded(self):
        assert normalize_time("07:05") == "07:05"

    def test_pads_single_digit_hour(self):
        assert normalize_time("7:05") == "07:05"

    def test_strips_whitespace(self):
        assert normalize_time(" 19:30 ") == "19:30"

    def test_out_of_range_rejected(self):
        with pytest.raises(InvalidEntryError):
            normalize_time("24:00")

    def test_garbage_rejected(self):
        with pytest.raises(InvalidEntryError):
            normalize_time("noon")


class TestScheduleStoreAdd:
    def test_default_schedule_is_sorted(self, schedule_store):
        assert _times(schedule_store) == ["07:00", "13:30", "19:00", "21:30"]

    def test_add_returns_new_id(self, schedule_store):
        entry_id = schedule_store.add_entry("08:00", "Almuerzo", "60 g", EntryType.FOOD)
        assert entry_id == "entry-1"
        entry = schedule_store.get_entry(entry_id)
        assert entry.title == "Almuerzo"
        assert entry.type is EntryType.FOOD

    def test_add_inserts_in_time_order(self, schedule_store):
        schedule_store.add_entry("10:15", "Snack", "20 g", EntryType.FOOD)
        assert _times(schedule_store) == ["07:00", "10:15", "13:30", "19:00", "21:30"]

    def test_sort_invariant_over_many_adds(self):
        store = ScheduleStore()
        for t in ["23:00", "00:30", "12:00", "06:45", "18:20", "00:00"]:
            store.add_entry(t, "t", "d", EntryType.WATER)
            times = _times(store)
            assert times == sorted(times)

    def test_ties_keep_insertion_order(self, id_factory):
        store = ScheduleStore(id_factory=id_factory)
        first = store.add_entry("12:00", "First", "d", EntryType.FOOD)
        store.add_entry("09:00", "Earlier", "d", EntryType.FOOD)
        second = store.add_entry("12:00", "Second", "d", EntryType.WATER)
        entries = store.list_entries()
        assert [e.id for e in entries if e.time == "12:00"] == [first, second]

    def test_title_and_detail_are_trimmed(self, schedule_store):
        entry_id = schedule_store.add_entry("08:00", "  Cena  ", "\t80 g\n", "comida")
        entry = schedule_store.get_entry(entry_id)
        assert entry.title == "Cena"
        assert entry.detail == "80 g"

    def test_accepts_type_value(self, schedule_store):
        entry_id = schedule_store.add_entry("08:00", "Agua", "200 ml", "agua")
        assert schedule_store.get_entry(entry_id).type is EntryType.WATER

    def test_normalizes_time(self, schedule_store):
        entry_id = schedule_store.add_entry("8:00", "Agua", "200 ml", EntryType.WATER)
        assert schedule_store.get_entry(entry_id).time == "08:00"


class TestScheduleStoreRejects:
    def test_empty_title_leaves_store_unchanged(self, schedule_store):
        before = schedule_store.list_entries()
        with pytest.raises(InvalidEntryError):
            schedule_store.add_entry("08:00", "", "detail", EntryType.FOOD)
        assert schedule_store.list_entries() == before

    def test_whitespace_detail_rejected(self, schedule_store):
        with pytest.raises(InvalidEntryError):
            schedule_store.add_entry("08:00", "Title", "   ", EntryType.FOOD)
        assert len(schedule_store.list_entries()) == 4

    def test_bad_time_rejected(self, schedule_store):
        with pytest.raises(InvalidEntryError):
            schedule_store.add_entry("25:00", "Title", "Detail", EntryType.FOOD)
        assert len(schedule_store.list_entries()) == 4

    def test_unknown_type_rejected(self, schedule_store):
        with pytest.raises(InvalidEntryError):
            schedule_store.add_entry("08:00", "Title", "Detail", "snacks")

    def test_invalid_entry_is_value_error(self):
        assert issubclass(InvalidEntryError, ValueError)


class TestScheduleStoreIds:
    def test_ids_are_never_reused(self):
        ids = iter(["a", "a", "b"])
        store = ScheduleStore(id_factory=lambda: next(ids))
        first = store.add_entry("08:00", "x", "y", EntryType.FOOD)
        store.remove_entry(first)
        second = store.add_entry("09:00", "x", "y", EntryType.FOOD)
        assert (first, second) == ("a", "b")

    def test_seed_ids_are_reserved(self):
        ids = iter(["schedule-1", "fresh"])
        from src.data.defaults import default_schedule
        store = ScheduleStore(default_schedule(), id_factory=lambda: next(ids))
        assert store.add_entry("08:00", "x", "y", EntryType.FOOD) == "fresh"

    def test_default_ids_are_unique(self):
        store = ScheduleStore()
        ids = {store.add_entry("08:00", "x", "y", EntryType.FOOD) for _ in range(50)}
        assert len(ids) == 50


class TestScheduleStoreRemove:
    def test_remove_existing(self, schedule_store):
        assert schedule_store.remove_entry("schedule-2") is True
        assert _times(schedule_store) == ["07:00", "19:00", "21:30"]

    def test_remove_unknown_is_noop(self, schedule_store):
        assert schedule_store.remove_entry("nope") is False
        assert len(schedule_store.list_entries()) == 4

    def test_remove_twice_is_idempotent(self, schedule_store):
        schedule_store.remove_entry("schedule-1")
        after_first = schedule_store.list_entries()
        assert schedule_store.remove_entry("schedule-1") is False
        assert schedule_store.list_entries() == after_first

    def test_list_returns_copies(self, schedule_store):
        entries = schedule_store.list_entries()
        entries[0].title = "Changed"
        entries.clear()
        assert schedule_store.list_entries()[0].title == "Desayuno energético"

    def test_count_by_type(self, schedule_store):
        assert schedule_store.count_by_type(EntryType.FOOD) == 3
        assert schedule_store.count_by_type(EntryType.WATER) == 1


# ---------------------------------------------------------------------------
# AlertStore
# ---------------------------------------------------------------------------


class TestAlertStore:
    def test_toggle_flips_flag(self, alert_store):
        toggled = alert_store.toggle_acknowledged("alert-1")
        assert toggled.acknowledged is True
        assert alert_store.get_alert("alert-1").acknowledged is True

    def test_toggle_twice_restores(self, alert_store):
        original = alert_store.get_alert("alert-3").acknowledged
        alert_store.toggle_acknowledged("alert-3")
        alert_store.toggle_acknowledged("alert-3")
        assert alert_store.get_alert("alert-3").acknowledged is original

    def test_toggle_unknown_is_noop(self, alert_store):
        before = alert_store.list_alerts()
        assert alert_store.toggle_acknowledged("alert-99") is None
        assert alert_store.list_alerts() == before

    def test_order_is_fixed(self, alert_store):
        alert_store.toggle_acknowledged("alert-1")
        alert_store.toggle_acknowledged("alert-3")
        assert [a.id for a in alert_store.list_alerts()] == ["alert-1", "alert-2", "alert-3"]

    def test_only_acknowledged_changes(self, alert_store):
        before = alert_store.get_alert("alert-2")
        after = alert_store.toggle_acknowledged("alert-2")
        assert (after.status, after.message, after.tone) == (
            before.status, before.message, before.tone,
        )

    def test_pending_count(self, alert_store):
        assert alert_store.pending_count() == 2
        alert_store.toggle_acknowledged("alert-1")
        assert alert_store.pending_count() == 1

    def test_does_not_mutate_seed_list(self):
        seed = [AlertItem(id="a", status="s", message="m", tone="info")]
        store = AlertStore(seed)
        store.toggle_acknowledged("a")
        assert seed[0].acknowledged is False


# ---------------------------------------------------------------------------
# ProfileStore
# ---------------------------------------------------------------------------


class TestProfileStore:
    def test_default_profile(self, profile_store):
        profile = profile_store.get_profile()
        assert profile == PetProfile(name="Luna", weight=6.5, age=3, diet=Diet.STANDARD)

    def test_set_name(self, profile_store):
        assert profile_store.apply(SetName(name="Milo")).name == "Milo"

    def test_set_weight(self, profile_store):
        assert profile_store.apply(SetWeight(weight=12.4)).weight == 12.4

    def test_set_age(self, profile_store):
        assert profile_store.apply(SetAge(age=0.5)).age == 0.5

    def test_set_diet(self, profile_store):
        assert profile_store.apply(SetDiet(diet=Diet.LIGHT)).diet is Diet.LIGHT

    def test_update_touches_one_field(self, profile_store):
        profile_store.apply(SetWeight(weight=9))
        profile = profile_store.get_profile()
        assert (profile.name, profile.age, profile.diet) == ("Luna", 3, Diet.STANDARD)

    def test_negative_weight_clamped(self, profile_store):
        assert profile_store.apply(SetWeight(weight=-4)).weight == 0.0

    def test_negative_age_clamped(self, profile_store):
        assert profile_store.apply(SetAge(age=-1)).age == 0.0

    def test_unknown_update_type_raises(self, profile_store):
        with pytest.raises(TypeError):
            profile_store.apply({"kind": "weight", "weight": 3})

    def test_snapshot_is_a_copy(self, profile_store):
        snapshot = profile_store.get_profile()
        snapshot.name = "Other"
        assert profile_store.get_profile().name == "Luna"

    def test_store_copies_initial_profile(self):
        seed = PetProfile(name="Rex", weight=20, age=5)
        store = ProfileStore(seed)
        store.apply(SetName(name="Max"))
        assert seed.name == "Rex"
