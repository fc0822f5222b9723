# tests/test_schedule_store.py

from __future__ import annotations

import json

import pytest

from class_portal.errors import (
    InvalidColorError,
    InvalidCoordinateError,
    InvalidModeError,
    NoPendingAssignmentError,
    PersistenceError,
)
from class_portal.schedule.schedule_models import EMPTY_SLOT, Browsing, Placing, SlotAssignment
from class_portal.schedule.schedule_store import ScheduleStore

from .conftest import TIMETABLE_KEY
from .fakes import FakeStorage

MATH = SlotAssignment(subject="Math", teacher="Smith", color_tag="#e1effe")


def _stored(storage: FakeStorage) -> list[dict[str, str]]:
    return json.loads(storage.data[TIMETABLE_KEY])


def test_first_load_persists_empty_grid() -> None:
    storage = FakeStorage()
    snap = ScheduleStore(storage, key=TIMETABLE_KEY).load()

    assert len(snap.slots) == 30
    assert all(s == EMPTY_SLOT for s in snap.slots)
    assert storage.writes == [TIMETABLE_KEY]
    assert _stored(storage) == [{"subject": "", "teacher": "", "colorTag": ""}] * 30


@pytest.mark.parametrize("raw", ["garbage", "[]", json.dumps([{}] * 29), "null"])
def test_corrupt_data_is_replaced_and_reload_is_stable(raw: str) -> None:
    storage = FakeStorage({TIMETABLE_KEY: raw})

    first = ScheduleStore(storage, key=TIMETABLE_KEY).load()
    assert all(s.is_empty for s in first.slots)
    assert storage.writes == [TIMETABLE_KEY]

    second = ScheduleStore(storage, key=TIMETABLE_KEY).load()
    assert second.slots == first.slots
    assert storage.writes == [TIMETABLE_KEY]


def test_legacy_grid_is_upgraded_once() -> None:
    legacy = [[{"subject": "", "teacher": "", "color": ""} for _ in range(5)] for _ in range(6)]
    legacy[0][1] = {"subject": "History", "teacher": "Ito", "color": "#fee2e2"}
    storage = FakeStorage({TIMETABLE_KEY: json.dumps(legacy)})

    snap = ScheduleStore(storage, key=TIMETABLE_KEY).load()
    assert snap.at(0, 1) == SlotAssignment("History", "Ito", "#fee2e2")
    assert _stored(storage)[1] == {"subject": "History", "teacher": "Ito", "colorTag": "#fee2e2"}

    ScheduleStore(storage, key=TIMETABLE_KEY).load()
    assert storage.writes == [TIMETABLE_KEY]


def test_placing_sets_exactly_one_slot(schedule: ScheduleStore, storage: FakeStorage) -> None:
    before = schedule.get_snapshot()
    schedule.set_interaction_mode("placing", subject="Math", teacher="Smith", color_tag="#e1effe")

    snap = schedule.handle_slot_activation(2, 3)

    assert snap.slots[13] == MATH
    assert [i for i in range(30) if snap.slots[i] != before.slots[i]] == [13]
    assert _stored(storage)[13] == {"subject": "Math", "teacher": "Smith", "colorTag": "#e1effe"}


def test_placing_overwrites_without_confirmation(schedule: ScheduleStore) -> None:
    schedule.set_interaction_mode("placing", subject="Math", teacher="Smith")
    schedule.handle_slot_activation(0, 0)
    schedule.set_interaction_mode("placing", subject="Art")

    snap = schedule.handle_slot_activation(0, 0, confirmed=False)

    assert snap.at(0, 0).subject == "Art"
    assert snap.at(0, 0).teacher == ""


def test_browsing_clear_requires_confirmation(schedule: ScheduleStore, storage: FakeStorage) -> None:
    schedule.set_interaction_mode("placing", subject="Math", teacher="Smith")
    schedule.handle_slot_activation(0, 0)
    schedule.set_interaction_mode("browsing")
    storage.writes.clear()

    assert schedule.needs_confirmation(0, 0) is True
    snap = schedule.handle_slot_activation(0, 0, confirmed=False)
    assert snap.at(0, 0).subject == "Math"
    assert storage.writes == []

    snap = schedule.handle_slot_activation(0, 0, confirmed=True)
    assert snap.at(0, 0) == EMPTY_SLOT
    assert storage.writes == [TIMETABLE_KEY]
    assert schedule.needs_confirmation(0, 0) is False


def test_browsing_empty_slot_is_noop(schedule: ScheduleStore, storage: FakeStorage) -> None:
    snap = schedule.handle_slot_activation(5, 4, confirmed=True)
    assert snap.at(5, 4) == EMPTY_SLOT
    assert storage.writes == []


@pytest.mark.parametrize(
    "period,day",
    [(-1, 0), (6, 0), (0, 5), (0, -1), (6, 5), (True, 0), (1.0, 2), ("1", "2"), (None, 0)],
)
@pytest.mark.parametrize("mode", ["browsing", "placing"])
def test_out_of_range_coordinates_are_refused(schedule: ScheduleStore, storage: FakeStorage, period, day, mode) -> None:
    # An empty subject must not mask the coordinate check.
    schedule.set_interaction_mode(mode)
    with pytest.raises(InvalidCoordinateError):
        schedule.handle_slot_activation(period, day, confirmed=True)
    with pytest.raises(InvalidCoordinateError):
        schedule.needs_confirmation(period, day)
    assert storage.writes == []


def test_placing_without_subject_is_refused(schedule: ScheduleStore, storage: FakeStorage) -> None:
    schedule.set_interaction_mode("placing", subject="   ", teacher="Smith")
    with pytest.raises(NoPendingAssignmentError):
        schedule.handle_slot_activation(1, 1)
    assert schedule.get_snapshot().at(1, 1) == EMPTY_SLOT
    assert storage.writes == []


def test_switching_to_browsing_drops_pending(schedule: ScheduleStore) -> None:
    schedule.set_interaction_mode("placing", subject="Math")
    assert isinstance(schedule.mode, Placing)

    snap = schedule.set_interaction_mode("browsing")
    assert snap.mode == Browsing()

    snap = schedule.handle_slot_activation(3, 3)
    assert snap.at(3, 3) == EMPTY_SLOT


def test_unknown_mode(schedule: ScheduleStore) -> None:
    with pytest.raises(InvalidModeError):
        schedule.set_interaction_mode("editing")


def test_selected_color_drives_placement(schedule: ScheduleStore, storage: FakeStorage) -> None:
    schedule.set_selected_color("#dcfce7")
    schedule.set_interaction_mode("placing", subject="Bio")
    assert schedule.get_snapshot().mode == Placing(SlotAssignment("Bio", "", "#dcfce7"))

    # Changing color mid-placement applies to the next placement.
    schedule.set_selected_color(" #fee2e2 ")
    snap = schedule.handle_slot_activation(4, 0)
    assert snap.at(4, 0).color_tag == "#fee2e2"
    assert snap.selected_color == "#fee2e2"


def test_selected_color_does_not_touch_grid(schedule: ScheduleStore, storage: FakeStorage) -> None:
    before = schedule.get_snapshot().slots
    schedule.set_selected_color("#f3e8ff")
    assert schedule.get_snapshot().slots == before
    assert storage.writes == []

    with pytest.raises(InvalidColorError):
        schedule.set_selected_color("  ")


def test_persistence_failure_keeps_in_memory_change(schedule: ScheduleStore, storage: FakeStorage) -> None:
    schedule.set_interaction_mode("placing", subject="Math", teacher="Smith", color_tag="#e1effe")
    storage.fail_writes = True

    with pytest.raises(PersistenceError) as exc_info:
        schedule.handle_slot_activation(2, 3)

    assert exc_info.value.key == TIMETABLE_KEY
    assert schedule.get_snapshot().at(2, 3) == MATH
    assert _stored(storage)[13] == {"subject": "", "teacher": "", "colorTag": ""}


def test_snapshot_is_a_copy(schedule: ScheduleStore) -> None:
    snap = schedule.get_snapshot()
    schedule.set_interaction_mode("placing", subject="Math")
    schedule.handle_slot_activation(0, 0)

    assert snap.at(0, 0) == EMPTY_SLOT
    assert isinstance(snap.slots, tuple)
    assert len(snap.rows()) == 6
    assert all(len(r) == 5 for r in snap.rows())


def test_reset_restores_default(schedule: ScheduleStore, storage: FakeStorage) -> None:
    schedule.set_interaction_mode("placing", subject="Math")
    for p in range(6):
        schedule.handle_slot_activation(p, p % 5)

    snap = schedule.reset()

    assert all(s == EMPTY_SLOT for s in snap.slots)
    assert _stored(storage) == [{"subject": "", "teacher": "", "colorTag": ""}] * 30


def test_deeply_nested_data_is_replaced_with_empty_grid() -> None:
    storage = FakeStorage({TIMETABLE_KEY: "[" * 200_000})

    snap = ScheduleStore(storage, key=TIMETABLE_KEY).load()
    assert all(s == EMPTY_SLOT for s in snap.slots)
    assert storage.writes == [TIMETABLE_KEY]
    assert _stored(storage) == [{"subject": "", "teacher": "", "colorTag": ""}] * 30
