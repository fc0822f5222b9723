# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from class_portal.cli.bootstrap import create_initial_state
from class_portal.core.state import AppState
from class_portal.schedule.schedule_store import ScheduleStore
from class_portal.tasks.task_store import TaskListStore

from .fakes import FakeStorage

TIMETABLE_KEY = "class_portal_timetable"
TODO_KEY = "class_portal_todo"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the stores.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="class-portal-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_db_path=tmp_path / "storage.sqlite3",
        storage_quota_chars=None,
        timetable_key=TIMETABLE_KEY,
        todo_key=TODO_KEY,
        default_color="#e1effe",
    )


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def schedule(storage: FakeStorage) -> ScheduleStore:
    store = ScheduleStore(storage, key=TIMETABLE_KEY)
    store.load()
    storage.writes.clear()
    return store


@pytest.fixture()
def todo(storage: FakeStorage) -> TaskListStore:
    store = TaskListStore(storage, key=TODO_KEY)
    store.load()
    storage.writes.clear()
    return store


@pytest.fixture()
def state(settings: SimpleNamespace, storage: FakeStorage) -> AppState:
    """AppState wired through the real bootstrap, on top of FakeStorage."""
    return create_initial_state(settings=settings, storage=storage)
