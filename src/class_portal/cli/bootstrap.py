# src/class_portal/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the durable store and both widget stores into AppState,
- runs the self-healing load() on each store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import DurableStore
from ..core.state import AppState
from ..errors import PersistenceError
from ..schedule.schedule_store import ScheduleStore
from ..storage.kv_store import MemoryKeyValueStore, SQLiteKeyValueStore
from ..tasks.drag import DragGesture
from ..tasks.task_store import TaskListStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> DurableStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "memory":
        logger.info("Using in-memory storage; nothing will survive this session.")
        return MemoryKeyValueStore(quota_chars=settings.storage_quota_chars)
    if backend != "sqlite":
        logger.warning("Unknown storage backend %r; using sqlite.", backend)
    _ensure_local_dirs(settings)
    return SQLiteKeyValueStore(settings.storage_db_path, quota_chars=settings.storage_quota_chars)


def create_initial_state(*, settings=None, storage: DurableStore | None = None) -> AppState:
    """
    Create AppState from the provided settings and load both stores.

    Keeping settings and storage injectable makes the app easier to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if storage is None:
        storage = create_storage(settings)

    schedule = ScheduleStore(storage, key=settings.timetable_key, default_color=settings.default_color)
    todo = TaskListStore(storage, key=settings.todo_key)

    for name, store in (("timetable", schedule), ("todo", todo)):
        try:
            store.load()
        except PersistenceError:
            # Defaults are live in memory; they just could not be written back.
            logger.exception("Failed to persist %s defaults during load.", name)

    return AppState(
        settings=settings,
        storage=storage,
        schedule=schedule,
        todo=todo,
        drag=DragGesture(todo),
    )
