# src/class_portal/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..schedule.schedule_store import ScheduleStore
from ..tasks.drag import DragGesture
from ..tasks.task_store import TaskListStore
from .ports import DurableStore


@dataclass
class AppState:
    """One session: the durable store and the two widget stores built on it."""

    # Store Settings on the state for easy access in controllers.
    settings: object

    storage: DurableStore
    schedule: ScheduleStore
    todo: TaskListStore
    drag: DragGesture
