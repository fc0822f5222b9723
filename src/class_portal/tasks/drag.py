# src/class_portal/tasks/drag.py

"""
One drag gesture between the two task lists.

    idle -> start() -> dragging -> drop() | cancel() -> idle

Only a drop onto the other list reaches TaskListStore.transfer_task().
A drop onto the source list and a cancelled drag never touch the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from ..errors import CapacityExceededError
from .task_models import TaskListName, TaskListSnapshot
from .task_store import TaskListStore

logger = logging.getLogger(__name__)


class DragPhase(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True, slots=True)
class DropOutcome:
    moved: bool
    snapshot: TaskListSnapshot
    warning: str | None = None


class DragGesture:
    def __init__(self, store: TaskListStore) -> None:
        self._store = store
        self._origin: tuple[int, TaskListName] | None = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self._origin is None else DragPhase.DRAGGING

    def start(self, task_id: int, from_list: TaskListName | str) -> None:
        self._origin = (task_id, TaskListName.parse(from_list))

    def cancel(self) -> None:
        self._origin = None

    def drop(self, to_list: TaskListName | str) -> DropOutcome:
        origin, self._origin = self._origin, None
        target = TaskListName.parse(to_list)

        if origin is None:
            return DropOutcome(moved=False, snapshot=self._store.get_snapshot())

        task_id, source = origin
        if source is target:
            return DropOutcome(moved=False, snapshot=self._store.get_snapshot())

        try:
            snapshot = self._store.transfer_task(task_id, source, target)
        except CapacityExceededError as exc:
            logger.info("Drop refused id=%s -> %s: %s", task_id, target.value, exc)
            return DropOutcome(moved=False, snapshot=self._store.get_snapshot(), warning=str(exc))

        return DropOutcome(moved=True, snapshot=snapshot)
