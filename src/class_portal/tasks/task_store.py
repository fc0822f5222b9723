# src/class_portal/tasks/task_store.py

from __future__ import annotations

import logging

from ..core.ports import DurableStore
from ..errors import (
    CapacityExceededError,
    EmptyTitleError,
    PersistenceError,
    QuotaExceededError,
    SameListError,
    TaskNotFoundError,
)
from ..storage.schema_guard import Corruption, CorruptionReason, dump, is_int, validate
from .task_models import CAPACITY, TASK_STATE_SHAPE, Task, TaskListName, TaskListSnapshot

logger = logging.getLogger(__name__)

TODO_KEY = "class_portal_todo"


class TaskListStore:
    """
    Two capacity-bounded task lists: priority (5) and standard (15).

    Invariants:
    - count(list) <= capacity(list) before and after every call
    - task ids are unique across both lists for the lifetime of the store;
      they come from a counter persisted next to the lists
    - both lists are persisted together as one value
    """

    def __init__(self, storage: DurableStore, *, key: str = TODO_KEY) -> None:
        self._storage = storage
        self._key = key
        self._lists: dict[TaskListName, list[Task]] = {name: [] for name in TaskListName}
        self._next_id = 1

    # ---- persistence ----

    def load(self) -> TaskListSnapshot:
        result = validate(self._storage.read(self._key), TASK_STATE_SHAPE)

        if isinstance(result, Corruption):
            if result.reason is CorruptionReason.MISSING:
                logger.info("Task lists not found key=%s; starting empty.", self._key)
            else:
                logger.warning(
                    "Task list data unusable key=%s reason=%s %s; resetting.",
                    self._key,
                    result.reason.value,
                    result.detail,
                )
            self._lists = {name: [] for name in TaskListName}
            self._persist()
            return self.get_snapshot()

        data = result.value
        self._lists = {name: [Task.from_dict(t) for t in data[name.value]] for name in TaskListName}
        highest = max((t.id for items in self._lists.values() for t in items), default=0)
        self._next_id = max(int(data.get("nextId", 1)), highest + 1, 1)

        if result.upgraded:
            logger.info("Task lists upgraded from legacy layout key=%s.", self._key)
            self._persist()

        logger.info(
            "Task lists loaded key=%s priority=%d standard=%d next_id=%d",
            self._key,
            len(self._lists[TaskListName.PRIORITY]),
            len(self._lists[TaskListName.STANDARD]),
            self._next_id,
        )
        return self.get_snapshot()

    def _persist(self) -> None:
        payload = dump(
            {
                **{name.value: [t.to_dict() for t in items] for name, items in self._lists.items()},
                "nextId": self._next_id,
            }
        )
        try:
            self._storage.write(self._key, payload)
        except QuotaExceededError as exc:
            logger.error("Failed to save task lists key=%s: %s", self._key, exc)
            raise PersistenceError(self._key, str(exc)) from exc

    # ---- public API ----

    def get_snapshot(self) -> TaskListSnapshot:
        return TaskListSnapshot(
            priority=tuple(self._lists[TaskListName.PRIORITY]),
            standard=tuple(self._lists[TaskListName.STANDARD]),
        )

    def add_task(self, title: str) -> TaskListSnapshot:
        """Append a new task to the standard list."""
        clean = (title or "").strip()
        if not clean:
            raise EmptyTitleError()

        target = self._lists[TaskListName.STANDARD]
        capacity = CAPACITY[TaskListName.STANDARD]
        if len(target) >= capacity:
            raise CapacityExceededError(TaskListName.STANDARD.value, capacity)

        task = Task(id=self._next_id, title=clean)
        self._next_id += 1
        target.append(task)
        logger.debug("Task added id=%s list=%s", task.id, TaskListName.STANDARD.value)
        self._persist()
        return self.get_snapshot()

    def delete_task(self, list_name: TaskListName | str, task_id: int) -> TaskListSnapshot:
        """Remove a task if present. Deleting an absent id is a silent no-op."""
        name = TaskListName.parse(list_name)
        items = self._lists[name]
        # bool is an int subclass; True must not match task 1.
        kept = [t for t in items if not (is_int(task_id) and t.id == task_id)]
        if len(kept) == len(items):
            return self.get_snapshot()

        self._lists[name] = kept
        logger.debug("Task deleted id=%s list=%s", task_id, name.value)
        self._persist()
        return self.get_snapshot()

    def transfer_task(
        self,
        task_id: int,
        from_list: TaskListName | str,
        to_list: TaskListName | str,
    ) -> TaskListSnapshot:
        """
        Move one task to the end of the other list.

        All checks run before anything is touched, so a refused transfer
        leaves both lists exactly as they were.
        """
        src = TaskListName.parse(from_list)
        dst = TaskListName.parse(to_list)
        if src is dst:
            raise SameListError(src.value)

        source = self._lists[src]
        pos = None
        if is_int(task_id):
            pos = next((i for i, t in enumerate(source) if t.id == task_id), None)
        if pos is None:
            raise TaskNotFoundError(task_id, src.value)

        dest = self._lists[dst]
        if len(dest) >= CAPACITY[dst]:
            raise CapacityExceededError(dst.value, CAPACITY[dst])

        task = source.pop(pos)
        dest.append(task)
        logger.debug("Task moved id=%s %s -> %s", task_id, src.value, dst.value)
        self._persist()
        return self.get_snapshot()

    def reset(self) -> TaskListSnapshot:
        # The id counter is kept so ids are never reused.
        self._lists = {name: [] for name in TaskListName}
        logger.info("Task lists reset key=%s", self._key)
        self._persist()
        return self.get_snapshot()
