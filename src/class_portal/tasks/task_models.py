# src/class_portal/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..errors import UnknownListError
from ..storage.schema_guard import Shape, is_int


class TaskListName(StrEnum):
    """
    The two fixed task lists.

    Notes:
    - older stored data used "important" / "normal"; see upgrade_task_state()
    """

    PRIORITY = "priority"
    STANDARD = "standard"

    @classmethod
    def parse(cls, raw: Any) -> TaskListName:
        try:
            return cls(raw)
        except ValueError:
            raise UnknownListError(raw) from None


CAPACITY: dict[TaskListName, int] = {
    TaskListName.PRIORITY: 5,
    TaskListName.STANDARD: 15,
}


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        return cls(id=raw["id"], title=raw["title"])


@dataclass(frozen=True, slots=True)
class TaskListSnapshot:
    priority: tuple[Task, ...]
    standard: tuple[Task, ...]

    def tasks(self, name: TaskListName | str) -> tuple[Task, ...]:
        if TaskListName.parse(name) is TaskListName.PRIORITY:
            return self.priority
        return self.standard

    def count(self, name: TaskListName | str) -> int:
        return len(self.tasks(name))

    @staticmethod
    def capacity(name: TaskListName | str) -> int:
        return CAPACITY[TaskListName.parse(name)]

    def is_full(self, name: TaskListName | str) -> bool:
        return self.count(name) >= self.capacity(name)


# ---- stored shape ----

_LEGACY_KEYS = {"important": TaskListName.PRIORITY, "normal": TaskListName.STANDARD}


def check_task_state(value: Any) -> str | None:
    if not isinstance(value, dict):
        return "not an object"

    seen: set[int] = set()
    for name in TaskListName:
        items = value.get(name.value)
        if not isinstance(items, list):
            return f"{name.value} is not an array"
        if len(items) > CAPACITY[name]:
            return f"{name.value} holds {len(items)} tasks, capacity {CAPACITY[name]}"
        for item in items:
            if not isinstance(item, dict):
                return f"{name.value}: task is not an object"
            task_id = item.get("id")
            title = item.get("title")
            if not is_int(task_id):
                return f"{name.value}: task id {task_id!r} is not an integer"
            if not isinstance(title, str) or not title.strip():
                return f"{name.value}: task {task_id} has no title"
            if task_id in seen:
                return f"duplicate task id {task_id}"
            seen.add(task_id)

    if "nextId" in value:
        next_id = value["nextId"]
        if not is_int(next_id) or next_id < 1:
            return f"nextId {next_id!r} is not a positive integer"
    return None


def upgrade_task_state(value: Any) -> dict[str, Any] | None:
    """
    Rename the older important/normal keys.

    Older ids were millisecond timestamps and could repeat; every later
    duplicate gets a fresh id above the highest one seen.
    """
    if not isinstance(value, dict) or not all(k in value for k in _LEGACY_KEYS):
        return None
    out: dict[str, Any] = {
        new.value: list(value[old]) if isinstance(value[old], list) else value[old]
        for old, new in _LEGACY_KEYS.items()
    }
    if "nextId" in value:
        out["nextId"] = value["nextId"]

    lists = [out[name.value] for name in TaskListName if isinstance(out[name.value], list)]
    ids = [t["id"] for items in lists for t in items if isinstance(t, dict) and is_int(t.get("id"))]
    fresh = max(ids, default=0) + 1
    seen: set[int] = set()
    for items in lists:
        for i, item in enumerate(items):
            if not isinstance(item, dict) or not is_int(item.get("id")):
                continue
            if item["id"] in seen:
                items[i] = {**item, "id": fresh}
                fresh += 1
            seen.add(items[i]["id"])
    return out


TASK_STATE_SHAPE = Shape(name="todo", check=check_task_state, upgrade=upgrade_task_state)
