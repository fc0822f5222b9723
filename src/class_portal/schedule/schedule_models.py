# src/class_portal/schedule/schedule_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..errors import InvalidCoordinateError
from ..storage.schema_guard import Shape, is_int

PERIODS = 6
DAYS = 5
SLOT_COUNT = PERIODS * DAYS

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri")

PALETTE = (
    "#e1effe",  # blue
    "#fef3c7",  # amber
    "#dcfce7",  # green
    "#f3e8ff",  # purple
    "#fee2e2",  # red
    "#ffedd5",  # orange
    "#e0f2fe",  # sky
    "#f1f5f9",  # slate
    "#fae8ff",  # fuchsia
    "#ecfdf5",  # emerald
)
DEFAULT_COLOR = PALETTE[0]

_FIELDS = ("subject", "teacher", "colorTag")


@dataclass(frozen=True, slots=True)
class SlotAssignment:
    subject: str = ""
    teacher: str = ""
    color_tag: str = ""

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_SLOT

    def to_dict(self) -> dict[str, str]:
        return {"subject": self.subject, "teacher": self.teacher, "colorTag": self.color_tag}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SlotAssignment:
        return cls(
            subject=raw.get("subject", ""),
            teacher=raw.get("teacher", ""),
            color_tag=raw.get("colorTag", ""),
        )


EMPTY_SLOT = SlotAssignment()


class ModeName(StrEnum):
    BROWSING = "browsing"
    PLACING = "placing"


@dataclass(frozen=True, slots=True)
class Browsing:
    name = ModeName.BROWSING


@dataclass(frozen=True, slots=True)
class Placing:
    pending: SlotAssignment

    name = ModeName.PLACING


InteractionMode = Browsing | Placing


def slot_index(period: Any, day: Any) -> int:
    """Row-major index of (period, day); raises InvalidCoordinateError when out of bounds."""
    if not (is_int(period) and is_int(day)):
        raise InvalidCoordinateError(period, day)
    if not (0 <= period < PERIODS and 0 <= day < DAYS):
        raise InvalidCoordinateError(period, day)
    return period * DAYS + day


def default_grid() -> list[SlotAssignment]:
    return [EMPTY_SLOT] * SLOT_COUNT


@dataclass(frozen=True, slots=True)
class ScheduleSnapshot:
    slots: tuple[SlotAssignment, ...]
    mode: InteractionMode
    selected_color: str

    def at(self, period: int, day: int) -> SlotAssignment:
        return self.slots[slot_index(period, day)]

    def rows(self) -> tuple[tuple[SlotAssignment, ...], ...]:
        return tuple(self.slots[p * DAYS : (p + 1) * DAYS] for p in range(PERIODS))

    def to_list(self) -> list[dict[str, str]]:
        return [s.to_dict() for s in self.slots]


# ---- stored shape ----


def _check_cell(cell: Any) -> str | None:
    if not isinstance(cell, dict):
        return "cell is not an object"
    for f in _FIELDS:
        if f in cell and not isinstance(cell[f], str):
            return f"cell field {f} is not a string"
    return None


def check_grid(value: Any) -> str | None:
    if not isinstance(value, list):
        return "not an array"
    if len(value) != SLOT_COUNT:
        return f"expected {SLOT_COUNT} cells, got {len(value)}"
    for i, cell in enumerate(value):
        problem = _check_cell(cell)
        if problem is not None:
            return f"index {i}: {problem}"
    return None


def upgrade_grid(value: Any) -> list[dict[str, Any]] | None:
    """Flatten the older nested 6x5 layout whose cells used a `color` key."""
    if not isinstance(value, list) or len(value) != PERIODS:
        return None
    out: list[dict[str, Any]] = []
    for row in value:
        if not isinstance(row, list) or len(row) != DAYS:
            return None
        for cell in row:
            if not isinstance(cell, dict):
                return None
            out.append(
                {
                    "subject": cell.get("subject", ""),
                    "teacher": cell.get("teacher", ""),
                    "colorTag": cell.get("colorTag", cell.get("color", "")),
                }
            )
    return out


GRID_SHAPE = Shape(name="timetable", check=check_grid, upgrade=upgrade_grid)
