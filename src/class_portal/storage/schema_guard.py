# src/class_portal/storage/schema_guard.py

"""
Single checkpoint between the untyped durable store and live state.

Stored values may come from older versions of the portal. A Shape can
carry an upgrade step for such legacy formats; anything that still does
not fit is reported as Corruption and the caller falls back to defaults.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class CorruptionReason(StrEnum):
    MISSING = "missing"
    UNPARSEABLE = "unparseable"
    INVALID_SHAPE = "invalid_shape"


@dataclass(frozen=True, slots=True)
class Corruption:
    reason: CorruptionReason
    detail: str = ""


@dataclass(frozen=True, slots=True)
class Accepted:
    value: Any
    upgraded: bool = False


@dataclass(frozen=True, slots=True)
class Shape:
    """
    Expected structure of one stored value.

    check returns a short problem description, or None when the value fits.
    upgrade converts a legacy value to the current structure, or returns None.
    """

    name: str
    check: Callable[[Any], str | None]
    upgrade: Callable[[Any], Any | None] | None = None


def validate(raw: str | None, shape: Shape) -> Accepted | Corruption:
    if raw is None:
        return Corruption(CorruptionReason.MISSING)

    try:
        value = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # Pathologically nested input exhausts the decoder's recursion limit.
        return Corruption(CorruptionReason.UNPARSEABLE, str(exc))

    problem = shape.check(value)
    if problem is None:
        return Accepted(value)

    if shape.upgrade is not None:
        upgraded = shape.upgrade(value)
        if upgraded is not None and shape.check(upgraded) is None:
            return Accepted(upgraded, upgraded=True)

    return Corruption(CorruptionReason.INVALID_SHAPE, f"{shape.name}: {problem}")


def dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def is_int(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not ids or coordinates.
    return isinstance(value, int) and not isinstance(value, bool)
