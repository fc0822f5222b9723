# src/class_portal/errors.py

"""
Exception hierarchy shared by the stores and their controllers.

Every failure is a refusal of one operation. Controllers catch PortalError
and turn it into a user-facing message; nothing here is fatal to the process.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base class for all class_portal errors."""


class ValidationError(PortalError, ValueError):
    """Input rejected before any state was touched."""


class EmptyTitleError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Task title must not be empty.")


class InvalidCoordinateError(ValidationError):
    def __init__(self, period: object, day: object) -> None:
        self.period = period
        self.day = day
        super().__init__(f"Slot ({period!r}, {day!r}) is outside the 6x5 grid.")


class NoPendingAssignmentError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Placing mode has no subject to place.")


class InvalidModeError(ValidationError):
    def __init__(self, mode: object) -> None:
        self.mode = mode
        super().__init__(f"Unknown interaction mode: {mode!r}.")


class InvalidColorError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Color tag must not be empty.")


class UnknownListError(ValidationError):
    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Unknown task list: {name!r}.")


class SameListError(ValidationError):
    def __init__(self, list_name: str) -> None:
        self.list_name = list_name
        super().__init__(f"Task is already in the {list_name} list.")


class TaskNotFoundError(ValidationError):
    def __init__(self, task_id: int, list_name: str) -> None:
        self.task_id = task_id
        self.list_name = list_name
        super().__init__(f"Task {task_id} not found in the {list_name} list.")


class CapacityExceededError(PortalError):
    """Target list is full; the operation was refused and nothing changed."""

    def __init__(self, list_name: str, capacity: int) -> None:
        self.list_name = list_name
        self.capacity = capacity
        super().__init__(f"The {list_name} list is full ({capacity} tasks max).")


class QuotaExceededError(PortalError):
    """Raised by a durable store when a write would exceed its quota."""

    def __init__(self, key: str, needed: int, quota: int) -> None:
        self.key = key
        self.needed = needed
        self.quota = quota
        super().__init__(f"Storage quota exceeded writing {key!r}: need {needed} chars, quota {quota}.")


class PersistenceError(PortalError):
    """
    The in-memory change was applied but could not be written.

    In-memory and durable state now differ until the next successful write.
    """

    def __init__(self, key: str, reason: str = "") -> None:
        self.key = key
        msg = f"Change applied but not saved ({key})."
        if reason:
            msg = f"{msg} {reason}"
        super().__init__(msg)
