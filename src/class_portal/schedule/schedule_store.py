# src/class_portal/schedule/schedule_store.py

from __future__ import annotations

import logging

from ..core.ports import DurableStore
from ..errors import (
    InvalidColorError,
    InvalidModeError,
    NoPendingAssignmentError,
    PersistenceError,
    QuotaExceededError,
)
from ..storage.schema_guard import Corruption, CorruptionReason, dump, validate
from .schedule_models import (
    DEFAULT_COLOR,
    EMPTY_SLOT,
    GRID_SHAPE,
    Browsing,
    InteractionMode,
    ModeName,
    Placing,
    ScheduleSnapshot,
    SlotAssignment,
    default_grid,
    slot_index,
)

logger = logging.getLogger(__name__)

TIMETABLE_KEY = "class_portal_timetable"


class ScheduleStore:
    """
    Weekly 6x5 timetable.

    The same slot activation means different things depending on the mode:
    - placing: overwrite the slot with the pending assignment, no questions asked
    - browsing: clear an occupied slot, but only once the caller confirms

    The whole grid is persisted as one value after every change.
    """

    def __init__(
        self,
        storage: DurableStore,
        *,
        key: str = TIMETABLE_KEY,
        default_color: str = DEFAULT_COLOR,
    ) -> None:
        self._storage = storage
        self._key = key
        self._slots: list[SlotAssignment] = default_grid()
        self._mode: InteractionMode = Browsing()
        self._selected_color = default_color

    # ---- persistence ----

    def load(self) -> ScheduleSnapshot:
        result = validate(self._storage.read(self._key), GRID_SHAPE)

        if isinstance(result, Corruption):
            if result.reason is CorruptionReason.MISSING:
                logger.info("Timetable not found key=%s; starting empty.", self._key)
            else:
                logger.warning(
                    "Timetable data unusable key=%s reason=%s %s; resetting.",
                    self._key,
                    result.reason.value,
                    result.detail,
                )
            self._slots = default_grid()
            self._persist()
            return self.get_snapshot()

        self._slots = [SlotAssignment.from_dict(cell) for cell in result.value]
        if result.upgraded:
            logger.info("Timetable upgraded from legacy layout key=%s.", self._key)
            self._persist()

        filled = sum(1 for s in self._slots if not s.is_empty)
        logger.info("Timetable loaded key=%s filled=%d", self._key, filled)
        return self.get_snapshot()

    def _persist(self) -> None:
        payload = dump([s.to_dict() for s in self._slots])
        try:
            self._storage.write(self._key, payload)
        except QuotaExceededError as exc:
            logger.error("Failed to save timetable key=%s: %s", self._key, exc)
            raise PersistenceError(self._key, str(exc)) from exc

    # ---- public API ----

    def get_snapshot(self) -> ScheduleSnapshot:
        return ScheduleSnapshot(
            slots=tuple(self._slots),
            mode=self._mode,
            selected_color=self._selected_color,
        )

    @property
    def mode(self) -> InteractionMode:
        return self._mode

    def set_interaction_mode(
        self,
        mode: ModeName | str,
        *,
        subject: str = "",
        teacher: str = "",
        color_tag: str | None = None,
    ) -> ScheduleSnapshot:
        """
        Switch between browsing and placing.

        Entering placing builds the pending assignment from the given subject and
        teacher and the currently selected color (unless color_tag overrides it).
        Entering browsing drops any pending assignment.
        """
        try:
            name = ModeName(mode)
        except ValueError:
            raise InvalidModeError(mode) from None

        if name is ModeName.BROWSING:
            self._mode = Browsing()
        else:
            pending = SlotAssignment(
                subject=(subject or "").strip(),
                teacher=(teacher or "").strip(),
                color_tag=(color_tag or "").strip() or self._selected_color,
            )
            self._mode = Placing(pending)

        logger.debug("Timetable mode -> %s", name.value)
        return self.get_snapshot()

    def set_selected_color(self, color_tag: str) -> ScheduleSnapshot:
        tag = (color_tag or "").strip()
        if not tag:
            raise InvalidColorError()

        self._selected_color = tag
        if isinstance(self._mode, Placing):
            p = self._mode.pending
            self._mode = Placing(SlotAssignment(subject=p.subject, teacher=p.teacher, color_tag=tag))
        return self.get_snapshot()

    def needs_confirmation(self, period: int, day: int) -> bool:
        """True when activating this slot would clear an occupied cell."""
        index = slot_index(period, day)
        return isinstance(self._mode, Browsing) and not self._slots[index].is_empty

    def handle_slot_activation(self, period: int, day: int, *, confirmed: bool = False) -> ScheduleSnapshot:
        index = slot_index(period, day)
        mode = self._mode

        if isinstance(mode, Placing):
            if not mode.pending.subject:
                raise NoPendingAssignmentError()
            self._slots[index] = mode.pending
            logger.debug("Slot placed period=%s day=%s subject=%s", period, day, mode.pending.subject)
            self._persist()
            return self.get_snapshot()

        if self._slots[index].is_empty:
            return self.get_snapshot()

        if not confirmed:
            logger.debug("Slot clear not confirmed period=%s day=%s", period, day)
            return self.get_snapshot()

        self._slots[index] = EMPTY_SLOT
        logger.debug("Slot cleared period=%s day=%s", period, day)
        self._persist()
        return self.get_snapshot()

    def reset(self) -> ScheduleSnapshot:
        self._slots = default_grid()
        logger.info("Timetable reset key=%s", self._key)
        self._persist()
        return self.get_snapshot()
