# src/class_portal/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import PersistenceError, PortalError
from ..schedule.schedule_models import DAY_NAMES, DAYS, PALETTE, PERIODS, Placing, ScheduleSnapshot
from ..tasks.task_models import TaskListName, TaskListSnapshot

Confirm = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], Confirm | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_CELL_WIDTH = 16


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /grid, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, confirm: Confirm | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store refusals (PortalError) become the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, confirm)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except PersistenceError as exc:
            return f"[WARN] {exc} It may be lost on reload."
        except PortalError as exc:
            logger.debug("/%s refused: %s", name, exc)
            return f"[!] {exc}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering helpers ----


def _fit(text: str) -> str:
    if len(text) > _CELL_WIDTH - 1:
        text = text[: _CELL_WIDTH - 2] + "~"
    return text.ljust(_CELL_WIDTH)


def render_grid(snap: ScheduleSnapshot) -> str:
    header = "   " + "".join(_fit(d) for d in DAY_NAMES)
    lines = [header.rstrip()]
    for p, row in enumerate(snap.rows()):
        subjects = "".join(_fit(s.subject or ".") for s in row)
        teachers = "".join(_fit(s.teacher) for s in row)
        lines.append(f"{p + 1:<3}{subjects}".rstrip())
        if teachers.strip():
            lines.append(f"   {teachers}".rstrip())

    if isinstance(snap.mode, Placing):
        pend = snap.mode.pending
        lines.append(f"Mode: placing {pend.subject!r} ({pend.teacher or '-'}) color {pend.color_tag}")
    else:
        lines.append("Mode: browsing (activating a filled slot clears it)")
    return "\n".join(lines)


def render_todo(snap: TaskListSnapshot) -> str:
    lines: list[str] = []
    for name in TaskListName:
        lines.append(f"{name.value} ({snap.count(name)}/{snap.capacity(name)})")
        tasks = snap.tasks(name)
        if not tasks:
            lines.append("  (no tasks)")
        for t in tasks:
            lines.append(f"  #{t.id} {t.title}")
    return "\n".join(lines)


def _parse_period(raw: str) -> int:
    # 1-based on the console; out-of-range values are left for the store to refuse.
    try:
        return int(raw) - 1
    except ValueError:
        return -1


def _parse_day(raw: str) -> int:
    low = raw.strip().lower()[:3]
    for i, name in enumerate(DAY_NAMES):
        if name.lower() == low:
            return i
    try:
        return int(raw) - 1
    except ValueError:
        return -1


def _ask(confirm: Confirm | None, question: str) -> bool:
    return bool(confirm(question)) if confirm is not None else False


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    grid = state.schedule.get_snapshot()
    todo = state.todo.get_snapshot()
    filled = sum(1 for s in grid.slots if not s.is_empty)
    usage = getattr(state.storage, "usage", None)
    quota = getattr(state.storage, "quota", None)
    used = f"{usage()} chars" if callable(usage) else "n/a"
    return (
        "Status:\n"
        f"  Timetable: {filled}/{PERIODS * DAYS} slots filled, mode {grid.mode.name.value}\n"
        f"  Selected color: {grid.selected_color}\n"
        f"  Tasks: priority {todo.count(TaskListName.PRIORITY)}/{todo.capacity(TaskListName.PRIORITY)}, "
        f"standard {todo.count(TaskListName.STANDARD)}/{todo.capacity(TaskListName.STANDARD)}\n"
        f"  Storage: {used} (quota {quota if quota is not None else 'none'})"
    )


def cmd_grid(state: AppState, args: list[str]) -> str:
    return render_grid(state.schedule.get_snapshot())


def cmd_place(state: AppState, args: list[str]) -> str:
    """
    /place <subject> [teacher...]  -> enter placing mode
    """
    if not args:
        return "Usage: /place <subject> [teacher]. Enter a subject name first."
    subject = args[0]
    teacher = " ".join(args[1:])
    snap = state.schedule.set_interaction_mode("placing", subject=subject, teacher=teacher)
    return render_grid(snap) + "\nUse /slot <period> <day> to place. /browse to stop."


def cmd_browse(state: AppState, args: list[str]) -> str:
    snap = state.schedule.set_interaction_mode("browsing")
    return render_grid(snap)


def cmd_color(state: AppState, args: list[str]) -> str:
    """
    /color          -> show palette
    /color 3        -> pick palette entry 3
    /color #abcdef  -> any tag
    """
    if not args:
        current = state.schedule.get_snapshot().selected_color
        lines = ["Palette:"]
        for i, c in enumerate(PALETTE, start=1):
            mark = " *" if c == current else ""
            lines.append(f"  {i:>2}. {c}{mark}")
        return "\n".join(lines)

    raw = args[0]
    if raw.isdigit() and 1 <= int(raw) <= len(PALETTE):
        raw = PALETTE[int(raw) - 1]
    snap = state.schedule.set_selected_color(raw)
    return f"Color set to {snap.selected_color}."


def cmd_slot(state: AppState, args: list[str], confirm: Confirm | None = None) -> str:
    """
    /slot <period 1-6> <day 1-5|mon..fri>
    """
    if len(args) < 2:
        return "Usage: /slot <period 1-6> <day 1-5|mon..fri>"

    period = _parse_period(args[0])
    day = _parse_day(args[1])
    confirmed = False
    if state.schedule.needs_confirmation(period, day):
        confirmed = _ask(confirm, "Clear this slot?")

    snap = state.schedule.handle_slot_activation(period, day, confirmed=confirmed)
    return render_grid(snap)


def cmd_todo(state: AppState, args: list[str]) -> str:
    """
    /todo                        -> show both lists
    /todo add <title>            -> add to standard
    /todo del <list> <id>        -> delete
    /todo move <id> <from> <to>  -> drag a task to the other list
    """
    if not args:
        return render_todo(state.todo.get_snapshot())

    sub = args[0].lower()
    rest = args[1:]

    if sub == "add":
        snap = state.todo.add_task(" ".join(rest))
        return render_todo(snap)

    if sub in ("del", "rm"):
        if len(rest) < 2 or not rest[1].lstrip("-").isdigit():
            return "Usage: /todo del <list> <id>"
        snap = state.todo.delete_task(rest[0].lower(), int(rest[1]))
        return render_todo(snap)

    if sub in ("move", "mv"):
        if len(rest) < 3 or not rest[0].lstrip("-").isdigit():
            return "Usage: /todo move <id> <from> <to>"
        state.drag.start(int(rest[0]), rest[1].lower())
        outcome = state.drag.drop(rest[2].lower())
        text = render_todo(outcome.snapshot)
        if outcome.warning:
            text = f"[!] {outcome.warning}\n{text}"
        return text

    return "Usage: /todo [add <title> | del <list> <id> | move <id> <from> <to>]"


def cmd_reset(state: AppState, args: list[str], confirm: Confirm | None = None) -> str:
    """
    /reset grid  -> clear the whole timetable
    /reset todo  -> empty both task lists
    """
    target = args[0].lower() if args else ""
    if target not in ("grid", "todo"):
        return "Usage: /reset grid|todo"
    if not _ask(confirm, f"Reset {target}? This cannot be undone."):
        return "Cancelled."
    if target == "grid":
        return render_grid(state.schedule.reset())
    return render_todo(state.todo.reset())


registry.register("help", cmd_help, "show available commands", aliases=["h", "?"])
registry.register("status", cmd_status, "timetable, task and storage summary")
registry.register("grid", cmd_grid, "show the timetable")
registry.register("place", cmd_place, "enter placing mode: /place <subject> [teacher]")
registry.register("browse", cmd_browse, "leave placing mode")
registry.register("color", cmd_color, "show palette or pick a color: /color [n|#hex]")
registry.register("slot", cmd_slot, "activate a slot: /slot <period> <day>")
registry.register("todo", cmd_todo, "task lists: /todo [add|del|move] ...")
registry.register("reset", cmd_reset, "reset a widget: /reset grid|todo")
