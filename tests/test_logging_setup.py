# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from class_portal.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("class_portal.tasks.task_store", logging.DEBUG, True),
        ("class_portal.storage.kv_store", logging.INFO, False),
        ("class_portal.storage.kv_store", logging.WARNING, True),
        ("py.warnings", logging.WARNING, False),
        ("sqlite3", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


def test_setup_logging_writes_to_returned_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("class_portal.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "portal.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)
