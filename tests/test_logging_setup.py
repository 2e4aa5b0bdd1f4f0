# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskglitch.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("taskglitch.tasks.task_loader", logging.INFO, True),
        ("taskglitch.cli.main", logging.DEBUG, True),
        ("taskglitch.tasks.task_store", logging.INFO, False),
        ("taskglitch.tasks.task_store", logging.DEBUG, False),
        ("taskglitch.tasks.task_store", logging.WARNING, True),
        ("taskglitch.tasks.normalize", logging.DEBUG, False),
        ("httpx", logging.INFO, False),
        ("httpx", logging.ERROR, True),
        ("py.warnings", logging.WARNING, False),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


def test_setup_logging_writes_store_debug_to_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("taskglitch.tasks.task_store").debug("Task added id=%s", "abc")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "taskglitch.log"
        assert "Task added id=abc" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
