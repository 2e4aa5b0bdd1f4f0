# tests/test_csv_export.py

from __future__ import annotations

import csv
import io
from pathlib import Path

from taskglitch.export.csv_export import HEADER, to_csv, write_csv
from taskglitch.tasks.task_models import Priority, TaskStatus

from .fakes import make_task


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_header_only_for_empty_collection() -> None:
    assert _rows(to_csv([])) == [list(HEADER)]


def test_rows_follow_given_order_and_escape_text() -> None:
    tasks = [
        make_task(
            "1",
            title='Deal, "big" one',
            revenue=1000,
            time_taken=10,
            priority=Priority.HIGH,
            status=TaskStatus.DONE,
            notes="line1\nline2",
            created_at=1_600_000_000,
            completed_at=1_600_086_400,
        ),
        make_task("2", title="Small", revenue=12.5, time_taken=0.5),
    ]
    rows = _rows(to_csv(tasks))

    assert rows[1] == [
        'Deal, "big" one',
        "1000",
        "10",
        "100.0",
        "High",
        "Done",
        "line1\nline2",
        "2020-09-13T12:26:40Z",
        "2020-09-14T12:26:40Z",
    ]
    assert rows[2][:6] == ["Small", "12.50", "0.50", "25.0", "Low", "Todo"]
    assert rows[2][8] == ""


def test_write_csv_creates_parent_dirs(tmp_path: Path) -> None:
    out = write_csv(tmp_path / "exports" / "tasks.csv", [make_task("1", title="x")])
    assert out.exists()
    assert out.read_text("utf-8").splitlines()[0] == ",".join(HEADER)
    assert not (tmp_path / "exports" / "tasks.csv.tmp").exists()
