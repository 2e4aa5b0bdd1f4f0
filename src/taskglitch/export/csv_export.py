# src/taskglitch/export/csv_export.py

"""CSV export of the currently visible tasks (the dashboard's "Export CSV")."""

from __future__ import annotations

import csv
import io
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..tasks.metrics import compute_roi
from ..tasks.task_models import Task, ts_to_iso

logger = logging.getLogger(__name__)

HEADER = (
    "Title",
    "Revenue",
    "Time Taken",
    "ROI",
    "Priority",
    "Status",
    "Notes",
    "Created At",
    "Completed At",
)


def _fmt_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def _row(task: Task) -> list[str]:
    roi = compute_roi(task)
    return [
        task.title,
        _fmt_number(task.revenue),
        _fmt_number(task.time_taken),
        "" if roi is None else f"{roi:.1f}",
        task.priority.value,
        task.status.value,
        task.notes,
        ts_to_iso(task.created_at) or "",
        ts_to_iso(task.completed_at) or "",
    ]


def to_csv(tasks: Iterable[Task]) -> str:
    """Render tasks (in the given order) as CSV text with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for task in tasks:
        writer.writerow(_row(task))
    return buf.getvalue()


def write_csv(path: str | Path, tasks: Iterable[Task]) -> Path:
    """Write the CSV to `path` via a temp file + rename. Returns the final path."""
    out = Path(path).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    items = list(tasks)
    text = to_csv(items)

    tmp = out.with_suffix(out.suffix + ".tmp")
    tmp.write_text(text, "utf-8")
    os.replace(tmp, out)

    logger.info("Exported %d tasks to %s", len(items), out)
    return out
