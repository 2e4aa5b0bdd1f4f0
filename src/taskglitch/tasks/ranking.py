# src/taskglitch/tasks/ranking.py

from __future__ import annotations

from collections.abc import Iterable

from .metrics import with_derived
from .task_models import DerivedTask, Task


def ranking_key(task: DerivedTask) -> tuple[float, int, str]:
    """
    Sort key for the display order:
    ROI desc (missing ROI counts as 0), priority weight desc, title asc (case-insensitive).
    """
    roi = task.roi or 0.0
    return (-roi, -task.priority.weight, task.title.casefold())


def rank_tasks(tasks: Iterable[Task]) -> list[DerivedTask]:
    """
    Return a new list of DerivedTasks in display order; the input is not touched.

    sorted() is stable, so fully tied tasks (same ROI, priority and title)
    keep their input order.
    """
    return sorted((with_derived(t) for t in tasks), key=ranking_key)
