# src/taskglitch/tasks/metrics.py

"""
Derived metrics over a task collection.

Pure functions: they accept any iterable of Tasks (the whole store or a
filtered subset) and never divide by zero.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import fields

from .task_models import DerivedTask, Metrics, Task, TaskStatus

GRADE_NEEDS_IMPROVEMENT = "Needs Improvement"
GRADE_GOOD = "Good"
GRADE_EXCELLENT = "Excellent"

# Lowest -> highest.
GRADES: tuple[str, ...] = (GRADE_NEEDS_IMPROVEMENT, GRADE_GOOD, GRADE_EXCELLENT)

EXCELLENT_ROI_ABOVE = 500.0
GOOD_ROI_FROM = 200.0


def compute_roi(task: Task) -> float | None:
    if task.time_taken > 0:
        return task.revenue / task.time_taken
    return None


def with_derived(task: Task) -> DerivedTask:
    values = {f.name: getattr(task, f.name) for f in fields(Task)}
    return DerivedTask(**values, roi=compute_roi(task))


def total_revenue(tasks: Iterable[Task]) -> float:
    return float(sum(t.revenue for t in tasks))


def total_time_taken(tasks: Iterable[Task]) -> float:
    return float(sum(t.time_taken for t in tasks))


def time_efficiency_pct(tasks: Iterable[Task]) -> float:
    """Share of total hours spent on Done tasks, 0..100."""
    items = list(tasks)
    total = total_time_taken(items)
    if total <= 0:
        return 0.0
    done = sum(t.time_taken for t in items if t.status is TaskStatus.DONE)
    return done / total * 100.0


def revenue_per_hour(tasks: Iterable[Task]) -> float:
    items = list(tasks)
    hours = total_time_taken(items)
    if hours <= 0:
        return 0.0
    return total_revenue(items) / hours


def average_roi(tasks: Iterable[Task]) -> float:
    rois = [roi for roi in (compute_roi(t) for t in tasks) if roi is not None]
    if not rois:
        return 0.0
    return sum(rois) / len(rois)


def performance_grade(avg_roi: float) -> str:
    """
    Bucket an average ROI into a grade label.

    > 500 -> Excellent, >= 200 -> Good, anything else (NaN included)
    -> Needs Improvement.
    """
    if avg_roi is None or (isinstance(avg_roi, float) and math.isnan(avg_roi)):
        return GRADE_NEEDS_IMPROVEMENT
    if avg_roi > EXCELLENT_ROI_ABOVE:
        return GRADE_EXCELLENT
    if avg_roi >= GOOD_ROI_FROM:
        return GRADE_GOOD
    return GRADE_NEEDS_IMPROVEMENT


def compute_metrics(tasks: Iterable[Task]) -> Metrics:
    items = list(tasks)
    avg = average_roi(items)
    return Metrics(
        total_revenue=total_revenue(items),
        total_time_taken=total_time_taken(items),
        time_efficiency_pct=time_efficiency_pct(items),
        revenue_per_hour=revenue_per_hour(items),
        average_roi=avg,
        performance_grade=performance_grade(avg),
    )
