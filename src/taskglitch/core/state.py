# src/taskglitch/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.filters import TaskFilter
from ..tasks.metrics import compute_metrics
from ..tasks.task_loader import TaskLoader
from ..tasks.task_models import DerivedTask, Metrics
from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    task_store: TaskRepo
    task_filter: TaskFilter = field(default_factory=TaskFilter)
    loader: TaskLoader | None = None

    # Initial load status, shown by the console.
    loading: bool = False
    error: str | None = None

    def visible_tasks(self) -> list[DerivedTask]:
        """Ranked tasks that pass the current filter."""
        return self.task_filter.apply(self.task_store.ranked())

    def visible_metrics(self) -> Metrics:
        if self.task_filter.is_empty:
            return self.task_store.metrics()
        return compute_metrics(self.visible_tasks())
