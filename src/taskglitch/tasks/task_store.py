# src/taskglitch/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any

from .metrics import compute_metrics
from .normalize import (
    canonical_fields,
    coerce_id,
    coerce_notes,
    coerce_revenue,
    coerce_time_taken,
    coerce_title,
    parse_timestamp,
)
from .ranking import rank_tasks
from .task_models import DerivedTask, Metrics, Priority, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task store.

    - owns the task list; callers only ever see tuple snapshots
    - `version` increases on every effective mutation, derived views
      (ranked order, metrics) are cached per version
    - `last_deleted` is the single undo slot; a new delete overwrites it

    Every operation is total: unknown ids and malformed patches are no-ops
    or get coerced, nothing is raised.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._tasks: list[Task] = list(tasks)
        self._version = 0
        self._last_deleted: Task | None = None
        self._ranked_cache: tuple[int, list[DerivedTask]] | None = None
        self._metrics_cache: tuple[int, Metrics] | None = None
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def version(self) -> int:
        return self._version

    @property
    def last_deleted(self) -> Task | None:
        return self._last_deleted

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def ranked(self) -> list[DerivedTask]:
        cached = self._ranked_cache
        if cached is None or cached[0] != self._version:
            cached = (self._version, rank_tasks(self._tasks))
            self._ranked_cache = cached
        return list(cached[1])

    def metrics(self) -> Metrics:
        cached = self._metrics_cache
        if cached is None or cached[0] != self._version:
            cached = (self._version, compute_metrics(self._tasks))
            self._metrics_cache = cached
        return cached[1]

    # ---- mutations ----

    def _bump(self) -> None:
        self._version += 1

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Initial population. Clears any pending undo."""
        self._tasks = list(tasks)
        self._last_deleted = None
        self._bump()
        logger.info("TaskStore populated total=%s", len(self._tasks))

    def add_task(self, draft: Mapping[str, Any]) -> Task:
        """
        Create a task from a draft (form values).

        createdAt is always stamped now; a provided one is ignored.
        """
        rec = canonical_fields(draft) if isinstance(draft, Mapping) else {}
        now = self._clock()
        status = TaskStatus.coerce(rec.get("status"))

        task = Task(
            id=coerce_id(rec.get("id")),
            title=coerce_title(rec.get("title")),
            revenue=coerce_revenue(rec.get("revenue")),
            time_taken=coerce_time_taken(rec.get("time_taken")),
            priority=Priority.coerce(rec.get("priority")),
            status=status,
            notes=coerce_notes(rec.get("notes")),
            created_at=now,
            completed_at=now if status is TaskStatus.DONE else None,
        )
        self._tasks.append(task)
        self._bump()
        logger.debug("Task added id=%s status=%s", task.id, task.status.value)
        return task

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> Task | None:
        """
        Merge `patch` onto the task with `task_id`.

        Returns the updated task, or None when the id is unknown.
        `id` and `created_at` in a patch are ignored.
        """
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("update_task: unknown id=%s", task_id)
            return None

        current = self._tasks[idx]
        rec = canonical_fields(patch) if isinstance(patch, Mapping) else {}
        changes: dict[str, Any] = {}

        if "title" in rec:
            changes["title"] = coerce_title(rec["title"])
        if "revenue" in rec:
            changes["revenue"] = coerce_revenue(rec["revenue"])
        if "time_taken" in rec:
            changes["time_taken"] = coerce_time_taken(rec["time_taken"])
        if "notes" in rec:
            changes["notes"] = coerce_notes(rec["notes"])
        if "priority" in rec:
            changes["priority"] = Priority.coerce(rec["priority"], default=current.priority)
        if "status" in rec:
            changes["status"] = TaskStatus.coerce(rec["status"], default=current.status)

        new_status = changes.get("status", current.status)
        if current.completed_at is None and new_status is TaskStatus.DONE:
            supplied = parse_timestamp(rec.get("completed_at"))
            changes["completed_at"] = supplied if supplied is not None else self._clock()

        merged = replace(current, **changes)
        self._tasks[idx] = merged
        self._bump()
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return merged

    def delete_task(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete_task: unknown id=%s", task_id)
            return None

        removed = self._tasks.pop(idx)
        if self._last_deleted is not None:
            logger.debug("Undo slot overwritten, id=%s is no longer restorable", self._last_deleted.id)
        self._last_deleted = removed
        self._bump()
        logger.debug("Task deleted id=%s", task_id)
        return removed

    def undo_delete(self, restore: bool = True) -> Task | None:
        """
        Resolve the pending deletion.

        restore=True re-appends the last deleted task; either way the slot is cleared.
        Returns the restored task, if any.
        """
        pending = self._last_deleted
        self._last_deleted = None
        if not restore or pending is None:
            return None

        self._tasks.append(pending)
        self._bump()
        logger.debug("Task restored id=%s", pending.id)
        return pending

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None
