# src/taskglitch/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the loader and the CLI.

Callers depend on these Protocols rather than on TaskStore directly,
which keeps the store swappable and makes testing easier.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from ..tasks.task_models import DerivedTask, Metrics, Task


class TaskSource(Protocol):
    """Where the initial raw records come from (URL, file, or a test double)."""

    async def fetch(self) -> Any: ...


class TaskRepo(Protocol):
    # Population (initial load)
    def replace_all(self, tasks: Iterable[Task]) -> None: ...

    # Reads
    @property
    def tasks(self) -> tuple[Task, ...]: ...
    @property
    def last_deleted(self) -> Task | None: ...
    def get(self, task_id: str) -> Task | None: ...
    def count_tasks(self) -> int: ...
    def ranked(self) -> list[DerivedTask]: ...
    def metrics(self) -> Metrics: ...

    # Mutations
    def add_task(self, draft: Mapping[str, Any]) -> Task: ...
    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> Task | None: ...
    def delete_task(self, task_id: str) -> Task | None: ...
    def undo_delete(self, restore: bool = True) -> Task | None: ...
