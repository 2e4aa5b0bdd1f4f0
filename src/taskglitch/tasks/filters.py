# src/taskglitch/tasks/filters.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar

from .task_models import Priority, Task, TaskStatus

ALL = "All"

T = TypeVar("T", bound=Task)


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """
    Dashboard filter inputs.

    query: case-insensitive title substring ("" = no filter)
    status / priority: enum value or "All"
    """

    query: str = ""
    status: str = ALL
    priority: str = ALL

    @property
    def is_empty(self) -> bool:
        return not self.query and self.status == ALL and self.priority == ALL

    def matches(self, task: Task) -> bool:
        if self.query and self.query.casefold() not in task.title.casefold():
            return False
        if self.status != ALL and task.status.value != self.status:
            return False
        if self.priority != ALL and task.priority.value != self.priority:
            return False
        return True

    def apply(self, tasks: Iterable[T]) -> list[T]:
        return [t for t in tasks if self.matches(t)]

    def describe(self) -> str:
        if self.is_empty:
            return "none"
        parts = []
        if self.query:
            parts.append(f"title~{self.query!r}")
        if self.status != ALL:
            parts.append(f"status={self.status}")
        if self.priority != ALL:
            parts.append(f"priority={self.priority}")
        return ", ".join(parts)

    @classmethod
    def parse(cls, args: list[str]) -> TaskFilter:
        """
        Build from tokens like ["q=acme", "status=done", "priority=High"].

        Unknown keys are ignored; unknown status/priority values mean "All".
        """
        query = ""
        status = ALL
        priority = ALL
        for token in args:
            key, sep, value = token.partition("=")
            if not sep:
                continue
            key = key.strip().lower()
            value = value.strip()
            if key in ("q", "query", "title"):
                query = value
            elif key == "status":
                status = _enum_or_all(TaskStatus, value)
            elif key == "priority":
                priority = _enum_or_all(Priority, value)
        return cls(query=query, status=status, priority=priority)


def _enum_or_all(enum_cls: type[TaskStatus] | type[Priority], raw: str) -> str:
    if not raw or raw.lower() == ALL.lower():
        return ALL
    member = enum_cls.lookup(raw)
    return ALL if member is None else member.value
