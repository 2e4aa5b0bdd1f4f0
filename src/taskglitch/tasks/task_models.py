# src/taskglitch/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


def _lookup_key(raw: str) -> str:
    return raw.strip().lower().replace("_", " ").replace("-", " ")


class Priority(StrEnum):
    """Sales task priority. Weights drive the ranking tie-break."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]

    @classmethod
    def lookup(cls, raw: Any) -> Priority | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = _lookup_key(raw)
        for member in cls:
            if key in (_lookup_key(member.value), _lookup_key(member.name)):
                return member
        return None

    @classmethod
    def coerce(cls, raw: Any, default: Priority | None = None) -> Priority:
        member = cls.lookup(raw)
        if member is not None:
            return member
        return cls.LOW if default is None else default


_PRIORITY_WEIGHTS: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Values match the labels shown on the dashboard ("In Progress" has a space).
    """

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def lookup(cls, raw: Any) -> TaskStatus | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = _lookup_key(raw)
        for member in cls:
            if key in (_lookup_key(member.value), _lookup_key(member.name)):
                return member
        return None

    @classmethod
    def coerce(cls, raw: Any, default: TaskStatus | None = None) -> TaskStatus:
        member = cls.lookup(raw)
        if member is not None:
            return member
        return cls.TODO if default is None else default


def ts_to_iso(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    revenue: float
    time_taken: float  # hours, always > 0
    priority: Priority
    status: TaskStatus
    notes: str
    created_at: float  # epoch seconds, never changes
    completed_at: float | None = None  # stamped once, on the first move into Done

    def to_dict(self) -> dict[str, Any]:
        """Raw-record shape (camelCase keys, ISO timestamps) as accepted by the normalizer."""
        return {
            "id": self.id,
            "title": self.title,
            "revenue": self.revenue,
            "timeTaken": self.time_taken,
            "priority": self.priority.value,
            "status": self.status.value,
            "notes": self.notes,
            "createdAt": ts_to_iso(self.created_at),
            "completedAt": ts_to_iso(self.completed_at),
        }


@dataclass(frozen=True)
class DerivedTask(Task):
    """Task plus read-time ROI. Built by metrics.with_derived, never stored."""

    roi: float | None = None

    def base(self) -> Task:
        return Task(**{f.name: getattr(self, f.name) for f in fields(Task)})


@dataclass(frozen=True, slots=True)
class Metrics:
    total_revenue: float
    total_time_taken: float
    time_efficiency_pct: float
    revenue_per_hour: float
    average_roi: float
    performance_grade: str


EMPTY_METRICS = Metrics(
    total_revenue=0.0,
    total_time_taken=0.0,
    time_efficiency_pct=0.0,
    revenue_per_hour=0.0,
    average_roi=0.0,
    performance_grade="Needs Improvement",
)
