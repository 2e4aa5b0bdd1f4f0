# src/taskglitch/tasks/normalize.py

"""
Raw record -> Task normalization.

Input comes from a static JSON file or an HTTP endpoint and is loosely typed.
Every function here is total: malformed values are replaced by defaults,
nothing is raised back to the caller.

Accepted keys are the camelCase names of the dashboard JSON
(timeTaken, createdAt, completedAt) and their snake_case equivalents.
"""

from __future__ import annotations

import logging
import math
import time
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 3600.0
DEFAULT_TITLE = "Untitled Task"

# Numbers above this are treated as epoch milliseconds (JS Date.now()).
_EPOCH_MS_THRESHOLD = 1e11

FIELD_ALIASES: dict[str, str] = {
    "timeTaken": "time_taken",
    "createdAt": "created_at",
    "completedAt": "completed_at",
}


def new_task_id() -> str:
    """Process-unique task identifier."""
    return uuid.uuid4().hex


def canonical_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase keys to snake_case; snake_case wins when both are present."""
    out: dict[str, Any] = {}
    for key, value in raw.items():
        if not isinstance(key, str):
            continue
        name = FIELD_ALIASES.get(key, key)
        if name != key and name in raw:
            continue
        out[name] = value
    return out


def _to_number(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            val = float(raw)
        except OverflowError:
            return None
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return None
        try:
            val = float(s)
        except ValueError:
            return None
    else:
        return None
    return val if math.isfinite(val) else None


def coerce_revenue(raw: Any) -> float:
    val = _to_number(raw)
    return val if val is not None and val > 0 else 0.0


def coerce_time_taken(raw: Any) -> float:
    val = _to_number(raw)
    return val if val is not None and val > 0 else 1.0


def coerce_title(raw: Any) -> str:
    if raw is None:
        return DEFAULT_TITLE
    title = str(raw).strip()
    return title or DEFAULT_TITLE


def coerce_notes(raw: Any) -> str:
    return "" if raw is None else str(raw)


def coerce_id(raw: Any) -> str:
    if raw is None or isinstance(raw, bool):
        return new_task_id()
    s = str(raw).strip()
    return s or new_task_id()


def is_renderable_ts(ts: float) -> bool:
    """True if `ts` converts back to a UTC datetime (years 1..9999)."""
    try:
        datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return False
    return True


def parse_timestamp(raw: Any) -> float | None:
    """
    Parse a timestamp into epoch seconds.

    Accepts ISO-8601 strings (a trailing "Z" included), datetimes, and numbers
    (epoch seconds, or epoch milliseconds for large values). Naive values are
    taken as UTC. Returns None for anything else, including instants that
    cannot be rendered back as a date.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        dt = raw if raw.tzinfo is not None else raw.replace(tzinfo=timezone.utc)
        try:
            ts = dt.timestamp()
        except (OverflowError, ValueError):
            return None
        return ts if is_renderable_ts(ts) else None
    if isinstance(raw, (int, float)):
        try:
            val = float(raw)
        except OverflowError:
            return None
        if not math.isfinite(val):
            return None
        ts = val / 1000.0 if abs(val) > _EPOCH_MS_THRESHOLD else val
        return ts if is_renderable_ts(ts) else None
    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            return None
        num = _to_number(s)
        if num is not None:
            return parse_timestamp(num)
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
        return parse_timestamp(dt)
    return None


def normalize_task(raw: Any, index: int, *, now_ts: float) -> Task:
    """Normalize one record. `index` is its position in the input sequence."""
    rec = canonical_fields(raw) if isinstance(raw, Mapping) else {}

    status = TaskStatus.coerce(rec.get("status"))

    created_at = parse_timestamp(rec.get("created_at"))
    if created_at is None:
        # Earlier records get older synthetic timestamps.
        created_at = now_ts - (index + 1) * DAY_SECONDS

    completed_at = parse_timestamp(rec.get("completed_at"))
    if completed_at is None and status is TaskStatus.DONE:
        completed_at = created_at + DAY_SECONDS
        if not is_renderable_ts(completed_at):
            # Created on the last representable day.
            completed_at = created_at

    return Task(
        id=coerce_id(rec.get("id")),
        title=coerce_title(rec.get("title")),
        revenue=coerce_revenue(rec.get("revenue")),
        time_taken=coerce_time_taken(rec.get("time_taken")),
        priority=Priority.coerce(rec.get("priority")),
        status=status,
        notes=coerce_notes(rec.get("notes")),
        created_at=created_at,
        completed_at=completed_at,
    )


def normalize_tasks(raw: Any, *, now_ts: float | None = None) -> list[Task]:
    """
    Convert a sequence of raw records into Tasks.

    Anything that is not a list/tuple yields an empty list.
    """
    if not isinstance(raw, (list, tuple)):
        if raw is not None:
            logger.debug("normalize_tasks: ignoring non-sequence input type=%s", type(raw).__name__)
        return []

    if now_ts is None:
        now_ts = time.time()

    tasks = [normalize_task(item, idx, now_ts=now_ts) for idx, item in enumerate(raw)]
    logger.debug("normalize_tasks: %d records normalized", len(tasks))
    return tasks
