# src/taskglitch/tasks/seed.py

"""Synthetic sales tasks used when the initial load returns nothing."""

from __future__ import annotations

import logging
import random
import time

from .normalize import DAY_SECONDS, new_task_id
from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_SEED_COUNT = 50

_ACTIONS = (
    "Follow up with",
    "Demo for",
    "Prepare proposal for",
    "Renewal call with",
    "Negotiate contract with",
    "Discovery call with",
    "Upsell review for",
    "Onboard",
)

_ACCOUNTS = (
    "Acme Corp",
    "Globex",
    "Initech",
    "Umbrella Ltd",
    "Stark Industries",
    "Wayne Enterprises",
    "Hooli",
    "Vandelay Imports",
    "Soylent Co",
    "Cyberdyne",
)

_NOTES = (
    "",
    "Decision maker looped in.",
    "Waiting on legal review.",
    "Budget approved for Q3.",
    "Asked for a discount.",
    "Competitor also bidding.",
)


def generate_sales_tasks(
    count: int = DEFAULT_SEED_COUNT,
    *,
    rng: random.Random | None = None,
    now_ts: float | None = None,
) -> list[Task]:
    """
    Build `count` well-formed sales tasks.

    Pass a seeded random.Random for reproducible output.
    """
    if count <= 0:
        return []

    rng = rng or random.Random()
    now = time.time() if now_ts is None else now_ts

    tasks: list[Task] = []
    for _ in range(count):
        status = rng.choice(list(TaskStatus))
        created_at = now - rng.uniform(1.0, 60.0) * DAY_SECONDS

        completed_at = None
        if status is TaskStatus.DONE:
            # Strictly after creation, never in the future.
            completed_at = created_at + rng.uniform(0.05, 0.95) * (now - created_at)

        # Roughly one in ten tasks brought in nothing.
        revenue = 0.0 if rng.random() < 0.1 else float(round(rng.uniform(100.0, 20000.0), 2))

        tasks.append(
            Task(
                id=new_task_id(),
                title=f"{rng.choice(_ACTIONS)} {rng.choice(_ACCOUNTS)}",
                revenue=revenue,
                time_taken=float(rng.randint(1, 40)),
                priority=rng.choice(list(Priority)),
                status=status,
                notes=rng.choice(_NOTES),
                created_at=created_at,
                completed_at=completed_at,
            )
        )

    logger.info("Generated %d synthetic sales tasks", len(tasks))
    return tasks
