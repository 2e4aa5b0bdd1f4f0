# src/taskglitch/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the store and the initial loader into AppState,
- runs the one-shot initial load and records a load failure on the state.
"""

from __future__ import annotations

import asyncio
import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_loader import LoadError, TaskLoader
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.export_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    loader = TaskLoader(
        settings.tasks_source,
        seed_count=settings.seed_count,
        timeout=settings.fetch_timeout_seconds,
    )
    return AppState(settings=settings, task_store=TaskStore(), loader=loader)


def load_initial_tasks(state: AppState) -> bool:
    """
    Run the initial load once. Returns True if the store was populated.

    A LoadError is logged and kept on state.error; the app keeps running
    with an empty store.
    """
    if state.loader is None:
        return False

    state.loading = True
    try:
        return asyncio.run(state.loader.load(state.task_store))
    except LoadError as e:
        logger.error("Initial load failed: %s", e)
        state.error = str(e)
        return False
    finally:
        state.loading = False
