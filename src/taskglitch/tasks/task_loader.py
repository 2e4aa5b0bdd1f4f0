# src/taskglitch/tasks/task_loader.py

from __future__ import annotations

"""
Initial task load.

One-shot: fetch raw records (HTTP endpoint or local JSON file), normalize them,
fall back to synthetic data when nothing usable came back, and populate the store.

The only error surfaced to callers is LoadError (transport failure or a body
that is not JSON). It is reported, never retried.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from ..core.ports import TaskRepo, TaskSource
from .normalize import normalize_tasks
from .seed import DEFAULT_SEED_COUNT, generate_sales_tasks

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class LoadError(RuntimeError):
    """Initial raw-data fetch failed (network or parse failure)."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _fetch_http(url: str, client: httpx.AsyncClient) -> Any:
    try:
        resp = await client.get(url)
    except httpx.HTTPError as e:
        raise LoadError(f"Failed to load tasks from {url}: {e}") from e

    if not resp.is_success:
        # Missing seed endpoint is not an error: fall back to generated data.
        logger.warning("Task source %s answered HTTP %s; treating as empty", url, resp.status_code)
        return []

    try:
        return resp.json()
    except ValueError as e:
        raise LoadError(f"Task source {url} returned invalid JSON: {e}") from e


def _read_file(path: Path) -> Any:
    if not path.exists():
        logger.info("Task source file %s does not exist; treating as empty", path)
        return []
    try:
        return json.loads(path.read_text("utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Failed to read tasks from {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise LoadError(f"Task file {path} is not valid JSON: {e}") from e


async def fetch_raw_tasks(
    source: str | Path,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """
    Return the decoded JSON payload of `source` (whatever shape it has).

    Non-2xx responses and missing files yield [].
    """
    src = str(source)
    if not _is_url(src):
        return _read_file(Path(src).expanduser())

    if client is not None:
        return await _fetch_http(src, client)

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as own_client:
        return await _fetch_http(src, own_client)


class RawTaskSource:
    """TaskSource backed by a URL or a local JSON file path."""

    def __init__(
        self,
        location: str | Path,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.location = location
        self._client = client
        self._timeout = timeout

    def __str__(self) -> str:
        return str(self.location)

    async def fetch(self) -> Any:
        return await fetch_raw_tasks(self.location, client=self._client, timeout=self._timeout)


class TaskLoader:
    """
    Populates a store from `source` at most once.

    `source` is any TaskSource; a plain URL or path is wrapped in RawTaskSource.
    After the first attempt (successful or not) `fetched` is True and further
    load() calls return False without touching the source or the store.
    """

    def __init__(
        self,
        source: TaskSource | str | Path,
        *,
        seed_count: int = DEFAULT_SEED_COUNT,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if isinstance(source, (str, Path)):
            source = RawTaskSource(source, client=client, timeout=timeout)
        self.source: TaskSource = source
        self.seed_count = seed_count
        self.fetched = False

    async def load(self, store: TaskRepo) -> bool:
        if self.fetched:
            logger.debug("Initial load already done for %s; skipping", self.source)
            return False

        try:
            raw = await self.source.fetch()
            tasks = normalize_tasks(raw)
            if not tasks:
                logger.info("No tasks from %s; generating %d sample tasks", self.source, self.seed_count)
                tasks = generate_sales_tasks(self.seed_count)
            store.replace_all(tasks)
            logger.info("Loaded %d tasks from %s", len(tasks), self.source)
        finally:
            self.fetched = True
        return True
