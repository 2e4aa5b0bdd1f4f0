# src/taskglitch/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import datetime
from typing import Any, cast

from ..core.state import AppState
from ..export.csv_export import write_csv
from ..tasks.filters import TaskFilter
from ..tasks.task_models import DerivedTask, Metrics

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20

# Command-line keys -> task field names understood by the store.
_FIELD_KEYS: dict[str, str] = {
    "title": "title",
    "revenue": "revenue",
    "time": "time_taken",
    "hours": "time_taken",
    "time_taken": "time_taken",
    "timetaken": "time_taken",
    "priority": "priority",
    "status": "status",
    "notes": "notes",
    "completed_at": "completed_at",
    "completedat": "completed_at",
}


def _split_args(text: str) -> list[str]:
    """Shell-like split so `title="Call Acme"` stays one token."""
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = _split_args(line[1:])
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _fmt_ts(ts: float | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def _fmt_money(value: float) -> str:
    return f"${value:,.2f}"


def _fmt_task_row(i: int, t: DerivedTask) -> str:
    roi = "-" if not t.roi else f"{t.roi:.1f}"
    return (
        f"{i:>3}. [{t.id[:8]}] {t.title} | {_fmt_money(t.revenue)} | {t.time_taken:g}h"
        f" | ROI {roi} | {t.priority.value} | {t.status.value}"
    )


def _fmt_metrics(m: Metrics) -> str:
    return (
        f"  Total revenue:    {_fmt_money(m.total_revenue)}\n"
        f"  Total time:       {m.total_time_taken:g}h\n"
        f"  Time efficiency:  {m.time_efficiency_pct:.1f}%\n"
        f"  Revenue per hour: {_fmt_money(m.revenue_per_hour)}\n"
        f"  Average ROI:      {m.average_roi:.1f}\n"
        f"  Grade:            {m.performance_grade}"
    )


def _parse_fields(args: list[str]) -> tuple[dict[str, Any], list[str]]:
    """key=value tokens -> store field dict; returns (fields, unknown_keys)."""
    out: dict[str, Any] = {}
    unknown: list[str] = []
    for token in args:
        key, sep, value = token.partition("=")
        if not sep:
            unknown.append(token)
            continue
        name = _FIELD_KEYS.get(key.strip().lower().replace("-", "_"))
        if name is None:
            unknown.append(key)
            continue
        out[name] = value
    return out, unknown


def _resolve_id(state: AppState, token: str) -> tuple[str | None, str | None]:
    """Full id or unique id prefix -> (task_id, error_message)."""
    if state.task_store.get(token) is not None:
        return token, None
    matches = [t.id for t in state.task_store.tasks if t.id.startswith(token)]
    if not matches:
        return None, f"No task with id {token}."
    if len(matches) > 1:
        return None, f"Id prefix {token} is ambiguous ({len(matches)} tasks)."
    return matches[0], None


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    pending = store.last_deleted
    load = "loading" if state.loading else (f"FAILED ({state.error})" if state.error else "ok")
    source = getattr(state.settings, "tasks_source", "-")
    return (
        "Status:\n"
        f"  Source: {source}\n"
        f"  Initial load: {load}\n"
        f"  Tasks: {store.count_tasks()} (visible: {len(state.visible_tasks())})\n"
        f"  Filter: {state.task_filter.describe()}\n"
        f"  Pending undo: {pending.title if pending else 'none'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list        -> top 20 visible tasks in ranked order
    /list 50     -> top 50
    /list all    -> every visible task
    """
    limit: int | None = DEFAULT_LIST_LIMIT
    if args:
        if args[0].lower() == "all":
            limit = None
        else:
            try:
                limit = max(1, int(args[0]))
            except ValueError:
                return "Usage: /list [n|all]"

    tasks = state.visible_tasks()
    if not tasks:
        return "No tasks match the current filter." if not state.task_filter.is_empty else "No tasks."

    shown = tasks if limit is None else tasks[:limit]
    lines = [f"Tasks ({len(shown)} of {len(tasks)}, filter: {state.task_filter.describe()}):"]
    lines.extend(_fmt_task_row(i, t) for i, t in enumerate(shown, start=1))
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task_id, err = _resolve_id(state, args[0])
    if err:
        return err
    task = state.task_store.get(cast(str, task_id))
    if task is None:
        return f"No task with id {args[0]}."
    return (
        f"{task.title}\n"
        f"  id: {task.id}\n"
        f"  revenue: {_fmt_money(task.revenue)}  time: {task.time_taken:g}h\n"
        f"  priority: {task.priority.value}  status: {task.status.value}\n"
        f"  created: {_fmt_ts(task.created_at)}  completed: {_fmt_ts(task.completed_at)}\n"
        f"  notes: {task.notes or '-'}"
    )


def cmd_metrics(state: AppState, args: list[str]) -> str:
    lines = [f"Metrics (filter: {state.task_filter.describe()}):", _fmt_metrics(state.visible_metrics())]
    if not state.task_filter.is_empty:
        lines.append("Metrics (all tasks):")
        lines.append(_fmt_metrics(state.task_store.metrics()))
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title="Call Acme" revenue=1200 time=3 priority=High status=Todo notes="..."
    """
    if not args:
        return 'Usage: /add title="..." revenue=N time=H priority=High|Medium|Low status=Todo|in_progress|Done notes="..."'
    draft, unknown = _parse_fields(args)
    draft.pop("completed_at", None)
    task = state.task_store.add_task(draft)
    logger.info("Added task id=%s title=%s", task.id, task.title)
    reply = f"Added [{task.id[:8]}] {task.title}."
    if unknown:
        reply += f" Ignored: {', '.join(unknown)}."
    return reply


def cmd_update(state: AppState, args: list[str]) -> str:
    """
    /update <id> status=Done
    /update <id> revenue=2500 time=4 notes="signed"
    """
    if len(args) < 2:
        return "Usage: /update <id> key=value ..."
    task_id, err = _resolve_id(state, args[0])
    if err:
        return err

    patch, unknown = _parse_fields(args[1:])
    if not patch:
        return "Nothing to update. Keys: title, revenue, time, priority, status, notes."

    task = state.task_store.update_task(cast(str, task_id), patch)
    if task is None:
        return f"No task with id {args[0]}."
    logger.info("Updated task id=%s fields=%s", task.id, ",".join(sorted(patch)))
    reply = f"Updated [{task.id[:8]}] {task.title} ({task.status.value})."
    if unknown:
        reply += f" Ignored: {', '.join(unknown)}."
    return reply


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    task_id, err = _resolve_id(state, args[0])
    if err:
        return err
    task = state.task_store.delete_task(cast(str, task_id))
    if task is None:
        return f"No task with id {args[0]}."
    logger.info("Deleted task id=%s", task.id)
    return f"Deleted [{task.id[:8]}] {task.title}. Use /undo to restore or /dismiss to forget it."


def cmd_undo(state: AppState, args: list[str]) -> str:
    task = state.task_store.undo_delete(restore=True)
    if task is None:
        return "Nothing to undo."
    logger.info("Undo delete id=%s", task.id)
    return f"Restored [{task.id[:8]}] {task.title}."


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    pending = state.task_store.last_deleted
    state.task_store.undo_delete(restore=False)
    if pending is None:
        return "Nothing pending."
    return f"Deletion of {pending.title} is now permanent."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                         -> show the current filter
    /filter clear                   -> remove all filters
    /filter q=acme status=done priority=high
    """
    if not args:
        return f"Filter: {state.task_filter.describe()}"
    if args[0].lower() in ("clear", "reset", "off"):
        state.task_filter = TaskFilter()
        return "Filter cleared."
    state.task_filter = TaskFilter.parse(args)
    return f"Filter: {state.task_filter.describe()} ({len(state.visible_tasks())} tasks visible)"


def cmd_export(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """/export [path] -> write the visible tasks as CSV."""
    default_path = getattr(state.settings, "export_path", "tasks.csv")
    path = args[0] if args else default_path
    tasks = state.visible_tasks()

    if emit:
        with contextlib.suppress(Exception):
            emit(f"[EXPORT] Writing {len(tasks)} tasks...")

    try:
        out = write_csv(path, tasks)
    except OSError as e:
        logger.exception("CSV export failed path=%s", path)
        return f"Export failed: {e}"
    return f"Exported {len(tasks)} tasks to {out}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show load status, task counts and filter.")
registry.register("list", cmd_list, help_text="Ranked visible tasks: /list [n|all].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Task details: /show <id>.")
registry.register("metrics", cmd_metrics, help_text="Revenue, efficiency, ROI and grade.", aliases=["m"])
registry.register("add", cmd_add, help_text='Add a task: /add title="..." revenue=N time=H ...')
registry.register("update", cmd_update, help_text="Edit a task: /update <id> key=value ...", aliases=["edit"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("dismiss", cmd_dismiss, help_text="Forget the last deleted task.")
registry.register(
    "filter", cmd_filter, help_text="Filter: /filter q=.. status=.. priority=.. | /filter clear."
)
registry.register("export", cmd_export, help_text="Write visible tasks to CSV: /export [path].")
