# tests/test_filters.py

from __future__ import annotations

from taskglitch.tasks.filters import ALL, TaskFilter
from taskglitch.tasks.task_models import Priority, TaskStatus

from .fakes import make_task

TASKS = [
    make_task("1", title="Call ACME", priority=Priority.HIGH, status=TaskStatus.DONE),
    make_task("2", title="Demo for Globex", priority=Priority.LOW, status=TaskStatus.TODO),
    make_task("3", title="acme renewal", priority=Priority.MEDIUM, status=TaskStatus.IN_PROGRESS),
]


def test_empty_filter_keeps_everything_in_order() -> None:
    f = TaskFilter()
    assert f.is_empty
    assert f.apply(TASKS) == TASKS


def test_title_query_is_case_insensitive_substring() -> None:
    assert [t.id for t in TaskFilter(query="acme").apply(TASKS)] == ["1", "3"]


def test_status_and_priority_filters_combine() -> None:
    f = TaskFilter(query="acme", status=TaskStatus.DONE.value, priority=Priority.HIGH.value)
    assert [t.id for t in f.apply(TASKS)] == ["1"]
    assert TaskFilter(status="In Progress").apply(TASKS) == [TASKS[2]]


def test_parse_tokens() -> None:
    f = TaskFilter.parse(["q=acme", "status=in_progress", "priority=medium", "junk"])
    assert f == TaskFilter(query="acme", status="In Progress", priority="Medium")


def test_parse_unknown_values_mean_all() -> None:
    f = TaskFilter.parse(["status=blocked", "priority=all"])
    assert f.status == ALL
    assert f.priority == ALL
    assert f.is_empty


def test_describe() -> None:
    assert TaskFilter().describe() == "none"
    assert TaskFilter(query="x", status="Done").describe() == "title~'x', status=Done"
