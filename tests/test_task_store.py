# tests/test_task_store.py

from __future__ import annotations

from taskglitch.tasks.task_models import Priority, TaskStatus
from taskglitch.tasks.task_store import TaskStore

from .fakes import T0, FakeClock, make_task


def test_add_stamps_created_at_and_generates_id(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task({"title": "Call Acme", "revenue": 1200, "timeTaken": 3, "priority": "High"})

    assert task.id
    assert task.created_at == clock.now
    assert task.completed_at is None
    assert task.priority is Priority.HIGH
    assert store.tasks == (task,)
    assert store.version == 1


def test_add_ignores_provided_created_at(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task({"title": "x", "createdAt": "2001-01-01T00:00:00Z"})
    assert task.created_at == clock.now


def test_add_keeps_provided_id(store: TaskStore) -> None:
    task = store.add_task({"id": "custom-1", "title": "x"})
    assert task.id == "custom-1"
    assert store.get("custom-1") == task


def test_add_with_zero_time_stores_one(store: TaskStore) -> None:
    task = store.add_task({"title": "Zero", "timeTaken": 0})
    assert task.time_taken == 1
    assert store.get(task.id).time_taken == 1


def test_add_done_sets_completed_at(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task({"title": "Won", "status": "Done"})
    assert task.completed_at == clock.now == task.created_at


def test_add_coerces_malformed_draft(store: TaskStore) -> None:
    task = store.add_task({"revenue": "lots", "priority": 5, "status": None, "notes": None})
    assert task.title == "Untitled Task"
    assert task.revenue == 0
    assert task.priority is Priority.LOW
    assert task.status is TaskStatus.TODO
    assert task.notes == ""


def test_update_merges_fields(store: TaskStore) -> None:
    task = store.add_task({"title": "Old", "revenue": 100})
    updated = store.update_task(task.id, {"title": "New", "revenue": 250, "notes": "n"})

    assert updated is not None
    assert updated.title == "New"
    assert updated.revenue == 250
    assert updated.notes == "n"
    assert updated.created_at == task.created_at
    assert store.get(task.id) == updated


def test_update_unknown_id_is_noop(store: TaskStore) -> None:
    store.add_task({"title": "a"})
    before = (store.tasks, store.version)
    assert store.update_task("missing", {"title": "b"}) is None
    assert (store.tasks, store.version) == before


def test_update_never_changes_id_or_created_at(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task({"title": "a"})
    clock.advance(60)
    updated = store.update_task(task.id, {"id": "other", "createdAt": 0, "created_at": 0})
    assert updated.id == task.id
    assert updated.created_at == task.created_at


def test_update_reapplies_time_floor(store: TaskStore) -> None:
    task = store.add_task({"title": "a", "timeTaken": 5})
    assert store.update_task(task.id, {"timeTaken": 0}).time_taken == 1
    assert store.update_task(task.id, {"time_taken": -4}).time_taken == 1
    assert store.update_task(task.id, {"time_taken": "junk"}).time_taken == 1


def test_update_invalid_enum_keeps_current_value(store: TaskStore) -> None:
    task = store.add_task({"title": "a", "priority": "High", "status": "In Progress"})
    updated = store.update_task(task.id, {"priority": "Critical", "status": "???"})
    assert updated.priority is Priority.HIGH
    assert updated.status is TaskStatus.IN_PROGRESS


def test_update_to_done_stamps_completed_at_once(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task({"title": "deal"})
    assert task.completed_at is None

    clock.advance(100)
    done = store.update_task(task.id, {"status": "Done"})
    stamped = clock.now
    assert done.completed_at == stamped

    clock.advance(100)
    back = store.update_task(task.id, {"status": "In Progress"})
    assert back.completed_at == stamped

    clock.advance(100)
    again = store.update_task(task.id, {"status": "Done"})
    assert again.completed_at == stamped


def test_update_to_done_uses_supplied_completed_at(store: TaskStore) -> None:
    task = store.add_task({"title": "deal"})
    done = store.update_task(task.id, {"status": "Done", "completedAt": T0 - 3600})
    assert done.completed_at == T0 - 3600


def test_completed_at_is_never_overwritten(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task({"title": "deal", "status": "Done"})
    first = task.completed_at
    clock.advance(500)
    updated = store.update_task(task.id, {"completedAt": clock.now, "status": "Done"})
    assert updated.completed_at == first


def test_completed_at_patch_without_done_is_ignored(store: TaskStore) -> None:
    task = store.add_task({"title": "deal"})
    updated = store.update_task(task.id, {"completedAt": T0})
    assert updated.completed_at is None


def test_delete_and_undo_restores_same_task(store: TaskStore) -> None:
    keep = store.add_task({"title": "keep"})
    gone = store.add_task({"title": "gone", "revenue": 42, "notes": "x"})

    assert store.delete_task(gone.id) == gone
    assert store.tasks == (keep,)
    assert store.last_deleted == gone

    restored = store.undo_delete(restore=True)
    assert restored == gone
    assert store.get(gone.id) == gone
    assert store.last_deleted is None


def test_undo_without_restore_discards(store: TaskStore) -> None:
    task = store.add_task({"title": "gone"})
    store.delete_task(task.id)

    assert store.undo_delete(restore=False) is None
    assert store.get(task.id) is None
    assert store.last_deleted is None
    assert store.undo_delete() is None
    assert store.count_tasks() == 0


def test_second_delete_makes_first_unrecoverable(store: TaskStore) -> None:
    first = store.add_task({"title": "first"})
    second = store.add_task({"title": "second"})

    store.delete_task(first.id)
    store.delete_task(second.id)
    assert store.last_deleted == second

    assert store.undo_delete() == second
    assert store.get(first.id) is None
    assert store.undo_delete() is None


def test_delete_unknown_id_keeps_pending_undo(store: TaskStore) -> None:
    task = store.add_task({"title": "a"})
    store.delete_task(task.id)
    assert store.delete_task("missing") is None
    assert store.last_deleted == task


def test_replace_all_populates_and_clears_undo(store: TaskStore) -> None:
    task = store.add_task({"title": "a"})
    store.delete_task(task.id)

    seeded = [make_task("1"), make_task("2")]
    store.replace_all(seeded)
    assert store.tasks == tuple(seeded)
    assert store.last_deleted is None


def test_derived_views_follow_mutations(store: TaskStore) -> None:
    low = store.add_task({"title": "low", "revenue": 10, "timeTaken": 1})
    high = store.add_task({"title": "high", "revenue": 100, "timeTaken": 1})

    assert [t.id for t in store.ranked()] == [high.id, low.id]
    assert store.metrics().total_revenue == 110

    store.update_task(low.id, {"revenue": 1000})
    assert [t.id for t in store.ranked()] == [low.id, high.id]
    assert store.metrics().total_revenue == 1100


def test_ranked_returns_fresh_list(store: TaskStore) -> None:
    store.add_task({"title": "a"})
    first = store.ranked()
    first.clear()
    assert len(store.ranked()) == 1


def test_time_taken_stays_positive_after_any_mutation() -> None:
    store = TaskStore([make_task("1", time_taken=2)], clock=FakeClock())
    store.add_task({"timeTaken": -1})
    store.add_task({"timeTaken": "0"})
    store.update_task("1", {"timeTaken": 0})
    assert all(t.time_taken > 0 for t in store.tasks)
