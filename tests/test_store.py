# -*- coding: utf-8 -*-
"""Tests for the in-memory planner store."""
from datetime import datetime

import pytest

from academic_planner.models import ClassSlot, Event, Task
from planner_server import store
from planner_server.store import EntityNotFoundError


@pytest.fixture(autouse=True)
def clean_store():
    store.reset()
    yield
    store.reset()


def test_create_assigns_id_owner_and_timestamps() -> None:
    """Test that the store manages ids, owners and timestamps."""
    created = store.classes.create("alice", ClassSlot(id=0, name="Algebra"))

    assert created.id == 1
    assert created.owner_id == "alice"
    assert created.created_at is not None
    assert created.created_at == created.updated_at


def test_rows_are_isolated_per_owner() -> None:
    """Another owner's row behaves as if it did not exist."""
    created = store.tasks.create("alice", Task(id=0, title="Essay"))

    assert store.tasks.list("bob") == []
    with pytest.raises(EntityNotFoundError):
        store.tasks.get(created.id, "bob")
    with pytest.raises(EntityNotFoundError):
        store.tasks.update(created.id, "bob", title="Hijacked")
    with pytest.raises(EntityNotFoundError):
        store.tasks.delete(created.id, "bob")

    assert store.tasks.get(created.id, "alice").title == "Essay"


def test_list_ordering() -> None:
    """Test display ordering of classes and tasks."""
    store.classes.create("alice", ClassSlot(id=0, name="Physics"))
    store.classes.create("alice", ClassSlot(id=0, name="Algebra"))
    store.tasks.create("alice", Task(id=0, title="Undated"))
    store.tasks.create("alice", Task(id=0, title="Late", due_date=datetime(2025, 2, 1)))
    store.tasks.create("alice", Task(id=0, title="Early", due_date=datetime(2025, 1, 1)))

    assert [c.name for c in store.classes.list("alice")] == ["Algebra", "Physics"]
    assert [task.title for task in store.tasks.list("alice")] == ["Early", "Late", "Undated"]


def test_update_keeps_managed_fields() -> None:
    """Test that updates cannot overwrite managed fields."""
    created = store.tasks.create("alice", Task(id=0, title="Essay"))

    updated = store.tasks.update(created.id, "alice", title="Essay v2", id=99,
                                created_at=datetime(2000, 1, 1))

    assert updated.title == "Essay v2"
    assert updated.id == created.id
    assert updated.owner_id == "alice"
    assert updated.created_at == created.created_at


def test_delete_removes_the_row() -> None:
    """Test that deleted rows are gone."""
    created = store.tasks.create("alice", Task(id=0, title="Essay"))
    store.tasks.delete(created.id, "alice")

    with pytest.raises(EntityNotFoundError) as excinfo:
        store.tasks.get(created.id, "alice")
    assert excinfo.value.kind == "task"


def test_list_events_between() -> None:
    """Test the owner-scoped event range."""
    store.events.create("alice", Event(id=0, title="In", start_date=datetime(2025, 1, 5)))
    store.events.create("alice", Event(id=0, title="Out", start_date=datetime(2025, 3, 5)))
    store.events.create("bob", Event(id=0, title="Other", start_date=datetime(2025, 1, 5)))

    found = store.list_events_between("alice", datetime(2025, 1, 1), datetime(2025, 1, 31))

    assert [event.title for event in found] == ["In"]
