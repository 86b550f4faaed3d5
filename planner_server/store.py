# -*- coding: utf-8 -*-
import itertools
import logging
import threading
import typing as t
from dataclasses import replace
from datetime import datetime

from academic_planner.calendar_items import events_in_range
from academic_planner.models import ClassSlot, Event, Exam, Task

logger = logging.getLogger(__name__)

E = t.TypeVar("E", ClassSlot, Task, Exam, Event)

# In-memory storage for classes, tasks, exams and events
# In a real application, this would be replaced with a persistent database

_PROTECTED_FIELDS = {"id", "owner_id", "created_at", "updated_at"}


class EntityNotFoundError(KeyError):
    """No entity with this id belongs to the requesting owner."""

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class EntityTable(t.Generic[E]):
    """Rows of one entity kind, keyed by (id, owner).

    Another owner's row is indistinguishable from a missing one.
    """

    def __init__(self, kind: str, sort_key: t.Callable[[E], t.Any]) -> None:
        self.kind = kind
        self._sort_key = sort_key
        self._rows: dict[int, E] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, owner_id: str, entity: E) -> E:
        """Stores a copy of ``entity`` under a fresh id.

        :param owner_id: Owner of the new row.
        :param entity: Entity with any placeholder id.
        :return: The stored entity.
        """
        now = datetime.now()
        with self._lock:
            stored = replace(entity, id=next(self._ids), owner_id=owner_id,
                             created_at=now, updated_at=now)
            self._rows[stored.id] = stored
        logger.info("Created %s %s for owner %s", self.kind, stored.id, owner_id)
        return stored

    def get(self, entity_id: int, owner_id: str) -> E:
        """Fetches one row.

        :raises EntityNotFoundError: If the id is unknown or owned by someone else.
        """
        row = self._rows.get(entity_id)
        if row is None or row.owner_id != owner_id:
            raise EntityNotFoundError(self.kind, entity_id)
        return row

    def list(self, owner_id: str) -> list[E]:
        """All rows of an owner in display order."""
        rows = [row for row in self._rows.values() if row.owner_id == owner_id]
        return sorted(rows, key=self._sort_key)

    def update(self, entity_id: int, owner_id: str, **changes: t.Any) -> E:
        """Applies field changes; id, owner and timestamps are managed here."""
        with self._lock:
            current = self.get(entity_id, owner_id)
            allowed = {k: v for k, v in changes.items() if k not in _PROTECTED_FIELDS}
            updated = replace(current, updated_at=datetime.now(), **allowed)
            self._rows[entity_id] = updated
        return updated

    def delete(self, entity_id: int, owner_id: str) -> None:
        with self._lock:
            self.get(entity_id, owner_id)
            del self._rows[entity_id]
        logger.info("Deleted %s %s for owner %s", self.kind, entity_id, owner_id)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()
            self._ids = itertools.count(1)


def _undated_last(when: t.Optional[datetime]) -> tuple[bool, datetime]:
    return (when is None, when or datetime.min)


classes: EntityTable[ClassSlot] = EntityTable("class", lambda c: c.name)
tasks: EntityTable[Task] = EntityTable("task", lambda task: _undated_last(task.due_date))
exams: EntityTable[Exam] = EntityTable("exam", lambda exam: exam.exam_date)
events: EntityTable[Event] = EntityTable("event", lambda event: event.start_date)

TABLES: dict[str, EntityTable] = {
    "classes": classes,
    "tasks": tasks,
    "exams": exams,
    "events": events,
}


def list_events_between(owner_id: str, start: datetime, end: datetime) -> list[Event]:
    """Events of an owner starting within ``[start, end]``.

    :param owner_id: Owner of the events.
    :param start: Earliest start date, inclusive.
    :param end: Latest start date, inclusive.
    """
    return events_in_range(events.list(owner_id), start, end)


def reset() -> None:
    """Drops every stored row. Used by tests."""
    for table in TABLES.values():
        table.clear()
