# -*- coding: utf-8 -*-
"""Tests for calendar aggregation and color fallback."""
from datetime import datetime

import pytest

from academic_planner.calendar_items import (
    PALETTE, aggregate_calendar, events_in_range, resolve_color, sort_by_start,
)
from academic_planner.models import Event, Exam, Task

JAN_10 = datetime(2025, 1, 10, 9, 0)


def test_undated_task_is_left_out() -> None:
    """A task without a due date contributes nothing."""
    items = aggregate_calendar([], [Task(id=1, title="Someday")], [])
    assert items == []


@pytest.mark.parametrize("color", [None, "orange", ""])
def test_task_color_falls_back_to_yellow(color) -> None:
    """Missing or unknown tags use the per-kind default."""
    task = Task(id=7, title="Essay", due_date=JAN_10, color=color)
    (item,) = aggregate_calendar([], [task], [])

    assert item.color_tag == "yellow"
    assert item.color == PALETTE["yellow"]


def test_per_kind_defaults() -> None:
    """Test that each entity kind has its own fallback color."""
    assert resolve_color(None, "class") == "blue"
    assert resolve_color(None, "task") == "yellow"
    assert resolve_color(None, "exam") == "pink"
    assert resolve_color(None, "event") == "purple"
    assert resolve_color("green", "exam") == "green"


def test_items_are_prefixed_and_marked() -> None:
    """Same numeric id in different kinds yields distinct item ids."""
    event = Event(id=3, title="Club", start_date=JAN_10)
    task = Task(id=3, title="Essay", due_date=JAN_10, color="blue")
    exam = Exam(id=3, title="Midterm", exam_date=JAN_10)

    items = aggregate_calendar([event], [task], [exam])

    assert [item.id for item in items] == ["event-3", "task-3", "exam-3"]
    assert [item.title for item in items] == ["Club", "📋 Essay", "📝 Midterm"]
    assert [item.source_kind for item in items] == ["event", "task", "exam"]
    assert items[1].color_tag == "blue"
    assert items[2].color_tag == "pink"


def test_event_keeps_its_own_span() -> None:
    """Test that events keep their end and all-day flag."""
    end = datetime(2025, 1, 10, 11, 0)
    event = Event(id=1, title="Trip", start_date=JAN_10, end_date=end, all_day=True)

    (item,) = aggregate_calendar([event], [], [])

    assert item.start == JAN_10
    assert item.end == end
    assert item.all_day
    assert item.color_tag == "purple"


def test_tasks_and_exams_are_single_instants() -> None:
    """Test that exams become items without an end."""
    exam = Exam(id=1, title="Final", exam_date=JAN_10)
    (item,) = aggregate_calendar([], [], [exam])
    assert item.end is None


def test_sort_by_start() -> None:
    """Test that items can be ordered by start across kinds."""
    later = Event(id=1, title="Later", start_date=datetime(2025, 1, 12))
    task = Task(id=2, title="Earlier", due_date=datetime(2025, 1, 11))

    items = sort_by_start(aggregate_calendar([later], [task], []))

    assert [item.id for item in items] == ["task-2", "event-1"]


def test_events_in_range_is_inclusive_and_sorted() -> None:
    """Test that range bounds are inclusive and results ascend."""
    start, end = datetime(2025, 1, 1), datetime(2025, 1, 31)
    events = [
        Event(id=1, title="End", start_date=end),
        Event(id=2, title="Start", start_date=start),
        Event(id=3, title="Outside", start_date=datetime(2025, 2, 1)),
    ]

    selected = events_in_range(events, start, end)

    assert [event.id for event in selected] == [2, 1]
