# -*- coding: utf-8 -*-
"""Tests for same-day grouping."""
from datetime import date, datetime

from academic_planner.day_bucket import bucket_by_day, month_days, month_markers
from academic_planner.models import Event, Exam, Task


def test_any_time_of_day_matches() -> None:
    """A task due late in the evening belongs to that day only."""
    task = Task(id=1, title="Essay", due_date=datetime(2025, 1, 10, 23, 0))

    assert bucket_by_day(date(2025, 1, 10), [task], [], []).has_tasks
    assert not bucket_by_day(date(2025, 1, 9), [task], [], []).has_tasks
    assert not bucket_by_day(date(2025, 1, 11), [task], [], []).has_tasks


def test_bucket_flags_and_contents() -> None:
    """Test that undated tasks never match and flags follow contents."""
    day = date(2025, 1, 10)
    exam = Exam(id=1, title="Midterm", exam_date=datetime(2025, 1, 10, 9, 0))
    event = Event(id=1, title="Club", start_date=datetime(2025, 1, 10, 18, 0))
    undated = Task(id=2, title="Someday")

    bucket = bucket_by_day(day, [undated], [exam], [event])

    assert bucket.day == day
    assert not bucket.has_tasks
    assert bucket.exams == [exam]
    assert bucket.events == [event]
    assert not bucket.is_empty


def test_datetime_lookup_is_truncated_to_its_date() -> None:
    """Test that a datetime lookup matches the whole day."""
    task = Task(id=1, title="Essay", due_date=datetime(2025, 1, 10, 8, 0))
    bucket = bucket_by_day(datetime(2025, 1, 10, 20, 0), [task], [], [])

    assert bucket.day == date(2025, 1, 10)
    assert bucket.tasks == [task]


def test_month_days() -> None:
    """Test month lengths, leap years included."""
    assert len(month_days(2024, 2)) == 29
    assert month_days(2025, 1)[0] == date(2025, 1, 1)
    assert month_days(2025, 1)[-1] == date(2025, 1, 31)


def test_month_markers_cover_the_month() -> None:
    """Items outside the month are ignored."""
    task = Task(id=1, title="Essay", due_date=datetime(2025, 1, 31, 23, 59))
    exam = Exam(id=1, title="Final", exam_date=datetime(2025, 2, 1, 9, 0))
    event = Event(id=1, title="Party", start_date=datetime(2025, 1, 1, 0, 0))

    markers = month_markers(2025, 1, [task], [exam], [event])

    assert len(markers) == 31
    assert markers[date(2025, 1, 31)].tasks == [task]
    assert markers[date(2025, 1, 1)].has_events
    assert not any(bucket.has_exams for bucket in markers.values())
    assert markers[date(2025, 1, 15)].is_empty
