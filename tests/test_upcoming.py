# -*- coding: utf-8 -*-
"""Tests for upcoming windows and dashboard counts."""
from datetime import date, datetime, timedelta, timezone

from academic_planner.models import ClassSlot, Exam, Task, local_naive
from academic_planner.upcoming import (
    compute_upcoming, dashboard_stats, days_until, filter_tasks, is_past,
)

NOW = datetime(2025, 1, 10, 0, 0)


def exam_at(exam_id: int, when: datetime) -> Exam:
    return Exam(id=exam_id, title=f"Exam {exam_id}", exam_date=when)


def test_window_end_is_inclusive() -> None:
    """An exam exactly seven days out is included; one second later is not."""
    on_edge = exam_at(1, datetime(2025, 1, 17, 0, 0))
    past_edge = exam_at(2, datetime(2025, 1, 17, 0, 0, 1))

    summary = compute_upcoming(NOW, 7, [], [past_edge, on_edge])

    assert summary.upcoming_exam_count == 1
    assert summary.upcoming_exams == [on_edge]


def test_window_start_is_inclusive() -> None:
    """Test that an exam exactly at now is included."""
    at_now = exam_at(1, NOW)
    before = exam_at(2, NOW - timedelta(minutes=1))

    summary = compute_upcoming(NOW, 7, [], [before, at_now])

    assert summary.upcoming_exams == [at_now]


def test_pending_count_is_global_and_excludes_completed() -> None:
    """Undated and far-future open tasks still count as pending."""
    tasks = [
        Task(id=1, title="Undated"),
        Task(id=2, title="In progress", status="in_progress"),
        Task(id=3, title="Done", status="completed", due_date=NOW),
        Task(id=4, title="Next year", due_date=datetime(2026, 1, 1)),
    ]

    summary = compute_upcoming(NOW, 7, tasks, [])

    assert summary.pending_task_count == 3


def test_upcoming_tasks_are_pending_dated_and_in_window() -> None:
    """Test which tasks are listed as upcoming."""
    tasks = [
        Task(id=1, title="Soon", due_date=NOW + timedelta(days=2)),
        Task(id=2, title="Done", status="completed", due_date=NOW + timedelta(days=1)),
        Task(id=3, title="Started", status="in_progress", due_date=NOW + timedelta(days=1)),
        Task(id=4, title="Undated"),
        Task(id=5, title="Late", due_date=NOW + timedelta(days=8)),
    ]

    summary = compute_upcoming(NOW, 7, tasks, [])

    assert [task.id for task in summary.upcoming_tasks] == [1]


def test_upcoming_tasks_are_sorted_and_capped() -> None:
    """Test that upcoming tasks ascend and stop at five."""
    tasks = [
        Task(id=i, title=f"T{i}", due_date=NOW + timedelta(hours=10 - i))
        for i in range(1, 8)
    ]

    summary = compute_upcoming(NOW, 7, tasks, [])

    assert [task.id for task in summary.upcoming_tasks] == [7, 6, 5, 4, 3]


def test_exam_badge_window() -> None:
    """Test the 14-day exam badge window."""
    exams = [exam_at(1, NOW + timedelta(days=10)), exam_at(2, NOW + timedelta(days=15))]
    assert compute_upcoming(NOW, 14, [], exams).upcoming_exam_count == 1
    assert compute_upcoming(NOW, 7, [], exams).upcoming_exam_count == 0


def test_dashboard_stats() -> None:
    """Test the dashboard headline numbers."""
    classes = [ClassSlot(id=1, name="Algebra"), ClassSlot(id=2, name="Physics")]
    tasks = [Task(id=1, title="Open"), Task(id=2, title="Done", status="completed")]
    exams = [exam_at(1, NOW + timedelta(days=3)), exam_at(2, NOW + timedelta(days=9))]

    stats = dashboard_stats(NOW, classes, tasks, exams)

    assert (stats.total_classes, stats.pending_tasks, stats.upcoming_exams) == (2, 1, 1)


def test_filter_tasks() -> None:
    """Test the task list tabs."""
    tasks = [
        Task(id=1, title="A"),
        Task(id=2, title="B", status="in_progress"),
        Task(id=3, title="C", status="completed"),
    ]
    assert [task.id for task in filter_tasks(tasks)] == [1, 2, 3]
    assert [task.id for task in filter_tasks(tasks, "pending")] == [1, 2]
    assert [task.id for task in filter_tasks(tasks, "completed")] == [3]


def test_is_past_and_days_until() -> None:
    """Test countdown helpers."""
    assert is_past(exam_at(1, NOW - timedelta(seconds=1)), NOW)
    assert not is_past(exam_at(1, NOW), NOW)
    assert days_until(datetime(2025, 1, 12, 23, 0), NOW) == 2
    assert days_until(date(2025, 1, 9), NOW) == -1


def test_compute_upcoming_is_repeatable() -> None:
    """Test that identical inputs give identical summaries."""
    tasks = [Task(id=1, title="Soon", due_date=NOW + timedelta(days=1))]
    exams = [exam_at(1, NOW + timedelta(days=1))]
    assert compute_upcoming(NOW, 7, tasks, exams) == compute_upcoming(NOW, 7, tasks, exams)


def test_exam_limit_caps_the_list_but_not_the_count() -> None:
    """Test that exam_limit shortens the listed exams only."""
    exams = [exam_at(i, NOW + timedelta(days=i)) for i in range(1, 7)]

    capped = compute_upcoming(NOW, 7, [], exams, exam_limit=5)
    full = compute_upcoming(NOW, 7, [], exams)

    assert [exam.id for exam in capped.upcoming_exams] == [1, 2, 3, 4, 5]
    assert capped.upcoming_exam_count == 6
    assert len(full.upcoming_exams) == 6


def test_local_naive() -> None:
    """Test that aware instants lose their offset and naive ones are untouched."""
    aware = datetime(2025, 1, 12, 9, 0, tzinfo=timezone.utc)

    converted = local_naive(aware)

    assert converted.tzinfo is None
    assert converted == aware.astimezone().replace(tzinfo=None)
    assert local_naive(NOW) is NOW
    assert local_naive(None) is None
