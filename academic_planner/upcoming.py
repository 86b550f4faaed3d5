# -*- coding: utf-8 -*-
"""Forward-looking window filters for the dashboard and exam badges.

Windows are inclusive at both ends: an item due exactly at ``now`` or exactly
at ``now + window`` is upcoming.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
import typing as t

from academic_planner.models import ClassSlot, DashboardStats, Exam, Task, UpcomingSummary

DASHBOARD_WINDOW_DAYS = 7
EXAM_BADGE_WINDOW_DAYS = 14
UPCOMING_TASK_LIMIT = 5
UPCOMING_EXAM_LIMIT = 5

TaskView = t.Literal["all", "pending", "completed"]


def _within(when: t.Optional[datetime], now: datetime, until: datetime) -> bool:
    return when is not None and now <= when <= until


def is_open(task: Task) -> bool:
    """A task still counts as outstanding until it is completed."""
    return task.status != "completed"


def compute_upcoming(
        now: datetime,
        window_days: int,
        tasks: t.Iterable[Task],
        exams: t.Iterable[Exam],
        task_limit: int = UPCOMING_TASK_LIMIT,
        exam_limit: t.Optional[int] = None,
) -> UpcomingSummary:
    """Counts and lists the tasks and exams coming up within a window.

    :param now: Reference instant (window start).
    :param window_days: Window length in days.
    :param tasks: All of the owner's tasks.
    :param exams: All of the owner's exams.
    :param task_limit: Maximum number of upcoming tasks listed.
    :param exam_limit: Maximum number of upcoming exams listed; None lists all.
        ``upcoming_exam_count`` always counts every exam in the window.
    :return: An UpcomingSummary. ``pending_task_count`` is global, not windowed.
    """
    tasks = list(tasks)
    until = now + timedelta(days=window_days)

    upcoming_exams = sorted(
        (exam for exam in exams if _within(exam.exam_date, now, until)),
        key=lambda exam: exam.exam_date,
    )
    upcoming_tasks = sorted(
        (task for task in tasks if task.status == "pending" and _within(task.due_date, now, until)),
        key=lambda task: task.due_date,
    )

    return UpcomingSummary(
        window_days=window_days,
        pending_task_count=sum(1 for task in tasks if is_open(task)),
        upcoming_exam_count=len(upcoming_exams),
        upcoming_exams=upcoming_exams[:exam_limit],
        upcoming_tasks=upcoming_tasks[:task_limit],
    )


def dashboard_stats(
        now: datetime,
        classes: t.Iterable[ClassSlot],
        tasks: t.Iterable[Task],
        exams: t.Iterable[Exam],
) -> DashboardStats:
    """Headline counts for the dashboard, using the 7-day window."""
    summary = compute_upcoming(now, DASHBOARD_WINDOW_DAYS, tasks, exams)
    return DashboardStats(
        total_classes=sum(1 for _ in classes),
        pending_tasks=summary.pending_task_count,
        upcoming_exams=summary.upcoming_exam_count,
    )


def filter_tasks(tasks: t.Iterable[Task], view: TaskView = "all") -> list[Task]:
    """Task list tabs: all, pending (anything not completed) or completed."""
    if view == "pending":
        return [task for task in tasks if is_open(task)]
    if view == "completed":
        return [task for task in tasks if not is_open(task)]
    return list(tasks)


def is_past(exam: Exam, now: datetime) -> bool:
    return exam.exam_date < now


def days_until(when: t.Union[date, datetime], now: t.Union[date, datetime]) -> int:
    """Whole calendar days from ``now``'s date to ``when``'s date."""
    return (_as_date(when) - _as_date(now)).days


def _as_date(value: t.Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value
