# -*- coding: utf-8 -*-
"""Same-day grouping of tasks, exams and events for the month calendar."""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
import typing as t

from academic_planner.models import DayBucket, Event, Exam, Task


def _day_of(value: t.Union[date, datetime]) -> date:
    # datetime is a date subclass, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def _on_day(when: t.Optional[datetime], day: date) -> bool:
    return when is not None and _day_of(when) == day


def bucket_by_day(
        day: t.Union[date, datetime],
        tasks: t.Iterable[Task],
        exams: t.Iterable[Exam],
        events: t.Iterable[Event],
) -> DayBucket:
    """Collects the items falling on one calendar day.

    Matching compares (year, month, day) only, so any time of day matches.
    Tasks without a due date never match. Events match on their start date.

    :param day: The day to look up; a datetime is truncated to its date.
    :return: A DayBucket with the matching items and their flags.
    """
    day = _day_of(day)
    return DayBucket(
        day=day,
        tasks=[task for task in tasks if _on_day(task.due_date, day)],
        exams=[exam for exam in exams if _on_day(exam.exam_date, day)],
        events=[event for event in events if _on_day(event.start_date, day)],
    )


def month_days(year: int, month: int) -> list[date]:
    """Every date of a month, first to last."""
    first = date(year, month, 1)
    count = calendar.monthrange(year, month)[1]
    return [first + timedelta(days=offset) for offset in range(count)]


def month_markers(
        year: int,
        month: int,
        tasks: t.Iterable[Task],
        exams: t.Iterable[Exam],
        events: t.Iterable[Event],
) -> dict[date, DayBucket]:
    """A DayBucket for every day of the month, keyed by date."""
    tasks, exams, events = list(tasks), list(exams), list(events)
    markers: dict[date, DayBucket] = {day: DayBucket(day=day) for day in month_days(year, month)}

    for task in tasks:
        if task.due_date is not None and _day_of(task.due_date) in markers:
            markers[_day_of(task.due_date)].tasks.append(task)
    for exam in exams:
        if _day_of(exam.exam_date) in markers:
            markers[_day_of(exam.exam_date)].exams.append(exam)
    for event in events:
        if _day_of(event.start_date) in markers:
            markers[_day_of(event.start_date)].events.append(event)

    return markers
