# -*- coding: utf-8 -*-
"""Merges events, tasks and exams into one list of calendar items."""
from __future__ import annotations

from datetime import datetime
import typing as t

from academic_planner.models import CalendarItem, Event, Exam, SourceKind, Task

# Color tag -> rendered color
PALETTE: dict[str, str] = {
    "pink": "oklch(0.85 0.08 0)",
    "yellow": "oklch(0.88 0.08 90)",
    "blue": "oklch(0.8 0.08 240)",
    "green": "oklch(0.85 0.08 145)",
    "purple": "oklch(0.82 0.08 300)",
}

# Fallback tag per entity kind. There is no global default.
DEFAULT_COLORS: dict[str, str] = {
    "class": "blue",
    "task": "yellow",
    "exam": "pink",
    "event": "purple",
}

TASK_MARKER = "📋"
EXAM_MARKER = "📝"


def resolve_color(tag: t.Optional[str], kind: SourceKind) -> str:
    """Returns ``tag`` if it is in the palette, otherwise the kind's default tag."""
    if tag in PALETTE:
        return tag
    return DEFAULT_COLORS[kind]


def _item(kind: SourceKind, entity_id: int, title: str, start: datetime,
          color_tag: t.Optional[str], end: t.Optional[datetime] = None,
          all_day: bool = False) -> CalendarItem:
    tag = resolve_color(color_tag, kind)
    return CalendarItem(
        id=f"{kind}-{entity_id}",
        title=title,
        start=start,
        end=end,
        color_tag=tag,
        color=PALETTE[tag],
        source_kind=kind,
        all_day=all_day,
    )


def aggregate_calendar(
        events: t.Iterable[Event],
        tasks: t.Iterable[Task],
        exams: t.Iterable[Exam],
) -> list[CalendarItem]:
    """Projects events, dated tasks and exams onto a single calendar timeline.

    Tasks without a due date are left out. Items are returned grouped by
    source kind, not sorted; see :func:`sort_by_start`.

    :param events: Calendar events, kept with their own start/end.
    :param tasks: Tasks; each dated task becomes a single-instant item.
    :param exams: Exams; each becomes a single-instant item.
    :return: A list of CalendarItem objects.
    """
    items: list[CalendarItem] = []

    for event in events:
        items.append(_item(
            "event", event.id, event.title, event.start_date, event.color,
            end=event.end_date, all_day=event.all_day,
        ))

    for task in tasks:
        if task.due_date is None:
            continue
        items.append(_item("task", task.id, f"{TASK_MARKER} {task.title}", task.due_date, task.color))

    for exam in exams:
        items.append(_item("exam", exam.id, f"{EXAM_MARKER} {exam.title}", exam.exam_date, exam.color))

    return items


def sort_by_start(items: t.Iterable[CalendarItem]) -> list[CalendarItem]:
    """Orders items by start; ties keep their aggregation order."""
    return sorted(items, key=lambda item: item.start)


def events_in_range(events: t.Iterable[Event], start: datetime, end: datetime) -> list[Event]:
    """Events whose start falls within ``[start, end]``, ascending by start."""
    selected = [event for event in events if start <= event.start_date <= end]
    return sorted(selected, key=lambda event: event.start_date)
