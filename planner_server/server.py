# -*- coding: utf-8 -*-
import typing as t
from datetime import date, datetime

from fastmcp import FastMCP

from academic_planner.calendar_items import aggregate_calendar, sort_by_start
from academic_planner.day_bucket import bucket_by_day
from academic_planner.live_period import resolve_live_period
from academic_planner.models import (
    CalendarItem, ClassSlot, DayBucket, Event, Exam, PeriodState, Task, UpcomingSummary, WEEKDAYS,
    local_naive,
)
from academic_planner.periods import PERIODS, period_clock_span
from academic_planner.timetable import TimetableGrid, project_timetable
from academic_planner.upcoming import DASHBOARD_WINDOW_DAYS, TaskView, compute_upcoming, filter_tasks
from planner_server import store

mcp = FastMCP("AcademicPlanner")


def _parse_instant(value: str) -> datetime:
    """Parses an ISO datetime; an empty string means "now"."""
    if not value:
        return datetime.now()
    return local_naive(datetime.fromisoformat(value))


def _optional_instant(value: t.Optional[str]) -> t.Optional[datetime]:
    return local_naive(datetime.fromisoformat(value)) if value else None


@mcp.tool()
def create_class(
        owner_id: str,
        name: str,
        day_of_week: t.Optional[str] = None,
        period: t.Optional[int] = None,
        period_count: int = 1,
        instructor: str = "",
        room: str = "",
        color: str = "blue",
) -> ClassSlot:
    """Creates a class in the weekly timetable.

    Start and end times are derived from the period table when a period is given.

    :param owner_id: Owner of the class.
    :param name: Name of the class.
    :param day_of_week: "monday" .. "sunday" (optional).
    :param period: Starting period 1-5 (optional).
    :param period_count: 1 for a single period, 2 for a double period.
    :param instructor: Instructor name (optional).
    :param room: Room (optional).
    :param color: Color tag.
    :return: The stored ClassSlot.
    """
    start_time = end_time = None
    if period:
        start_time, end_time = period_clock_span(period, period_count)
    slot = ClassSlot(
        id=0,
        name=name,
        instructor=instructor or None,
        room=room or None,
        day_of_week=day_of_week or None,
        period=period or None,
        period_count=period_count,
        start_time=start_time,
        end_time=end_time,
        color=color,
    )
    return store.classes.create(owner_id, slot)


@mcp.tool()
def create_task(
        owner_id: str,
        title: str,
        due: str = "",
        priority: str = "medium",
        status: str = "pending",
        description: str = "",
        class_id: t.Optional[int] = None,
        color: str = "yellow",
) -> Task:
    """Creates a task.

    :param owner_id: Owner of the task.
    :param title: Title of the task.
    :param due: Due time in ISO format (optional).
    :param priority: low / medium / high.
    :param status: pending / in_progress / completed.
    :param description: Free text (optional).
    :param class_id: Related class id (optional).
    :param color: Color tag.
    :return: The stored Task.
    """
    task = Task(
        id=0,
        title=title,
        description=description or None,
        due_date=_optional_instant(due),
        class_id=class_id,
        priority=priority,
        status=status,
        color=color,
    )
    return store.tasks.create(owner_id, task)


@mcp.tool()
def create_exam(
        owner_id: str,
        title: str,
        exam_date: str,
        duration: t.Optional[int] = None,
        room: str = "",
        class_id: t.Optional[int] = None,
        status: str = "scheduled",
        color: str = "pink",
) -> Exam:
    """Creates an exam.

    :param owner_id: Owner of the exam.
    :param title: Title of the exam.
    :param exam_date: Exam time in ISO format.
    :param duration: Length in minutes (optional).
    :param room: Room (optional).
    :param class_id: Related class id (optional).
    :param status: scheduled / confirmed / completed / cancelled.
    :param color: Color tag.
    :return: The stored Exam.
    """
    exam = Exam(
        id=0,
        title=title,
        exam_date=local_naive(datetime.fromisoformat(exam_date)),
        duration=duration,
        room=room or None,
        class_id=class_id,
        status=status,
        color=color,
    )
    return store.exams.create(owner_id, exam)


@mcp.tool()
def create_event(
        owner_id: str,
        title: str,
        start: str,
        end: str = "",
        all_day: bool = False,
        event_type: str = "other",
        color: str = "purple",
) -> Event:
    """Creates a calendar event.

    :param owner_id: Owner of the event.
    :param title: Title of the event.
    :param start: Start time in ISO format.
    :param end: End time in ISO format (optional).
    :param all_day: Whether the event lasts all day.
    :param event_type: class / task / exam / reminder / other.
    :param color: Color tag.
    :return: The stored Event.
    """
    event = Event(
        id=0,
        title=title,
        start_date=local_naive(datetime.fromisoformat(start)),
        end_date=_optional_instant(end),
        all_day=all_day,
        event_type=event_type,
        color=color,
    )
    return store.events.create(owner_id, event)


@mcp.tool()
def list_classes(owner_id: str) -> list[ClassSlot]:
    """Lists all classes of an owner, by name."""
    return store.classes.list(owner_id)


@mcp.tool()
def list_tasks(owner_id: str, view: TaskView = "all") -> list[Task]:
    """Lists tasks of an owner, by due date.

    :param owner_id: Owner of the tasks.
    :param view: all / pending (not completed) / completed.
    :return: The matching tasks.
    """
    return filter_tasks(store.tasks.list(owner_id), view)


@mcp.tool()
def list_exams(owner_id: str) -> list[Exam]:
    """Lists all exams of an owner, by date."""
    return store.exams.list(owner_id)


@mcp.tool()
def list_events(owner_id: str) -> list[Event]:
    """Lists all calendar events of an owner, by start date."""
    return store.events.list(owner_id)


@mcp.tool()
def get_live_period(at: str = "") -> PeriodState:
    """Tells which period is running, or which two periods we are between.

    :param at: ISO datetime to evaluate; defaults to now.
    :return: A PeriodState.
    """
    return resolve_live_period(_parse_instant(at))


@mcp.tool()
def get_calendar_items(owner_id: str) -> list[CalendarItem]:
    """Events, dated tasks and exams of an owner as calendar items, by start."""
    items = aggregate_calendar(
        store.events.list(owner_id), store.tasks.list(owner_id), store.exams.list(owner_id)
    )
    return sort_by_start(items)


@mcp.tool()
def get_upcoming(owner_id: str, days: int = DASHBOARD_WINDOW_DAYS, at: str = "") -> UpcomingSummary:
    """Tasks and exams coming up in the next ``days`` days.

    :param owner_id: Owner of the items.
    :param days: Window length in days.
    :param at: ISO datetime for the window start; defaults to now.
    :return: An UpcomingSummary.
    """
    return compute_upcoming(
        _parse_instant(at), days, store.tasks.list(owner_id), store.exams.list(owner_id)
    )


@mcp.tool()
def get_day(owner_id: str, day: str) -> DayBucket:
    """Tasks, exams and events on one day.

    :param owner_id: Owner of the items.
    :param day: Date in YYYY-MM-DD format.
    :return: A DayBucket.
    """
    return bucket_by_day(
        date.fromisoformat(day),
        store.tasks.list(owner_id),
        store.exams.list(owner_id),
        store.events.list(owner_id),
    )


def _format_datetime(value: t.Optional[datetime]) -> str:
    """Formats a datetime as 'Mon 1/15 2:30 PM'; '—' when missing."""
    if value is None:
        return "—"
    return f"{value:%a} {value.month}/{value.day} {value.strftime('%I:%M %p').lstrip('0')}"


def format_timetable(grid: TimetableGrid, state: t.Optional[PeriodState] = None) -> str:
    """Formats the weekly grid as a text table.

    The running period is marked with '▶', continuation cells of a double
    period with '↑'.
    """
    lines = []
    lines.append("🗓 WEEKLY TIMETABLE")
    lines.append("=" * 100)
    header = f"{'':<2}{'Period':<14}" + "".join(f"{day[:3].title():<16}" for day in WEEKDAYS)
    lines.append(header)
    lines.append("-" * 100)

    for period, cells in grid.rows():
        marker = "▶ " if state and state.kind == "during" and state.period == period else "  "
        label = f"{period} {PERIODS[period - 1].label()}"
        row = f"{marker}{label:<14}"
        for cell in cells:
            if cell is None:
                text = "·"
            elif not cell.is_span_start:
                text = "↑"
            else:
                text = cell.slot.name[:15]
            row += f"{text:<16}"
        lines.append(row.rstrip())
        if state and state.kind == "between" and state.after_period == period:
            lines.append(f"  {'-- break --':<14}")

    lines.append("=" * 100)
    return "\n".join(lines)


def format_upcoming(summary: UpcomingSummary) -> str:
    """Formats an UpcomingSummary as a clean table."""
    lines = []
    lines.append(f"⏰ UPCOMING (next {summary.window_days} days)")
    lines.append("=" * 100)
    lines.append(f"Pending tasks: {summary.pending_task_count}    Upcoming exams: {summary.upcoming_exam_count}")
    lines.append("-" * 100)

    if not summary.upcoming_tasks and not summary.upcoming_exams:
        lines.append("✅ Nothing due.")
    for task in summary.upcoming_tasks:
        title = task.title[:44]
        lines.append(f"📋 {title:<45} {_format_datetime(task.due_date):<18} {task.priority:<8}")
    for exam in summary.upcoming_exams:
        title = exam.title[:44]
        lines.append(f"📝 {title:<45} {_format_datetime(exam.exam_date):<18} {exam.room or '—':<8}")

    lines.append("=" * 100)
    return "\n".join(lines)


@mcp.tool()
def show_timetable(owner_id: str, at: str = "") -> str:
    """Displays an owner's weekly timetable with the current period highlighted.

    :param owner_id: Owner of the classes.
    :param at: ISO datetime used for the highlight; defaults to now.
    :return: Formatted timetable string.
    """
    grid = project_timetable(store.classes.list(owner_id))
    return format_timetable(grid, resolve_live_period(_parse_instant(at)))


@mcp.tool()
def show_upcoming(owner_id: str, days: int = DASHBOARD_WINDOW_DAYS, at: str = "") -> str:
    """Displays upcoming tasks and exams as a formatted table.

    :param owner_id: Owner of the items.
    :param days: Window length in days.
    :param at: ISO datetime for the window start; defaults to now.
    :return: Formatted summary string.
    """
    summary = compute_upcoming(
        _parse_instant(at), days, store.tasks.list(owner_id), store.exams.list(owner_id)
    )
    return format_upcoming(summary)


if __name__ == "__main__":
    mcp.run()
