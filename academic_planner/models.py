"""
Data models for the academic planner.

This module contains the entity dataclasses read from the planner store
(classes, tasks, exams and events) and the derived value objects the
scheduling functions produce from them. Derived objects are never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
import typing as t


# Type literals for commonly used values
DayOfWeek = t.Literal[
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]
Priority = t.Literal["low", "medium", "high"]
TaskStatus = t.Literal["pending", "in_progress", "completed"]
ExamStatus = t.Literal["scheduled", "confirmed", "completed", "cancelled"]
EventType = t.Literal["class", "task", "exam", "reminder", "other"]
SourceKind = t.Literal["class", "task", "exam", "event"]
PeriodStateKind = t.Literal["during", "between", "outside"]

DAYS_OF_WEEK: tuple[str, ...] = t.get_args(DayOfWeek)
WEEKDAYS: tuple[str, ...] = DAYS_OF_WEEK[:5]


def local_naive(value: t.Optional[datetime]) -> t.Optional[datetime]:
    """Converts an offset-aware instant to naive local time; naive values pass through.

    All planner clock values are local and naive, so comparisons never mix
    aware and naive datetimes.
    """
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


@dataclass
class ClassSlot:
    """
    A class in the weekly timetable.

    A slot with a period but no day is "unscheduled" and never projected.
    """
    id: int
    name: str
    instructor: t.Optional[str] = None
    room: t.Optional[str] = None
    day_of_week: t.Optional[DayOfWeek] = None
    period: t.Optional[int] = None           # 1..5
    period_count: int = 1                    # 1 or 2 (double period)
    start_time: t.Optional[str] = None       # "HH:MM"
    end_time: t.Optional[str] = None         # "HH:MM"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


@dataclass
class Task:
    """An assignment or to-do, optionally due at a given instant."""
    id: int
    title: str
    description: t.Optional[str] = None
    due_date: t.Optional[datetime] = None
    class_id: t.Optional[int] = None         # soft reference to ClassSlot.id
    priority: Priority = "medium"
    status: TaskStatus = "pending"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


@dataclass
class Exam:
    """A dated exam."""
    id: int
    title: str
    exam_date: datetime
    description: t.Optional[str] = None
    duration: t.Optional[int] = None         # minutes
    room: t.Optional[str] = None
    class_id: t.Optional[int] = None
    status: ExamStatus = "scheduled"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


@dataclass
class Event:
    """A general calendar event."""
    id: int
    title: str
    start_date: datetime
    description: t.Optional[str] = None
    end_date: t.Optional[datetime] = None
    all_day: bool = False
    event_type: EventType = "other"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


@dataclass(frozen=True)
class PeriodState:
    """
    Live classification of an instant against the period table.

    kind:         "during" / "between" / "outside"
    period:       set when kind == "during"
    after_period: set when kind == "between"
    before_period: set when kind == "between"
    day_index:    0 (Mon) .. 4 (Fri); None on weekends
    """
    kind: PeriodStateKind
    period: t.Optional[int] = None
    after_period: t.Optional[int] = None
    before_period: t.Optional[int] = None
    day_index: t.Optional[int] = None

    @classmethod
    def during(cls, period: int, day_index: t.Optional[int] = None) -> PeriodState:
        return cls(kind="during", period=period, day_index=day_index)

    @classmethod
    def between(cls, after_period: int, before_period: int,
                day_index: t.Optional[int] = None) -> PeriodState:
        return cls(
            kind="between",
            after_period=after_period,
            before_period=before_period,
            day_index=day_index,
        )

    @classmethod
    def outside(cls, day_index: t.Optional[int] = None) -> PeriodState:
        return cls(kind="outside", day_index=day_index)


@dataclass(frozen=True)
class TimetableCell:
    """One occupied timetable cell. Continuation cells share the slot of the span start."""
    slot: ClassSlot
    is_span_start: bool = True


@dataclass(frozen=True)
class CalendarItem:
    """Render-ready projection of a task, exam or event onto the calendar."""
    id: str                                  # "<kind>-<entity id>"
    title: str
    start: datetime
    color_tag: str
    source_kind: SourceKind
    end: t.Optional[datetime] = None
    color: str = ""
    all_day: bool = False


@dataclass
class UpcomingSummary:
    """Counts and lists for the dashboard "upcoming" panel."""
    window_days: int
    pending_task_count: int = 0
    upcoming_exam_count: int = 0
    upcoming_exams: list[Exam] = field(default_factory=list)
    upcoming_tasks: list[Task] = field(default_factory=list)


@dataclass
class DashboardStats:
    """Headline numbers shown on the dashboard."""
    total_classes: int = 0
    pending_tasks: int = 0
    upcoming_exams: int = 0


@dataclass
class DayBucket:
    """Everything that falls on one calendar day."""
    day: date
    tasks: list[Task] = field(default_factory=list)
    exams: list[Exam] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    @property
    def has_tasks(self) -> bool:
        return bool(self.tasks)

    @property
    def has_exams(self) -> bool:
        return bool(self.exams)

    @property
    def has_events(self) -> bool:
        return bool(self.events)

    @property
    def is_empty(self) -> bool:
        return not (self.tasks or self.exams or self.events)
