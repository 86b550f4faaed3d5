"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the dataclass models in
academic_planner.models (same field names, so conversion is a plain
``asdict`` / ``model_dump``), plus the request models that validate input
before it reaches the store.
"""
from __future__ import annotations

import typing as t
from datetime import date, datetime

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from academic_planner.models import local_naive


# Type literals for commonly used values
DayOfWeek = t.Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
Priority = t.Literal["low", "medium", "high"]
TaskStatus = t.Literal["pending", "in_progress", "completed"]
ExamStatus = t.Literal["scheduled", "confirmed", "completed", "cancelled"]
EventType = t.Literal["class", "task", "exam", "reminder", "other"]
SourceKind = t.Literal["class", "task", "exam", "event"]

# Incoming instants are stored as naive local time
LocalDateTime = t.Annotated[datetime, AfterValidator(local_naive)]


# Entities
class ClassSlot(BaseModel):
    """A class in the weekly timetable."""
    id: int
    name: str
    instructor: t.Optional[str] = None
    room: t.Optional[str] = None
    day_of_week: t.Optional[DayOfWeek] = None
    period: t.Optional[int] = None
    period_count: int = 1
    start_time: t.Optional[str] = None  # "HH:MM"
    end_time: t.Optional[str] = None    # "HH:MM"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


class Task(BaseModel):
    """An assignment or to-do."""
    id: int
    title: str
    description: t.Optional[str] = None
    due_date: t.Optional[datetime] = None
    class_id: t.Optional[int] = None
    priority: Priority = "medium"
    status: TaskStatus = "pending"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


class Exam(BaseModel):
    """A dated exam."""
    id: int
    title: str
    exam_date: datetime
    description: t.Optional[str] = None
    duration: t.Optional[int] = None    # minutes
    room: t.Optional[str] = None
    class_id: t.Optional[int] = None
    status: ExamStatus = "scheduled"
    color: t.Optional[str] = None
    owner_id: str = ""
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None


class Event(BaseModel):
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


# Derived views
class PeriodState(BaseModel):
    """Live classification of an instant against the period table."""
    kind: t.Literal["during", "between", "outside"]
    period: t.Optional[int] = None
    after_period: t.Optional[int] = None
    before_period: t.Optional[int] = None
    day_index: t.Optional[int] = None


class TimetableCell(BaseModel):
    """One cell of the weekly grid; ``slot`` is None for an empty cell."""
    day: DayOfWeek
    period: int
    slot: t.Optional[ClassSlot] = None
    is_span_start: bool = False


class TimetableResponse(BaseModel):
    """Response model for the weekly grid, plus classes that are not on it."""
    cells: list[TimetableCell] = Field(default_factory=list)
    unscheduled: list[ClassSlot] = Field(default_factory=list)


class CalendarItem(BaseModel):
    """Render-ready calendar entry."""
    id: str
    title: str
    start: datetime
    color_tag: str
    source_kind: SourceKind
    end: t.Optional[datetime] = None
    color: str = ""
    all_day: bool = False


class UpcomingSummary(BaseModel):
    """Counts and lists of upcoming tasks and exams."""
    window_days: int
    pending_task_count: int = 0
    upcoming_exam_count: int = 0
    upcoming_exams: list[Exam] = Field(default_factory=list)
    upcoming_tasks: list[Task] = Field(default_factory=list)


class DashboardStats(BaseModel):
    """Headline dashboard numbers."""
    total_classes: int = 0
    pending_tasks: int = 0
    upcoming_exams: int = 0


class UpcomingExamCountResponse(BaseModel):
    """Response model for the exam badge."""
    window_days: int
    count: int


class DayBucket(BaseModel):
    """Items on one calendar day and their indicator flags."""
    day: date
    tasks: list[Task] = Field(default_factory=list)
    exams: list[Exam] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    has_tasks: bool = False
    has_exams: bool = False
    has_events: bool = False


class MonthMarker(BaseModel):
    """Dot indicators for one calendar cell."""
    day: date
    has_tasks: bool = False
    has_exams: bool = False
    has_events: bool = False


class CellSelection(BaseModel):
    """The class opened when a timetable cell is picked; ``slot`` is None where a new class goes."""
    day: DayOfWeek
    period: int
    slot: t.Optional[ClassSlot] = None


# Request models for API endpoints
class PartialUpdate(BaseModel):
    """
    Base for PATCH bodies.

    Fields may be left out, but the ones listed in ``non_nullable`` may not be
    sent as null: the stored entity requires them.
    """
    model_config = ConfigDict(extra="forbid")

    non_nullable: t.ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> PartialUpdate:
        nulls = [
            name for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


class CreateClassRequest(BaseModel):
    """Request model for creating a class."""
    name: str = Field(min_length=1)
    instructor: t.Optional[str] = None
    room: t.Optional[str] = None
    day_of_week: t.Optional[DayOfWeek] = None
    period: t.Optional[int] = Field(default=None, ge=1, le=5)
    period_count: int = Field(default=1, ge=1, le=2)
    start_time: t.Optional[str] = None
    end_time: t.Optional[str] = None
    color: str = "blue"


class UpdateClassRequest(PartialUpdate):
    """Request model for updating a class; only the fields sent are changed."""
    non_nullable: t.ClassVar[tuple[str, ...]] = ("name", "period_count")

    name: t.Optional[str] = Field(default=None, min_length=1)
    instructor: t.Optional[str] = None
    room: t.Optional[str] = None
    day_of_week: t.Optional[DayOfWeek] = None
    period: t.Optional[int] = Field(default=None, ge=1, le=5)
    period_count: t.Optional[int] = Field(default=None, ge=1, le=2)
    start_time: t.Optional[str] = None
    end_time: t.Optional[str] = None
    color: t.Optional[str] = None


class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""
    title: str = Field(min_length=1)
    description: t.Optional[str] = None
    class_id: t.Optional[int] = None
    due_date: t.Optional[LocalDateTime] = None
    priority: Priority = "medium"
    status: TaskStatus = "pending"
    color: str = "yellow"


class UpdateTaskRequest(PartialUpdate):
    """Request model for updating a task."""
    non_nullable: t.ClassVar[tuple[str, ...]] = ("title", "priority", "status")

    title: t.Optional[str] = Field(default=None, min_length=1)
    description: t.Optional[str] = None
    class_id: t.Optional[int] = None
    due_date: t.Optional[LocalDateTime] = None
    priority: t.Optional[Priority] = None
    status: t.Optional[TaskStatus] = None
    color: t.Optional[str] = None


class TaskStatusRequest(BaseModel):
    """Request model for moving a task to another status."""
    status: TaskStatus


class CreateExamRequest(BaseModel):
    """Request model for creating an exam."""
    title: str = Field(min_length=1)
    description: t.Optional[str] = None
    class_id: t.Optional[int] = None
    exam_date: LocalDateTime
    duration: t.Optional[int] = Field(default=None, ge=0)
    room: t.Optional[str] = None
    status: ExamStatus = "scheduled"
    color: str = "pink"


class UpdateExamRequest(PartialUpdate):
    """Request model for updating an exam."""
    non_nullable: t.ClassVar[tuple[str, ...]] = ("title", "exam_date", "status")

    title: t.Optional[str] = Field(default=None, min_length=1)
    description: t.Optional[str] = None
    class_id: t.Optional[int] = None
    exam_date: t.Optional[LocalDateTime] = None
    duration: t.Optional[int] = Field(default=None, ge=0)
    room: t.Optional[str] = None
    status: t.Optional[ExamStatus] = None
    color: t.Optional[str] = None


class CreateEventRequest(BaseModel):
    """Request model for creating a calendar event."""
    title: str = Field(min_length=1)
    description: t.Optional[str] = None
    start_date: LocalDateTime
    end_date: t.Optional[LocalDateTime] = None
    all_day: bool = False
    event_type: EventType = "other"
    color: str = "purple"


class UpdateEventRequest(PartialUpdate):
    """Request model for updating a calendar event."""
    non_nullable: t.ClassVar[tuple[str, ...]] = ("title", "start_date", "all_day", "event_type")

    title: t.Optional[str] = Field(default=None, min_length=1)
    description: t.Optional[str] = None
    start_date: t.Optional[LocalDateTime] = None
    end_date: t.Optional[LocalDateTime] = None
    all_day: t.Optional[bool] = None
    event_type: t.Optional[EventType] = None
    color: t.Optional[str] = None


class SuccessResponse(BaseModel):
    """Response model for updates and deletions."""
    success: bool = True
