"""
FastAPI service for the academic planner.

This service exposes the planner store (classes, tasks, exams, events) and
the scheduling views derived from it (timetable, live period, calendar,
upcoming items, day buckets) as REST API endpoints. The caller's identity
comes from the ``X-User-Id`` header; every row is scoped to that owner.
"""
from __future__ import annotations

import logging
import os
import typing as t
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date, datetime

from fastapi import Depends, FastAPI, Header, HTTPException, Path, Query

from academic_planner import models as core
from academic_planner.calendar_items import aggregate_calendar, sort_by_start
from academic_planner.day_bucket import bucket_by_day, month_markers
from academic_planner.live_period import resolve_live_period
from academic_planner.periods import period_clock_span
from academic_planner.timetable import project_timetable, unscheduled
from academic_planner.upcoming import (
    DASHBOARD_WINDOW_DAYS, EXAM_BADGE_WINDOW_DAYS, UPCOMING_EXAM_LIMIT, TaskView,
    compute_upcoming, dashboard_stats, filter_tasks,
)
from planner_server import store
from planner_server.store import EntityNotFoundError, EntityTable
from services.shared.models import (
    CalendarItem as PydanticCalendarItem,
    CellSelection,
    ClassSlot as PydanticClassSlot,
    DashboardStats as PydanticDashboardStats,
    DayBucket as PydanticDayBucket,
    Event as PydanticEvent,
    Exam as PydanticExam,
    PeriodState as PydanticPeriodState,
    Task as PydanticTask,
    UpcomingSummary as PydanticUpcomingSummary,
    CreateClassRequest,
    CreateEventRequest,
    CreateExamRequest,
    CreateTaskRequest,
    LocalDateTime,
    MonthMarker,
    SuccessResponse,
    TaskStatusRequest,
    TimetableCell,
    TimetableResponse,
    UpcomingExamCountResponse,
    UpdateClassRequest,
    UpdateEventRequest,
    UpdateExamRequest,
    UpdateTaskRequest,
)

logger = logging.getLogger(__name__)

PLANNER_SERVICE_PORT = int(os.getenv("PLANNER_SERVICE_PORT", "8004"))
PLANNER_LOG_LEVEL = os.getenv("PLANNER_LOG_LEVEL", "INFO")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup and cleanup on shutdown."""
    # The in-memory store needs no initialization
    logger.info("Planner service starting")
    yield
    logger.info("Planner service stopped")


app = FastAPI(
    title="Academic Planner Service",
    description="REST API for classes, tasks, exams, events and the schedule views derived from them",
    version="1.0.0",
    lifespan=lifespan,
)


def current_owner(x_user_id: t.Optional[str] = Header(default=None)) -> str:
    """Resolves the authenticated owner id, or rejects the request."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id


def _get_or_404(table: EntityTable, entity_id: int, owner_id: str) -> t.Any:
    try:
        return table.get(entity_id, owner_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.kind.title()} {e.entity_id} not found")


def _update_or_404(table: EntityTable, entity_id: int, owner_id: str, changes: dict[str, t.Any]) -> None:
    try:
        table.update(entity_id, owner_id, **changes)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.kind.title()} {e.entity_id} not found")


def _delete_or_404(table: EntityTable, entity_id: int, owner_id: str) -> None:
    try:
        table.delete(entity_id, owner_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.kind.title()} {e.entity_id} not found")


def _with_clock_times(changes: dict[str, t.Any], current: t.Optional[core.ClassSlot] = None) -> dict[str, t.Any]:
    """Fills start/end times from the period table unless they were given.

    Clearing the period of an existing class clears its times as well.
    """
    if current is not None and "period" in changes and changes["period"] is None:
        changes.setdefault("start_time", None)
        changes.setdefault("end_time", None)
        return changes
    period = changes.get("period", current.period if current else None)
    period_count = changes.get("period_count") or (current.period_count if current else 1)
    touched = current is None or "period" in changes or "period_count" in changes
    if period and touched and not changes.get("start_time") and not changes.get("end_time"):
        changes["start_time"], changes["end_time"] = period_clock_span(period, period_count)
    return changes


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "academic-planner-service"}


# Classes
@app.post("/classes", response_model=PydanticClassSlot)
async def create_class(request: CreateClassRequest, owner_id: str = Depends(current_owner)) -> PydanticClassSlot:
    """Create a class; start and end times follow the period when not given."""
    fields = _with_clock_times(request.model_dump())
    slot = store.classes.create(owner_id, core.ClassSlot(id=0, **fields))
    return PydanticClassSlot(**asdict(slot))


@app.get("/classes", response_model=list[PydanticClassSlot])
async def list_classes(owner_id: str = Depends(current_owner)) -> list[PydanticClassSlot]:
    """List the owner's classes by name."""
    return [PydanticClassSlot(**asdict(slot)) for slot in store.classes.list(owner_id)]


@app.get("/classes/{class_id}", response_model=PydanticClassSlot)
async def get_class(class_id: int, owner_id: str = Depends(current_owner)) -> PydanticClassSlot:
    return PydanticClassSlot(**asdict(_get_or_404(store.classes, class_id, owner_id)))


@app.patch("/classes/{class_id}", response_model=SuccessResponse)
async def update_class(class_id: int, request: UpdateClassRequest,
                       owner_id: str = Depends(current_owner)) -> SuccessResponse:
    current = _get_or_404(store.classes, class_id, owner_id)
    changes = _with_clock_times(request.model_dump(exclude_unset=True), current)
    _update_or_404(store.classes, class_id, owner_id, changes)
    return SuccessResponse()


@app.delete("/classes/{class_id}", response_model=SuccessResponse)
async def delete_class(class_id: int, owner_id: str = Depends(current_owner)) -> SuccessResponse:
    """Delete a class. Tasks and exams pointing at it are left untouched."""
    _delete_or_404(store.classes, class_id, owner_id)
    return SuccessResponse()


# Tasks
@app.post("/tasks", response_model=PydanticTask)
async def create_task(request: CreateTaskRequest, owner_id: str = Depends(current_owner)) -> PydanticTask:
    task = store.tasks.create(owner_id, core.Task(id=0, **request.model_dump()))
    return PydanticTask(**asdict(task))


@app.get("/tasks", response_model=list[PydanticTask])
async def list_tasks(view: TaskView = "all", owner_id: str = Depends(current_owner)) -> list[PydanticTask]:
    """List the owner's tasks by due date; undated tasks come last.

    ``view`` selects a tab: all, pending (anything not completed) or completed.
    """
    return [PydanticTask(**asdict(task)) for task in filter_tasks(store.tasks.list(owner_id), view)]


@app.get("/tasks/{task_id}", response_model=PydanticTask)
async def get_task(task_id: int, owner_id: str = Depends(current_owner)) -> PydanticTask:
    return PydanticTask(**asdict(_get_or_404(store.tasks, task_id, owner_id)))


@app.patch("/tasks/{task_id}", response_model=SuccessResponse)
async def update_task(task_id: int, request: UpdateTaskRequest,
                      owner_id: str = Depends(current_owner)) -> SuccessResponse:
    _update_or_404(store.tasks, task_id, owner_id, request.model_dump(exclude_unset=True))
    return SuccessResponse()


@app.patch("/tasks/{task_id}/status", response_model=SuccessResponse)
async def set_task_status(task_id: int, request: TaskStatusRequest,
                          owner_id: str = Depends(current_owner)) -> SuccessResponse:
    """Move a task to another status (e.g. ticking it off)."""
    _update_or_404(store.tasks, task_id, owner_id, {"status": request.status})
    return SuccessResponse()


@app.delete("/tasks/{task_id}", response_model=SuccessResponse)
async def delete_task(task_id: int, owner_id: str = Depends(current_owner)) -> SuccessResponse:
    _delete_or_404(store.tasks, task_id, owner_id)
    return SuccessResponse()


# Exams
@app.post("/exams", response_model=PydanticExam)
async def create_exam(request: CreateExamRequest, owner_id: str = Depends(current_owner)) -> PydanticExam:
    exam = store.exams.create(owner_id, core.Exam(id=0, **request.model_dump()))
    return PydanticExam(**asdict(exam))


@app.get("/exams", response_model=list[PydanticExam])
async def list_exams(owner_id: str = Depends(current_owner)) -> list[PydanticExam]:
    return [PydanticExam(**asdict(exam)) for exam in store.exams.list(owner_id)]


@app.get("/exams/upcoming-count", response_model=UpcomingExamCountResponse)
async def upcoming_exam_count(
        days: int = Query(default=EXAM_BADGE_WINDOW_DAYS, ge=0),
        at: t.Optional[LocalDateTime] = None,
        owner_id: str = Depends(current_owner),
) -> UpcomingExamCountResponse:
    """Number of exams in the next ``days`` days, for the exam badge."""
    summary = compute_upcoming(at or datetime.now(), days, [], store.exams.list(owner_id))
    return UpcomingExamCountResponse(window_days=days, count=summary.upcoming_exam_count)


@app.get("/exams/{exam_id}", response_model=PydanticExam)
async def get_exam(exam_id: int, owner_id: str = Depends(current_owner)) -> PydanticExam:
    return PydanticExam(**asdict(_get_or_404(store.exams, exam_id, owner_id)))


@app.patch("/exams/{exam_id}", response_model=SuccessResponse)
async def update_exam(exam_id: int, request: UpdateExamRequest,
                      owner_id: str = Depends(current_owner)) -> SuccessResponse:
    _update_or_404(store.exams, exam_id, owner_id, request.model_dump(exclude_unset=True))
    return SuccessResponse()


@app.delete("/exams/{exam_id}", response_model=SuccessResponse)
async def delete_exam(exam_id: int, owner_id: str = Depends(current_owner)) -> SuccessResponse:
    _delete_or_404(store.exams, exam_id, owner_id)
    return SuccessResponse()


# Events
@app.post("/events", response_model=PydanticEvent)
async def create_event(request: CreateEventRequest, owner_id: str = Depends(current_owner)) -> PydanticEvent:
    event = store.events.create(owner_id, core.Event(id=0, **request.model_dump()))
    return PydanticEvent(**asdict(event))


@app.get("/events", response_model=list[PydanticEvent])
async def list_events(owner_id: str = Depends(current_owner)) -> list[PydanticEvent]:
    return [PydanticEvent(**asdict(event)) for event in store.events.list(owner_id)]


@app.get("/events/range", response_model=list[PydanticEvent])
async def list_events_in_range(start: LocalDateTime, end: LocalDateTime,
                               owner_id: str = Depends(current_owner)) -> list[PydanticEvent]:
    """Events starting between ``start`` and ``end``, both inclusive."""
    return [PydanticEvent(**asdict(event)) for event in store.list_events_between(owner_id, start, end)]


@app.get("/events/{event_id}", response_model=PydanticEvent)
async def get_event(event_id: int, owner_id: str = Depends(current_owner)) -> PydanticEvent:
    return PydanticEvent(**asdict(_get_or_404(store.events, event_id, owner_id)))


@app.patch("/events/{event_id}", response_model=SuccessResponse)
async def update_event(event_id: int, request: UpdateEventRequest,
                       owner_id: str = Depends(current_owner)) -> SuccessResponse:
    _update_or_404(store.events, event_id, owner_id, request.model_dump(exclude_unset=True))
    return SuccessResponse()


@app.delete("/events/{event_id}", response_model=SuccessResponse)
async def delete_event(event_id: int, owner_id: str = Depends(current_owner)) -> SuccessResponse:
    _delete_or_404(store.events, event_id, owner_id)
    return SuccessResponse()


# Derived views
@app.get("/timetable", response_model=TimetableResponse)
async def get_timetable(owner_id: str = Depends(current_owner)) -> TimetableResponse:
    """
    The weekly Mon-Fri grid.

    Every one of the 25 cells is listed. The second cell of a double period
    carries the same class with ``is_span_start`` false.
    """
    try:
        slots = store.classes.list(owner_id)
        grid = project_timetable(slots)
        cells = []
        for period, row in grid.rows():
            for day, cell in zip(core.WEEKDAYS, row):
                cells.append(TimetableCell(
                    day=day,
                    period=period,
                    slot=PydanticClassSlot(**asdict(cell.slot)) if cell else None,
                    is_span_start=cell.is_span_start if cell else False,
                ))
        return TimetableResponse(
            cells=cells,
            unscheduled=[PydanticClassSlot(**asdict(slot)) for slot in unscheduled(slots)],
        )

    except Exception as e:
        logger.exception("Timetable projection failed for owner %s", owner_id)
        raise HTTPException(status_code=500, detail=f"Error building timetable: {str(e)}")


@app.get("/timetable/now", response_model=PydanticPeriodState)
async def get_live_period(at: t.Optional[LocalDateTime] = None) -> PydanticPeriodState:
    """
    Which period is running at ``at`` (default: now).

    Clients poll this about once a minute.
    """
    state = resolve_live_period(at or datetime.now())
    return PydanticPeriodState(**asdict(state))


@app.get("/timetable/{day}/{period}", response_model=CellSelection)
async def select_cell(day: core.DayOfWeek, period: int = Path(ge=1, le=5),
                      owner_id: str = Depends(current_owner)) -> CellSelection:
    """
    The class to edit when a grid cell is picked.

    Only the starting cell of a class selects it; an empty cell or the second
    half of a double period returns no slot, meaning a new class goes there.
    """
    slot = project_timetable(store.classes.list(owner_id)).editable_slot_at(day, period)
    return CellSelection(
        day=day,
        period=period,
        slot=PydanticClassSlot(**asdict(slot)) if slot else None,
    )


@app.get("/calendar", response_model=list[PydanticCalendarItem])
async def get_calendar(owner_id: str = Depends(current_owner)) -> list[PydanticCalendarItem]:
    """Events, dated tasks and exams merged into calendar items, by start."""
    try:
        items = aggregate_calendar(
            store.events.list(owner_id), store.tasks.list(owner_id), store.exams.list(owner_id)
        )
        return [PydanticCalendarItem(**asdict(item)) for item in sort_by_start(items)]

    except Exception as e:
        logger.exception("Calendar aggregation failed for owner %s", owner_id)
        raise HTTPException(status_code=500, detail=f"Error building calendar: {str(e)}")


@app.get("/dashboard/stats", response_model=PydanticDashboardStats)
async def get_dashboard_stats(at: t.Optional[LocalDateTime] = None,
                              owner_id: str = Depends(current_owner)) -> PydanticDashboardStats:
    stats = dashboard_stats(
        at or datetime.now(),
        store.classes.list(owner_id),
        store.tasks.list(owner_id),
        store.exams.list(owner_id),
    )
    return PydanticDashboardStats(**asdict(stats))


@app.get("/dashboard/upcoming", response_model=PydanticUpcomingSummary)
async def get_upcoming(
        days: int = Query(default=DASHBOARD_WINDOW_DAYS, ge=0),
        at: t.Optional[LocalDateTime] = None,
        exam_limit: int = Query(default=UPCOMING_EXAM_LIMIT, ge=0),
        owner_id: str = Depends(current_owner),
) -> PydanticUpcomingSummary:
    """
    Tasks and exams coming up in the next ``days`` days (inclusive).

    At most ``exam_limit`` exams are listed; ``upcoming_exam_count`` counts them all.
    """
    summary = compute_upcoming(
        at or datetime.now(), days, store.tasks.list(owner_id), store.exams.list(owner_id),
        exam_limit=exam_limit,
    )
    return PydanticUpcomingSummary(**asdict(summary))


@app.get("/days/{day}", response_model=PydanticDayBucket)
async def get_day(day: date, owner_id: str = Depends(current_owner)) -> PydanticDayBucket:
    """Everything due or happening on one date."""
    bucket = bucket_by_day(
        day, store.tasks.list(owner_id), store.exams.list(owner_id), store.events.list(owner_id)
    )
    return _day_bucket_model(bucket)


@app.get("/months/{year}/{month}", response_model=list[MonthMarker])
async def get_month(year: int, month: int, owner_id: str = Depends(current_owner)) -> list[MonthMarker]:
    """Dot indicators for each day of a month."""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail=f"Invalid month: {month}")
    markers = month_markers(
        year, month, store.tasks.list(owner_id), store.exams.list(owner_id), store.events.list(owner_id)
    )
    return [
        MonthMarker(day=day, has_tasks=b.has_tasks, has_exams=b.has_exams, has_events=b.has_events)
        for day, b in markers.items()
    ]


def _day_bucket_model(bucket: core.DayBucket) -> PydanticDayBucket:
    """Convert a DayBucket, including its computed flags."""
    return PydanticDayBucket(
        **asdict(bucket),
        has_tasks=bucket.has_tasks,
        has_exams=bucket.has_exams,
        has_events=bucket.has_events,
    )


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=PLANNER_LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=PLANNER_SERVICE_PORT)
