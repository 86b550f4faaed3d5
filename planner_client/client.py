"""
HTTP client for the academic planner service.

Fetches the owner's entity lists (and a few server-side views) from the
planner REST service and converts the responses back into the dataclasses of
academic_planner.models, so callers can feed them straight into the
scheduling functions.
"""
from __future__ import annotations

import os
import typing as t
from datetime import date, datetime

import httpx

from academic_planner import models as core
from services.shared.models import (
    ClassSlot as PydanticClassSlot,
    DayBucket as PydanticDayBucket,
    Event as PydanticEvent,
    Exam as PydanticExam,
    PeriodState as PydanticPeriodState,
    Task as PydanticTask,
    UpcomingSummary as PydanticUpcomingSummary,
)


# Service URL - configurable via environment variable
PLANNER_SERVICE_URL = os.getenv("PLANNER_SERVICE_URL", "http://localhost:8004")

# Timeout settings for fast operations (in seconds)
STANDARD_TIMEOUT = 30.0  # 30 seconds for standard read operations


def _http_client() -> httpx.Client:
    return httpx.Client(timeout=STANDARD_TIMEOUT)


def _get(path: str, owner_id: t.Optional[str] = None,
         params: t.Optional[dict[str, t.Any]] = None, base_url: t.Optional[str] = None) -> t.Any:
    """
    GET a JSON document from the planner service.

    Transport and HTTP failures surface as RuntimeError with the status and
    body of the response.
    """
    headers = {"X-User-Id": owner_id} if owner_id else {}
    url = f"{base_url or PLANNER_SERVICE_URL}{path}"
    try:
        with _http_client() as client:
            response = client.get(url, headers=headers, params=params)
            response.raise_for_status()
        return response.json()

    except httpx.TimeoutException:
        raise RuntimeError(f"Request to {path} timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from planner service: {e.response.status_code} {e.response.text}")
    except httpx.HTTPError as e:
        raise RuntimeError(f"Error calling planner service: {str(e)}")


def list_classes(owner_id: str, base_url: t.Optional[str] = None) -> list[core.ClassSlot]:
    """List the owner's classes."""
    return [
        core.ClassSlot(**PydanticClassSlot(**data).model_dump())
        for data in _get("/classes", owner_id, base_url=base_url)
    ]


def list_tasks(owner_id: str, base_url: t.Optional[str] = None, view: str = "all") -> list[core.Task]:
    """List the owner's tasks; ``view`` is all, pending or completed."""
    return [
        core.Task(**PydanticTask(**data).model_dump())
        for data in _get("/tasks", owner_id, params={"view": view}, base_url=base_url)
    ]


def list_exams(owner_id: str, base_url: t.Optional[str] = None) -> list[core.Exam]:
    """List the owner's exams."""
    return [
        core.Exam(**PydanticExam(**data).model_dump())
        for data in _get("/exams", owner_id, base_url=base_url)
    ]


def list_events(owner_id: str, base_url: t.Optional[str] = None) -> list[core.Event]:
    """List the owner's calendar events."""
    return [
        core.Event(**PydanticEvent(**data).model_dump())
        for data in _get("/events", owner_id, base_url=base_url)
    ]


def list_events_between(owner_id: str, start: datetime, end: datetime,
                        base_url: t.Optional[str] = None) -> list[core.Event]:
    """List the owner's events starting within ``[start, end]``."""
    params = {"start": start.isoformat(), "end": end.isoformat()}
    return [
        core.Event(**PydanticEvent(**data).model_dump())
        for data in _get("/events/range", owner_id, params=params, base_url=base_url)
    ]


def get_live_period(at: t.Optional[datetime] = None, base_url: t.Optional[str] = None) -> core.PeriodState:
    """Ask the service which period is running."""
    params = {"at": at.isoformat()} if at else None
    state = PydanticPeriodState(**_get("/timetable/now", params=params, base_url=base_url))
    return core.PeriodState(**state.model_dump())


def get_upcoming(owner_id: str, days: int, at: t.Optional[datetime] = None,
                 base_url: t.Optional[str] = None) -> core.UpcomingSummary:
    """Upcoming tasks and exams as computed by the service."""
    params: dict[str, t.Any] = {"days": days}
    if at:
        params["at"] = at.isoformat()
    summary = PydanticUpcomingSummary(**_get("/dashboard/upcoming", owner_id, params=params, base_url=base_url))
    return core.UpcomingSummary(
        window_days=summary.window_days,
        pending_task_count=summary.pending_task_count,
        upcoming_exam_count=summary.upcoming_exam_count,
        upcoming_exams=[core.Exam(**exam.model_dump()) for exam in summary.upcoming_exams],
        upcoming_tasks=[core.Task(**task.model_dump()) for task in summary.upcoming_tasks],
    )


def get_day(owner_id: str, day: date, base_url: t.Optional[str] = None) -> core.DayBucket:
    """Items on one date as computed by the service."""
    bucket = PydanticDayBucket(**_get(f"/days/{day.isoformat()}", owner_id, base_url=base_url))
    return core.DayBucket(
        day=bucket.day,
        tasks=[core.Task(**task.model_dump()) for task in bucket.tasks],
        exams=[core.Exam(**exam.model_dump()) for exam in bucket.exams],
        events=[core.Event(**event.model_dump()) for event in bucket.events],
    )
