# -*- coding: utf-8 -*-
"""Tests for the planner command line."""
from datetime import date, datetime

import pytest
from click.testing import CliRunner
from rich.console import Console

from academic_planner.models import ClassSlot, DayBucket, Event, Exam, Task
from planner_cli import run
from planner_cli.run import cli, create_day_table, format_datetime_human, truncate_title


@pytest.fixture
def planner_data(monkeypatch):
    """Serve a fixed data set instead of calling the service."""
    classes = [
        ClassSlot(id=1, name="Chemistry", day_of_week="monday", period=4, period_count=2),
        ClassSlot(id=2, name="Reading group"),
    ]
    tasks = [
        Task(id=1, title="Essay", due_date=datetime(2025, 1, 12, 9, 0)),
        Task(id=2, title="Lab report", status="in_progress"),
    ]
    exams = [Exam(id=1, title="Midterm", exam_date=datetime(2025, 1, 20, 9, 0), room="B12")]
    events = [Event(id=1, title="Club night", start_date=datetime(2025, 1, 12, 18, 0))]

    monkeypatch.setattr(run.client, "list_classes", lambda owner_id, base_url=None: classes)
    monkeypatch.setattr(run.client, "list_tasks", lambda owner_id, base_url=None: tasks)
    monkeypatch.setattr(run.client, "list_exams", lambda owner_id, base_url=None: exams)
    monkeypatch.setattr(run.client, "list_events", lambda owner_id, base_url=None: events)


def invoke(*args: str):
    return CliRunner().invoke(cli, ["--user", "alice", *args])


def test_format_helpers() -> None:
    """Test datetime formatting and title truncation."""
    assert format_datetime_human(datetime(2025, 1, 12, 9, 5)) == "01/12 09:05"
    assert format_datetime_human(None) == "—"
    assert truncate_title("short") == "short"
    assert truncate_title("x" * 50) == "x" * 42 + "..."


def test_user_is_required() -> None:
    """Test that commands fail without an owner id."""
    result = CliRunner().invoke(cli, ["now"], env={"PLANNER_USER": None})
    assert result.exit_code != 0


@pytest.mark.parametrize(("at", "expected"), [
    ("2025-01-13T09:00", "Period 1 in progress"),
    ("2025-01-13T10:20", "Break after period 1"),
    ("2025-01-11T09:00", "Outside class hours"),
])
def test_now(at: str, expected: str) -> None:
    """Test that the live period is described for a given instant."""
    result = invoke("now", "--at", at)

    assert result.exit_code == 0
    assert expected in result.output


def test_now_rejects_bad_datetime() -> None:
    """Test that an unparseable --at is a usage error."""
    result = invoke("now", "--at", "tomorrow-ish")
    assert result.exit_code != 0
    assert "Invalid datetime" in result.output


def test_timetable_lists_unscheduled_classes(planner_data) -> None:
    """Test that classes off the grid are listed below it."""
    result = invoke("timetable", "--at", "2025-01-13T15:00")

    assert result.exit_code == 0
    assert "Period 4 in progress" in result.output
    assert "Reading group" in result.output
    assert "unscheduled" in result.output


def test_upcoming(planner_data) -> None:
    """Test that pending count and exam badge are shown."""
    result = invoke("upcoming", "--at", "2025-01-10T00:00")

    assert result.exit_code == 0
    assert "Pending tasks: 2" in result.output
    assert "Exams in the next 14 days: 1" in result.output
    assert "Essay" in result.output


def test_upcoming_empty_window(planner_data) -> None:
    """Test the message shown when nothing is due."""
    result = invoke("upcoming", "--at", "2025-03-01T00:00")

    assert result.exit_code == 0
    assert "Nothing due" in result.output


def test_day(planner_data) -> None:
    """Test that tasks and events of a day are listed."""
    result = invoke("day", "2025-01-12")

    assert result.exit_code == 0
    assert "Essay" in result.output
    assert "Club night" in result.output


def test_empty_day(planner_data) -> None:
    """Test the message shown for a day with nothing on it."""
    result = invoke("day", "2025-01-13")
    assert "Nothing on 2025-01-13" in result.output


def test_calendar(planner_data) -> None:
    """Test that the month view lists items and marks days."""
    result = invoke("calendar", "--month", "2025-01")

    assert result.exit_code == 0
    assert "Midterm" in result.output
    assert "January 2025" in result.output


def test_service_errors_exit_nonzero(monkeypatch) -> None:
    """Test that service failures are reported and exit with status 1."""
    def unavailable(owner_id, base_url=None):
        raise RuntimeError("Error calling planner service: connection refused")

    monkeypatch.setattr(run.client, "list_tasks", unavailable)

    result = invoke("upcoming")

    assert result.exit_code == 1
    assert "connection refused" in result.output


def test_day_marks_past_exams(planner_data) -> None:
    """Test that an exam that has already started is marked as past."""
    result = invoke("day", "2025-01-20")

    assert result.exit_code == 0
    assert "Midterm" in result.output
    assert "past" in result.output


def test_day_table_leaves_future_exams_unmarked() -> None:
    """Test the past marker against an explicit clock."""
    exam = Exam(id=1, title="Midterm", exam_date=datetime(2025, 1, 20, 9, 0), room="B12")
    bucket = DayBucket(day=date(2025, 1, 20), exams=[exam])

    def rendered(now: datetime) -> str:
        console = Console(width=120, record=True)
        console.print(create_day_table(bucket, now))
        return console.export_text()

    assert "past" not in rendered(datetime(2025, 1, 20, 8, 59))
    assert "B12 · past" in rendered(datetime(2025, 1, 20, 9, 1))
