"""Scheduling logic of the academic planner: timetable, live period, calendar and windows."""

from .calendar_items import aggregate_calendar
from .day_bucket import bucket_by_day
from .live_period import resolve_live_period
from .periods import time_range_of
from .timetable import project_timetable
from .upcoming import compute_upcoming

__all__ = [
    "aggregate_calendar",
    "bucket_by_day",
    "compute_upcoming",
    "project_timetable",
    "resolve_live_period",
    "time_range_of",
]
