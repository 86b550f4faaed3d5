# -*- coding: utf-8 -*-
"""Resolves which period the wall clock is in.

There is no push notification: callers re-resolve every
``POLL_INTERVAL_SECONDS`` and re-render.
"""
from __future__ import annotations

from datetime import datetime
import logging
import typing as t

from academic_planner.models import WEEKDAYS, PeriodState
from academic_planner.periods import PERIODS

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 60


def weekday_index(now: datetime) -> t.Optional[int]:
    """0 (Mon) .. 4 (Fri), or None on weekends."""
    index = now.weekday()
    return index if index < len(WEEKDAYS) else None


def resolve_live_period(now: datetime) -> PeriodState:
    """Classifies ``now`` as during a period, between two, or outside hours.

    Periods are start-inclusive and end-exclusive; a gap runs from the end of
    one period up to (excluding) the start of the next. Weekends are always
    outside.

    :param now: Local naive instant.
    :return: A PeriodState.
    """
    day_index = weekday_index(now)
    if day_index is None:
        return PeriodState.outside()

    now_minutes = now.hour * 60 + now.minute

    for period in PERIODS:
        if period.start_minute <= now_minutes < period.end_minute:
            return PeriodState.during(period.number, day_index=day_index)

    for current, following in zip(PERIODS, PERIODS[1:]):
        if current.end_minute <= now_minutes < following.start_minute:
            return PeriodState.between(current.number, following.number, day_index=day_index)

    logger.debug("%s is outside class hours", now.isoformat())
    return PeriodState.outside(day_index=day_index)


def today_column(now: datetime) -> int:
    """Timetable column to show for "today"; weekends show Monday."""
    day_index = weekday_index(now)
    return 0 if day_index is None else day_index
