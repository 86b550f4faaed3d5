# -*- coding: utf-8 -*-
"""Fixed period table of the school day.

Persisted ``start_time``/``end_time`` strings on classes are derived from this
table, so the clock values must not change.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import time
import typing as t


@dataclass(frozen=True)
class Period:
    """One numbered class period with its clock span."""
    number: int
    start: time
    end: time

    @property
    def start_minute(self) -> int:
        return minute_of_day(self.start)

    @property
    def end_minute(self) -> int:
        return minute_of_day(self.end)

    def label(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


PERIODS: tuple[Period, ...] = (
    Period(1, time(8, 45), time(10, 15)),
    Period(2, time(10, 30), time(12, 0)),
    Period(3, time(13, 0), time(14, 30)),
    Period(4, time(14, 45), time(16, 15)),
    Period(5, time(16, 30), time(18, 0)),
)

PERIOD_NUMBERS: tuple[int, ...] = tuple(p.number for p in PERIODS)
FIRST_PERIOD = PERIOD_NUMBERS[0]
LAST_PERIOD = PERIOD_NUMBERS[-1]

_BY_NUMBER = {p.number: p for p in PERIODS}


def minute_of_day(value: time) -> int:
    """Converts a clock time to minutes from midnight."""
    return value.hour * 60 + value.minute


def get_period(period: int) -> Period:
    """Look up a period by number.

    :raises ValueError: If ``period`` is not in the table.
    """
    try:
        return _BY_NUMBER[period]
    except KeyError:
        raise ValueError(
            f"Period must be {FIRST_PERIOD}-{LAST_PERIOD}, got {period!r}"
        ) from None


def time_range_of(period: int) -> tuple[int, int]:
    """Returns ``(start_minute, end_minute)`` of a period."""
    p = get_period(period)
    return p.start_minute, p.end_minute


def spanned_periods(period: int, period_count: int = 1) -> list[int]:
    """Periods occupied by a class starting at ``period``.

    A double period starting at the last period has nowhere to continue, so
    only the starting period is returned.
    """
    spanned = [period]
    if period_count == 2 and period < LAST_PERIOD:
        spanned.append(period + 1)
    return spanned


def period_clock_span(period: int, period_count: int = 1) -> tuple[str, str]:
    """Clock strings ("HH:MM") stored as a class's start and end time."""
    spanned = spanned_periods(period, period_count)
    start = get_period(spanned[0]).start
    end = get_period(spanned[-1]).end
    return f"{start:%H:%M}", f"{end:%H:%M}"


def format_period_label(period: t.Optional[int], period_count: t.Optional[int] = 1) -> str:
    """Short label like "P3" or "P4-5"; empty for unscheduled classes."""
    if not period:
        return ""
    spanned = spanned_periods(period, period_count or 1)
    if len(spanned) == 2:
        return f"P{spanned[0]}-{spanned[1]}"
    return f"P{period}"
