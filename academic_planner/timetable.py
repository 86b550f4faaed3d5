# -*- coding: utf-8 -*-
"""Weekly timetable projection (Mon-Fri x periods 1-5)."""
from __future__ import annotations

import typing as t

from academic_planner.models import WEEKDAYS, ClassSlot, TimetableCell
from academic_planner.periods import PERIOD_NUMBERS, spanned_periods


class TimetableGrid:
    """Grid of optional cells keyed by (day, period).

    A double period puts the *same* ClassSlot in two cells; the second one is
    marked ``is_span_start=False`` so renderers can merge it into one block.
    """

    def __init__(self) -> None:
        self._cells: dict[tuple[str, int], t.Optional[TimetableCell]] = {
            (day, period): None for day in WEEKDAYS for period in PERIOD_NUMBERS
        }

    def __contains__(self, key: tuple[str, int]) -> bool:
        return key in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def _place(self, day: str, period: int, cell: TimetableCell) -> None:
        self._cells[(day, period)] = cell

    def cell(self, day: str, period: int) -> t.Optional[TimetableCell]:
        return self._cells.get((day, period))

    def slot_at(self, day: str, period: int) -> t.Optional[ClassSlot]:
        cell = self.cell(day, period)
        return cell.slot if cell else None

    def is_continuation(self, day: str, period: int) -> bool:
        """True when the cell continues the double period above it."""
        cell = self.cell(day, period)
        return cell is not None and not cell.is_span_start

    def editable_slot_at(self, day: str, period: int) -> t.Optional[ClassSlot]:
        """Slot to edit when a cell is picked.

        Picking a continuation cell yields None (a new class goes there),
        matching the slot's own period only.
        """
        slot = self.slot_at(day, period)
        if slot is not None and slot.period == period:
            return slot
        return None

    def rows(self) -> t.Iterator[tuple[int, list[t.Optional[TimetableCell]]]]:
        """Period-major iteration: ``(period, [cell for mon..fri])``."""
        for period in PERIOD_NUMBERS:
            yield period, [self._cells[(day, period)] for day in WEEKDAYS]

    def occupied(self) -> dict[tuple[str, int], TimetableCell]:
        return {key: cell for key, cell in self._cells.items() if cell is not None}


def is_projectable(slot: ClassSlot) -> bool:
    """Whether a slot has a place in the visible weekday grid."""
    return bool(slot.day_of_week and slot.period) and slot.day_of_week in WEEKDAYS


def project_timetable(slots: t.Iterable[ClassSlot]) -> TimetableGrid:
    """Projects class slots onto the Mon-Fri timetable grid.

    Unscheduled and weekend slots are skipped. Later slots overwrite earlier
    ones on the same cell; overlap detection is not done here.

    :param slots: The classes to place.
    :return: A freshly built TimetableGrid.
    """
    grid = TimetableGrid()
    for slot in slots:
        if not is_projectable(slot):
            continue
        spanned = spanned_periods(slot.period, slot.period_count)
        grid._place(slot.day_of_week, spanned[0], TimetableCell(slot=slot))
        for period in spanned[1:]:
            grid._place(slot.day_of_week, period, TimetableCell(slot=slot, is_span_start=False))
    return grid


def unscheduled(slots: t.Iterable[ClassSlot]) -> list[ClassSlot]:
    """Slots that exist but do not appear in the grid."""
    return [slot for slot in slots if not is_projectable(slot)]
