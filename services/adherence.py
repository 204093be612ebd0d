"""
Adherence & streak calculator.

Pure functions over two in-memory collections (medications and dose events)
that derive today's schedule with status, the 7-day adherence series and the
current consecutive-day streak. Nothing here performs I/O or mutates its
inputs; the same inputs always produce the same outputs.

Medications are expected to expose ``id``, ``name``, ``dosage``, ``unit``,
``times`` (ordered ``HH:MM`` strings), ``start_date`` and ``end_date``. Dose
events expose ``medication_id``, ``scheduled_time``, ``date`` and ``status``.
Both ORM rows and the pydantic read schemas satisfy this.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Set

from schemas.report import (
    AdherencePoint,
    AdherenceReport,
    ScheduleEntry,
    SlotStatus,
    TodaySchedule,
)

SERIES_DAYS = 7

_TAKEN = "taken"
_MISSED = "missed"


def _status_value(event) -> Optional[str]:
    status = getattr(event, "status", None)
    return getattr(status, "value", status)


def _is_taken(event) -> bool:
    return _status_value(event) == _TAKEN


def _unit_value(unit):
    value = getattr(unit, "value", unit)
    return value if isinstance(value, str) else None


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # half-up rounding
    return math.floor(part * 100 / whole + 0.5)


def is_active_on(medication, day: date) -> bool:
    """True when ``day`` falls inside the medication's [start, end] window."""
    start = getattr(medication, "start_date", None)
    end = getattr(medication, "end_date", None)
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def daily_slot_count(
    medications: Iterable,
    day: Optional[date] = None,
    respect_dates: bool = False,
) -> int:
    """Number of reminder-time slots per day across ``medications``."""
    return sum(
        len(med.times or ())
        for med in medications
        if not respect_dates or day is None or is_active_on(med, day)
    )


def todays_schedule(
    medications: Sequence,
    dose_events: Sequence,
    today: date,
    respect_dates: bool = False,
) -> TodaySchedule:
    """Expand medications into today's slots and annotate each with its status."""
    taken: Set[tuple] = set()
    missed: Set[tuple] = set()
    for event in dose_events:
        if event.date != today:
            continue
        key = (event.medication_id, event.scheduled_time)
        status = _status_value(event)
        if status == _TAKEN:
            taken.add(key)
        elif status == _MISSED:
            missed.add(key)

    entries: List[ScheduleEntry] = []
    for med in medications:
        if respect_dates and not is_active_on(med, today):
            continue
        for scheduled_time in med.times or ():
            key = (med.id, scheduled_time)
            if key in taken:
                status = SlotStatus.TAKEN
            elif key in missed:
                status = SlotStatus.MISSED
            else:
                status = SlotStatus.PENDING
            entries.append(
                ScheduleEntry(
                    medication_id=med.id,
                    name=med.name or "",
                    dosage=med.dosage,
                    unit=_unit_value(med.unit),
                    scheduled_time=scheduled_time,
                    status=status,
                )
            )

    # zero-padded HH:MM sorts correctly as plain strings; sort is stable
    entries.sort(key=lambda e: e.scheduled_time)

    total = len(entries)
    taken_count = sum(1 for e in entries if e.status == SlotStatus.TAKEN)
    return TodaySchedule(
        date=today,
        entries=entries,
        total_count=total,
        taken_count=taken_count,
        progress=_percent(taken_count, total),
        all_taken=total > 0 and taken_count == total,
    )


def adherence_series(
    medications: Sequence,
    dose_events: Sequence,
    today: date,
    days: int = SERIES_DAYS,
    respect_dates: bool = False,
) -> List[AdherencePoint]:
    """Per-day adherence for ``today`` and the preceding days, oldest first.

    The denominator is the total slot count across all medications, computed
    once, unless ``respect_dates`` asks for a per-day count of the medications
    whose date window covers that day.
    """
    scheduled_all = daily_slot_count(medications)

    taken_by_day: dict = {}
    for event in dose_events:
        if _is_taken(event):
            taken_by_day[event.date] = taken_by_day.get(event.date, 0) + 1

    points: List[AdherencePoint] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        if respect_dates:
            scheduled = daily_slot_count(medications, day, respect_dates=True)
        else:
            scheduled = scheduled_all
        taken = taken_by_day.get(day, 0)
        points.append(
            AdherencePoint(
                date=day,
                label=date_label(day),
                adherence=_percent(taken, scheduled),
                taken=taken,
                scheduled=scheduled,
            )
        )
    return points


def current_streak(dose_events: Sequence, today: date) -> int:
    """Consecutive days with at least one taken dose, counted back from today.

    If today has nothing yet the count starts from yesterday; if yesterday
    has nothing either the streak is broken.
    """
    taken_dates = {event.date for event in dose_events if _is_taken(event)}

    yesterday = today - timedelta(days=1)
    if today in taken_dates:
        cursor = today
    elif yesterday in taken_dates:
        cursor = yesterday
    else:
        return 0

    streak = 0
    while cursor in taken_dates:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def build_report(
    medications: Sequence,
    dose_events: Sequence,
    today: date,
    respect_dates: bool = False,
) -> AdherenceReport:
    """Everything the dashboard and reports views render, in one pass."""
    series = adherence_series(medications, dose_events, today, respect_dates=respect_dates)
    daily_doses = daily_slot_count(medications)
    window_taken = sum(point.taken for point in series)
    return AdherenceReport(
        today=todays_schedule(medications, dose_events, today, respect_dates=respect_dates),
        adherence=series,
        streak=current_streak(dose_events, today),
        active_medications=len(medications),
        daily_doses=daily_doses,
        overall_adherence=_percent(window_taken, daily_doses * SERIES_DAYS),
    )


def date_label(day: date) -> str:
    """Short chart label, e.g. ``Oct 18``."""
    return f"{day.strftime('%b')} {day.day}"
