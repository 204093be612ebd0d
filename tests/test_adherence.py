from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from models.dose_event import DoseStatus
from schemas.dose_event import DoseEventRead
from schemas.medication import MedicationRead
from schemas.report import SlotStatus
from services import adherence

TODAY = date(2026, 10, 18)


def med(id, times, name=None, start=date(2026, 1, 1), end=None):
    return MedicationRead(
        id=id,
        user_id=1,
        name=name or f"Med {id}",
        dosage=5,
        unit="mg",
        times=times,
        start_date=start,
        end_date=end,
    )


_ids = iter(range(1, 10_000))


def dose(medication_id, scheduled_time, day, status=DoseStatus.TAKEN):
    return DoseEventRead(
        id=next(_ids),
        medication_id=medication_id,
        scheduled_time=scheduled_time,
        date=day,
        status=status,
    )


# -- today's schedule -------------------------------------------------------

def test_pending_entries_in_time_order():
    schedule = adherence.todays_schedule([med(1, ["08:00", "20:00"])], [], TODAY)

    assert [e.scheduled_time for e in schedule.entries] == ["08:00", "20:00"]
    assert all(e.status == SlotStatus.PENDING for e in schedule.entries)
    assert schedule.total_count == 2
    assert schedule.taken_count == 0
    assert schedule.progress == 0
    assert schedule.all_taken is False


def test_taken_slot_sets_progress():
    schedule = adherence.todays_schedule(
        [med(1, ["08:00", "20:00"])], [dose(1, "08:00", TODAY)], TODAY
    )

    assert [e.status for e in schedule.entries] == [SlotStatus.TAKEN, SlotStatus.PENDING]
    assert schedule.taken_count == 1
    assert schedule.progress == 50


def test_missed_slot_and_taken_wins_over_missed():
    events = [
        dose(1, "08:00", TODAY, DoseStatus.MISSED),
        dose(1, "20:00", TODAY, DoseStatus.MISSED),
        dose(1, "20:00", TODAY, DoseStatus.TAKEN),
    ]
    schedule = adherence.todays_schedule([med(1, ["08:00", "20:00"])], events, TODAY)

    assert [e.status for e in schedule.entries] == [SlotStatus.MISSED, SlotStatus.TAKEN]


def test_events_from_other_days_are_ignored_for_today():
    events = [dose(1, "08:00", TODAY - timedelta(days=1))]
    schedule = adherence.todays_schedule([med(1, ["08:00"])], events, TODAY)

    assert schedule.entries[0].status == SlotStatus.PENDING


def test_ties_keep_medication_order():
    meds = [med(1, ["20:00", "08:00"], name="B"), med(2, ["08:00"], name="A")]
    schedule = adherence.todays_schedule(meds, [], TODAY)

    assert [(e.scheduled_time, e.name) for e in schedule.entries] == [
        ("08:00", "B"),
        ("08:00", "A"),
        ("20:00", "B"),
    ]


def test_all_taken():
    meds = [med(1, ["08:00"]), med(2, ["09:30"])]
    events = [dose(1, "08:00", TODAY), dose(2, "09:30", TODAY)]
    schedule = adherence.todays_schedule(meds, events, TODAY)

    assert schedule.all_taken is True
    assert schedule.progress == 100


def test_progress_rounds_half_up():
    meds = [med(1, ["08:00", "12:00", "16:00"])]
    one = adherence.todays_schedule(meds, [dose(1, "08:00", TODAY)], TODAY)
    two = adherence.todays_schedule(
        meds, [dose(1, "08:00", TODAY), dose(1, "12:00", TODAY)], TODAY
    )

    assert one.progress == 33
    assert two.progress == 67
    assert adherence._percent(1, 8) == 13
    assert adherence._percent(5, 8) == 63


def test_schedule_entry_count_equals_total_slots():
    meds = [med(1, ["08:00", "20:00"]), med(2, ["07:00"]), med(3, ["06:00", "12:00", "18:00"])]
    schedule = adherence.todays_schedule(meds, [], TODAY)

    assert schedule.total_count == adherence.daily_slot_count(meds) == 6


# -- adherence series -------------------------------------------------------

def test_series_covers_seven_days_oldest_first():
    series = adherence.adherence_series([med(1, ["08:00"])], [], TODAY)

    assert len(series) == 7
    assert series[0].date == date(2026, 10, 12)
    assert series[-1].date == TODAY
    assert series[-1].label == "Oct 18"
    assert series[0].label == "Oct 12"


def test_historical_day_adherence():
    meds = [med(1, ["08:00", "20:00"]), med(2, ["09:00", "21:00"])]
    day = TODAY - timedelta(days=3)
    events = [dose(1, "08:00", day), dose(2, "09:00", day)]

    series = adherence.adherence_series(meds, events, TODAY)
    point = next(p for p in series if p.date == day)

    assert point.scheduled == 4
    assert point.taken == 2
    assert point.adherence == 50


def test_missed_events_do_not_count_as_taken():
    events = [dose(1, "08:00", TODAY, DoseStatus.MISSED)]
    series = adherence.adherence_series([med(1, ["08:00"])], events, TODAY)

    assert series[-1].taken == 0
    assert series[-1].adherence == 0


def test_global_denominator_ignores_medication_dates():
    meds = [med(1, ["08:00"]), med(2, ["09:00"], start=TODAY)]
    events = [dose(1, "08:00", TODAY - timedelta(days=2))]

    series = adherence.adherence_series(meds, events, TODAY)

    assert all(p.scheduled == 2 for p in series)
    assert series[-3].adherence == 50


def test_respect_dates_uses_per_day_denominator():
    meds = [med(1, ["08:00"]), med(2, ["09:00"], start=TODAY)]
    events = [dose(1, "08:00", TODAY - timedelta(days=2))]

    series = adherence.adherence_series(meds, events, TODAY, respect_dates=True)

    assert [p.scheduled for p in series] == [1, 1, 1, 1, 1, 1, 2]
    assert series[-3].adherence == 100


def test_respect_dates_filters_todays_schedule():
    meds = [med(1, ["08:00"], end=TODAY - timedelta(days=1)), med(2, ["09:00"])]

    schedule = adherence.todays_schedule(meds, [], TODAY, respect_dates=True)

    assert [e.medication_id for e in schedule.entries] == [2]


def test_adherence_can_exceed_hundred_when_events_outnumber_slots():
    meds = [med(1, ["08:00"])]
    events = [dose(1, "08:00", TODAY), dose(2, "09:00", TODAY)]

    series = adherence.adherence_series(meds, events, TODAY)

    assert series[-1].adherence == 200


# -- streak -----------------------------------------------------------------

def test_streak_today_and_yesterday():
    events = [dose(1, "08:00", TODAY), dose(1, "08:00", TODAY - timedelta(days=1))]

    assert adherence.current_streak(events, TODAY) == 2


def test_streak_starts_from_yesterday_when_today_is_empty():
    events = [
        dose(1, "08:00", TODAY - timedelta(days=1)),
        dose(1, "08:00", TODAY - timedelta(days=2)),
        dose(1, "08:00", TODAY - timedelta(days=4)),
    ]

    assert adherence.current_streak(events, TODAY) == 2


def test_streak_broken_when_today_and_yesterday_are_empty():
    events = [dose(1, "08:00", TODAY - timedelta(days=3))]

    assert adherence.current_streak(events, TODAY) == 0


def test_streak_ignores_missed_and_counts_dates_once():
    events = [
        dose(1, "08:00", TODAY),
        dose(1, "20:00", TODAY),
        dose(1, "08:00", TODAY - timedelta(days=1), DoseStatus.MISSED),
    ]

    assert adherence.current_streak(events, TODAY) == 1


# -- empty input and the full report ---------------------------------------

def test_empty_inputs():
    report = adherence.build_report([], [], TODAY)

    assert report.today.entries == []
    assert report.today.progress == 0
    assert report.today.all_taken is False
    assert [p.adherence for p in report.adherence] == [0] * 7
    assert report.streak == 0
    assert report.daily_doses == 0
    assert report.overall_adherence == 0


def test_report_summary_figures():
    meds = [med(1, ["08:00", "20:00"]), med(2, ["09:00"])]
    events = [
        dose(1, "08:00", TODAY),
        dose(2, "09:00", TODAY),
        dose(1, "08:00", TODAY - timedelta(days=1)),
        # outside the 7-day window
        dose(1, "08:00", TODAY - timedelta(days=10)),
    ]

    report = adherence.build_report(meds, events, TODAY)

    assert report.active_medications == 2
    assert report.daily_doses == 3
    assert report.streak == 2
    assert report.today.taken_count == 2
    # 3 taken of 21 scheduled
    assert report.overall_adherence == 14


def test_report_is_deterministic_and_leaves_inputs_alone():
    meds = [med(1, ["20:00", "08:00"])]
    events = [dose(1, "08:00", TODAY)]
    before = [m.model_copy(deep=True) for m in meds]

    first = adherence.build_report(meds, events, TODAY)
    second = adherence.build_report(meds, events, TODAY)

    assert first == second
    assert meds == before
    assert meds[0].times == ["20:00", "08:00"]


@pytest.mark.parametrize(
    "day, label",
    [(date(2026, 1, 5), "Jan 5"), (date(2026, 10, 18), "Oct 18"), (date(2026, 12, 31), "Dec 31")],
)
def test_date_label(day, label):
    assert adherence.date_label(day) == label


def test_schedule_tolerates_incomplete_medications():
    odd = SimpleNamespace(
        id=7, name=None, dosage=None, unit="drops", times=["10:00"], start_date=None, end_date=None
    )
    no_times = SimpleNamespace(
        id=8, name="Empty", dosage=1, unit=None, times=None, start_date=None, end_date=None
    )

    report = adherence.build_report([odd, no_times], [dose(7, "10:00", TODAY)], TODAY)

    entry = report.today.entries[0]
    assert (entry.name, entry.unit, entry.status) == ("", "drops", SlotStatus.TAKEN)
    assert report.today.total_count == 1
    assert report.daily_doses == 1
