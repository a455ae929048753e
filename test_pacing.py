from datetime import date

import pytest

from engine import PRACTICE_TASK, REVIEW_SUBJECT, REVIEW_TASK, STUDY_FREQUENCY
from studypace.models import WeakArea
from studypace.pacing import build_pacing_plan, generate_schedule, weekend_days

MONDAY = date(2024, 1, 1)
END_OF_MONTH = date(2024, 1, 31)


def areas(n):
    return [WeakArea(name=f"Area {i}", percentage=10 * i) for i in range(n)]


def test_weekend_days_in_january():
    days = weekend_days(MONDAY, END_OF_MONTH)
    assert days == [
        date(2024, 1, 6), date(2024, 1, 7),
        date(2024, 1, 13), date(2024, 1, 14),
        date(2024, 1, 20), date(2024, 1, 21),
        date(2024, 1, 27), date(2024, 1, 28),
    ]
    assert all(d.weekday() >= 5 for d in days)


def test_weekend_days_inclusive_bounds():
    assert weekend_days(date(2024, 1, 6), date(2024, 1, 7)) == [date(2024, 1, 6), date(2024, 1, 7)]


@pytest.mark.parametrize("exam_date", [None, MONDAY, date(2023, 12, 1)])
def test_no_upcoming_exam_gives_empty_schedule(exam_date):
    assert generate_schedule(exam_date, MONDAY, areas(3)) == []


def test_no_weak_areas_only_reviews():
    schedule = generate_schedule(END_OF_MONTH, MONDAY, [])
    assert [e.task for e in schedule] == [REVIEW_TASK, REVIEW_TASK]
    assert [e.date for e in schedule] == [date(2024, 1, 14), date(2024, 1, 28)]
    assert all(e.subdomain_name == REVIEW_SUBJECT for e in schedule)
    assert not any(e.task == PRACTICE_TASK for e in schedule)


def test_single_weak_area_is_not_cycled():
    schedule = generate_schedule(END_OF_MONTH, MONDAY, areas(1))
    practice = [e for e in schedule if e.task == PRACTICE_TASK]
    assert len(practice) == 1
    assert practice[0].date == date(2024, 1, 6)
    assert practice[0].subdomain_name == "Area 0"
    reviews = [e for e in schedule if e.task == REVIEW_TASK]
    assert [e.date for e in reviews] == [date(2024, 1, 14), date(2024, 1, 28)]


def test_allocation_order_and_review_on_same_slot():
    schedule = generate_schedule(END_OF_MONTH, MONDAY, areas(5))
    assert [(e.date.day, e.subdomain_name, e.task) for e in schedule] == [
        (6, "Area 0", PRACTICE_TASK),
        (7, "Area 1", PRACTICE_TASK),
        (13, "Area 2", PRACTICE_TASK),
        (14, "Area 3", PRACTICE_TASK),
        (14, REVIEW_SUBJECT, REVIEW_TASK),
        (20, "Area 4", PRACTICE_TASK),
        (28, REVIEW_SUBJECT, REVIEW_TASK),
    ]


def test_more_weak_areas_than_slots():
    schedule = generate_schedule(date(2024, 1, 7), MONDAY, areas(10))
    assert [e.subdomain_name for e in schedule] == ["Area 0", "Area 1"]


def test_custom_review_cadence():
    schedule = generate_schedule(END_OF_MONTH, MONDAY, [], review_every=2)
    assert len(schedule) == 4
    with pytest.raises(ValueError):
        generate_schedule(END_OF_MONTH, MONDAY, [], review_every=0)


def test_build_pacing_plan_details():
    plan = build_pacing_plan(END_OF_MONTH, MONDAY, areas(2))
    assert plan.study_frequency == STUDY_FREQUENCY
    assert len(plan.weekend_slots) == 8
    assert plan.weak_areas == tuple(areas(2))
    assert len(plan.entries) == 4

    empty = build_pacing_plan(None, MONDAY, areas(2))
    assert empty.weekend_slots == ()
    assert empty.entries == ()
