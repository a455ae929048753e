"""
Pacing schedule: weak areas mapped onto the weekend days before the exam.

Each weekend slot gets at most one practice entry, taken from the weak-area list
in order, and every REVIEW_EVERY_N_SLOTS-th slot also gets a review entry.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from engine import (
    PRACTICE_TASK,
    REVIEW_EVERY_N_SLOTS,
    REVIEW_SUBJECT,
    REVIEW_TASK,
    STUDY_FREQUENCY,
)
from studypace.models import PacingPlan, PacingScheduleEntry, WeakArea

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def weekend_days(start: date, end: date) -> List[date]:
    """Every Saturday and Sunday from start to end inclusive, in order."""
    days = []
    current = start
    while current <= end:
        if current.weekday() in (SATURDAY, SUNDAY):
            days.append(current)
        current += timedelta(days=1)
    return days


def generate_schedule(
    exam_date: Optional[date],
    today: date,
    weak_areas: Sequence[WeakArea],
    review_every: int = REVIEW_EVERY_N_SLOTS,
) -> List[PacingScheduleEntry]:
    """
    Allocate weak areas to weekend slots between today and the exam date.

    No exam date, or one not after today, gives an empty schedule. Once every
    weak area has been placed no further practice entries are produced; the
    list is not cycled. Review entries keep firing every `review_every` slots.
    """
    if review_every < 1:
        raise ValueError("review_every must be at least 1")
    if exam_date is None or exam_date <= today:
        logger.info("No upcoming exam date; schedule is empty")
        return []

    slots = weekend_days(today, exam_date)
    schedule = []
    allocation_index = 0
    buffer_counter = 0

    for slot in slots:
        if allocation_index < len(weak_areas):
            area = weak_areas[allocation_index % len(weak_areas)]
            schedule.append(PacingScheduleEntry(date=slot, subdomain_name=area.name, task=PRACTICE_TASK))
            allocation_index += 1
        buffer_counter += 1
        if buffer_counter == review_every:
            schedule.append(PacingScheduleEntry(date=slot, subdomain_name=REVIEW_SUBJECT, task=REVIEW_TASK))
            buffer_counter = 0

    logger.debug(
        f"Scheduled {allocation_index}/{len(weak_areas)} weak areas over {len(slots)} weekend slots"
    )
    return schedule


def build_pacing_plan(
    exam_date: Optional[date],
    today: date,
    weak_areas: Sequence[WeakArea],
    review_every: int = REVIEW_EVERY_N_SLOTS,
) -> PacingPlan:
    """Schedule plus the details shown alongside it."""
    if exam_date is None or exam_date <= today:
        slots = []
    else:
        slots = weekend_days(today, exam_date)
    return PacingPlan(
        today=today,
        exam_date=exam_date,
        study_frequency=STUDY_FREQUENCY,
        weekend_slots=tuple(slots),
        weak_areas=tuple(weak_areas),
        entries=tuple(generate_schedule(exam_date, today, weak_areas, review_every=review_every)),
    )
