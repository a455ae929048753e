"""
Performance aggregation: category -> subcategory accuracy rollup for analytics display.

The rollup is rebuilt from scratch on every call. Progress rows seed every known
subcategory (so it shows up with 0 attempts), then attempts are folded in
chronological order so the last fold wins as the most recent attempt.
"""
import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from engine import RED_BELOW, TIME_RANGE_DAYS, TIME_RANGES, TREND_DAYS, YELLOW_BELOW
from studypace.models import (
    AttemptRecord,
    CategoryStats,
    DailyAccuracy,
    SubdomainProgressRecord,
    SubdomainStats,
    WeakArea,
    parse_timestamp,
)
from studypace.taxonomy import accept_category, normalize_category, normalize_subcategory

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def percentage(correct: int, total: int) -> int:
    """Whole percent, rounded half-up; 0 when there is nothing to divide."""
    if total <= 0:
        return 0
    pct = Decimal(correct) * 100 / Decimal(total)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def accuracy_color(pct: float) -> str:
    if pct < RED_BELOW:
        return "red"
    elif pct < YELLOW_BELOW:
        return "yellow"
    return "green"


def since_for_range(time_range: str, now: Optional[datetime] = None) -> datetime:
    """
    Lower bound on created_at for a named time range.

    daily   -> local midnight of `now`
    weekly  -> now - 7 days
    monthly -> now - 30 days
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range {time_range!r}; expected one of {', '.join(TIME_RANGES)}")
    now = now or datetime.now().astimezone()
    if time_range == "daily":
        return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    return now - timedelta(days=TIME_RANGE_DAYS[time_range])


def _new_category(name: str) -> Dict:
    return {"name": name, "total_correct": 0, "total_attempts": 0, "subdomains": {}}


def _new_subdomain(name: str) -> Dict:
    return {"name": name, "correct": 0, "total": 0, "last_attempt": None}


def _seed(progress: Iterable[SubdomainProgressRecord], strict: bool) -> Dict[str, Dict]:
    categories: Dict[str, Dict] = {}
    for record in progress:
        cat_name = accept_category(record.main_category, strict=strict)
        if cat_name is None:
            continue
        sub_name = normalize_subcategory(record.subcategory)
        category = categories.setdefault(cat_name, _new_category(cat_name))
        category["subdomains"].setdefault(sub_name, _new_subdomain(sub_name))
    return categories


def _fold(categories: Dict[str, Dict], attempts: Iterable[AttemptRecord], strict: bool) -> int:
    folded = 0
    # Stable: attempts sharing a timestamp keep their received order.
    # Naive timestamps are read as UTC so they sort alongside aware ones.
    timed = [(parse_timestamp(a.created_at), a) for a in attempts]
    timed.sort(key=lambda pair: pair[0] or _EPOCH)
    for created_at, attempt in timed:
        cat_name = accept_category(attempt.main_category, strict=strict)
        if cat_name is None:
            continue
        sub_name = normalize_subcategory(attempt.subcategory)
        category = categories.setdefault(cat_name, _new_category(cat_name))
        subdomain = category["subdomains"].setdefault(sub_name, _new_subdomain(sub_name))

        category["total_attempts"] += 1
        subdomain["total"] += 1
        if attempt.is_correct:
            category["total_correct"] += 1
            subdomain["correct"] += 1
        subdomain["last_attempt"] = created_at
        folded += 1
    return folded


def aggregate_performance(
    attempts: Iterable[AttemptRecord],
    progress: Iterable[SubdomainProgressRecord],
    strict_taxonomy: bool = True,
) -> List[CategoryStats]:
    """
    Build the two-level accuracy rollup.

    Args:
        attempts: The user's quiz attempts (any order)
        progress: The user's subdomain_progress rows, used to seed zero-attempt subcategories
        strict_taxonomy: Drop records whose category is not one of the nine domains

    Returns:
        Categories sorted by percentage descending, each with its subcategories
        sorted by percentage descending (ties keep first-seen order).
    """
    categories = _seed(progress, strict_taxonomy)
    folded = _fold(categories, attempts, strict_taxonomy)
    logger.debug(f"Folded {folded} attempts into {len(categories)} categories")

    result = []
    for category in categories.values():
        subdomains = [
            SubdomainStats(
                name=sub["name"],
                percentage=percentage(sub["correct"], sub["total"]),
                total_attempts=sub["total"],
                last_attempt_at=sub["last_attempt"],
            )
            for sub in category["subdomains"].values()
        ]
        subdomains.sort(key=lambda s: s.percentage, reverse=True)
        result.append(
            CategoryStats(
                name=category["name"],
                percentage=percentage(category["total_correct"], category["total_attempts"]),
                subdomains=tuple(subdomains),
            )
        )
    result.sort(key=lambda c: c.percentage, reverse=True)
    return result


def daily_accuracy_trend(
    attempts: Iterable[AttemptRecord],
    today: Optional[date] = None,
    days: int = TREND_DAYS,
    tz: Optional[tzinfo] = None,
) -> List[DailyAccuracy]:
    """
    Per-day accuracy for the last `days` calendar days ending today, oldest first.

    Attempts are bucketed by their calendar day in `tz` (the local zone by default).
    """
    today = today or date.today()
    by_day: Dict[date, List[bool]] = {}
    for attempt in attempts:
        if attempt.created_at is None:
            continue
        local = parse_timestamp(attempt.created_at).astimezone(tz)
        by_day.setdefault(local.date(), []).append(attempt.is_correct)

    trend = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        results = by_day.get(day, [])
        trend.append(
            DailyAccuracy(
                day=day,
                label=f"{day.strftime('%a')} {day.day}",
                accuracy=percentage(sum(results), len(results)),
            )
        )
    return trend


def subdomain_accuracies(progress: Iterable[SubdomainProgressRecord], category: str) -> List[WeakArea]:
    """One category's tracked subdomain accuracies, weakest first."""
    wanted = normalize_category(category)
    rows = [
        WeakArea(name=normalize_subcategory(p.subcategory), percentage=p.current_accuracy)
        for p in progress
        if normalize_category(p.main_category) == wanted
    ]
    rows.sort(key=lambda r: r.percentage)
    return rows
