"""
Orchestration: fetch a user's records, derive the rollup, weak areas and pacing plan.

The two Supabase reads run concurrently in worker threads. Any failure yields a
report carrying only the error message (no partial rollup).
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from engine import INVALID_DOMAIN_ERROR, LOAD_ERROR, MASTERY_THRESHOLD, PROGRESS_LOOKBACK_DAYS
from studypace.database import DatabaseClient, DataSourceError
from studypace.models import CategoryStats, DailyAccuracy, PacingPlan, SubdomainProgressRecord, WeakArea
from studypace.pacing import build_pacing_plan
from studypace.performance import (
    aggregate_performance,
    daily_accuracy_trend,
    since_for_range,
    subdomain_accuracies,
)
from studypace.taxonomy import normalize_category, parse_category
from studypace.weak_areas import rank_weak_areas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsReport:
    categories: Tuple[CategoryStats, ...] = ()
    weak_areas: Tuple[WeakArea, ...] = ()
    plan: Optional[PacingPlan] = None
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.error is None and not self.categories


@dataclass(frozen=True)
class DomainOverview:
    domain: str
    trend: Tuple[DailyAccuracy, ...] = ()
    subdomains: Tuple[WeakArea, ...] = field(default_factory=tuple)
    error: Optional[str] = None


def recent_progress(
    progress: List[SubdomainProgressRecord],
    now: datetime,
    days: int = PROGRESS_LOOKBACK_DAYS,
) -> List[SubdomainProgressRecord]:
    """Progress rows updated within the lookback window (rows without updated_at are kept)."""
    cutoff = now - timedelta(days=days)
    return [p for p in progress if p.updated_at is None or p.updated_at >= cutoff]


async def load_analytics(
    db: DatabaseClient,
    user_id: str,
    exam_date: Optional[date] = None,
    today: Optional[date] = None,
    time_range: Optional[str] = None,
    now: Optional[datetime] = None,
    threshold: float = MASTERY_THRESHOLD,
    strict_taxonomy: bool = True,
) -> AnalyticsReport:
    """
    Fetch attempts and progress concurrently and derive every analytics output.

    Never raises for data-source failures; those come back as report.error.
    """
    now = now or datetime.now().astimezone()
    today = today or now.date()
    since = since_for_range(time_range, now) if time_range else None

    try:
        attempts, progress = await asyncio.gather(
            asyncio.to_thread(db.fetch_attempts, user_id, since=since),
            asyncio.to_thread(db.fetch_progress, user_id),
        )
    except DataSourceError as e:
        logger.error(f"Analytics load failed for user {user_id}: {e}")
        return AnalyticsReport(error=LOAD_ERROR)

    categories = aggregate_performance(attempts, progress, strict_taxonomy=strict_taxonomy)
    weak_areas = rank_weak_areas(
        recent_progress(progress, now), threshold=threshold, strict_taxonomy=strict_taxonomy
    )
    plan = build_pacing_plan(exam_date, today, weak_areas)
    logger.info(
        f"User {user_id}: {len(attempts)} attempts, {len(categories)} categories, "
        f"{len(weak_areas)} weak areas, {len(plan.entries)} schedule entries"
    )
    return AnalyticsReport(
        categories=tuple(categories),
        weak_areas=tuple(weak_areas),
        plan=plan,
    )


async def load_domain_overview(
    db: DatabaseClient,
    user_id: str,
    domain: str,
    time_range: str = "weekly",
    now: Optional[datetime] = None,
) -> DomainOverview:
    """Daily accuracy trend and subdomain accuracies for one of the nine domains."""
    category = parse_category(domain)
    if category is None:
        logger.warning(f"Invalid domain selected: {domain!r}")
        return DomainOverview(domain=domain, error=INVALID_DOMAIN_ERROR)

    now = now or datetime.now().astimezone()
    since = since_for_range(time_range, now)
    try:
        attempts, progress = await asyncio.gather(
            asyncio.to_thread(db.fetch_attempts, user_id, since=since),
            asyncio.to_thread(db.fetch_progress, user_id),
        )
    except DataSourceError as e:
        logger.error(f"Domain overview load failed for user {user_id}: {e}")
        return DomainOverview(domain=category.value, error=LOAD_ERROR)

    # Stored labels may carry the "A. " prefix, so match on normalized names here.
    in_domain = [a for a in attempts if normalize_category(a.main_category) == category.value]
    return DomainOverview(
        domain=category.value,
        trend=tuple(daily_accuracy_trend(in_domain, today=now.date(), tz=now.tzinfo)),
        subdomains=tuple(subdomain_accuracies(progress, category.value)),
    )


def build_report(db: DatabaseClient, user_id: str, **kwargs) -> AnalyticsReport:
    """Synchronous entry point for scripts."""
    return asyncio.run(load_analytics(db, user_id, **kwargs))


def build_domain_overview(db: DatabaseClient, user_id: str, domain: str, **kwargs) -> DomainOverview:
    return asyncio.run(load_domain_overview(db, user_id, domain, **kwargs))
