"""
Print a learner's performance rollup, weak areas and weekend pacing schedule.

Run: python pacing_report.py USER_ID --exam-date 2025-06-14
      python pacing_report.py USER_ID --range weekly --domain "Experimental Design"
"""
import argparse
import logging
import sys
from datetime import date, datetime, time

from engine import TIME_RANGES
from studypace.database import get_database
from studypace.performance import accuracy_color
from studypace.report import build_domain_overview, build_report


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM-DD, got {value!r}")


def print_rollup(categories) -> None:
    print("Performance by category")
    print("-" * 60)
    for category in categories:
        print(f"  {category.name:<48} {category.percentage:>3}%")
        for sub in category.subdomains:
            last = sub.last_attempt_at.strftime("%Y-%m-%d %H:%M") if sub.last_attempt_at else "never"
            print(f"      {sub.name[:40]:<40} {sub.percentage:>3}%  {sub.total_attempts:>4} answered  last: {last}")


def print_plan(plan) -> None:
    print()
    print("Pacing guide")
    print("-" * 60)
    print(f"  Today's date:     {plan.today:%B %d, %Y}")
    print(f"  Target exam date: {plan.exam_date:%B %d, %Y}" if plan.exam_date else "  Target exam date: Not set")
    print(f"  Study frequency:  {plan.study_frequency}")
    print()
    print("Incomplete subdomains")
    if plan.weak_areas:
        for area in plan.weak_areas:
            print(f"  [{accuracy_color(area.percentage):>6}] {area.name} ({area.percentage:g}%)")
    else:
        print("  All topics meet mastery goals!")
    print()
    print("Study schedule")
    if plan.entries:
        for entry in plan.entries:
            print(f"  {entry.date:%a %Y-%m-%d}  {entry.subdomain_name:<50} {entry.task}")
    else:
        print("  No study days found. Adjust your exam date.")


def print_overview(overview) -> None:
    print()
    print(f"Domain overview: {overview.domain}")
    print("-" * 60)
    for point in overview.trend:
        print(f"  {point.label:<8} {point.accuracy:>3}%")
    for sub in overview.subdomains:
        print(f"  [{accuracy_color(sub.percentage):>6}] {sub.name} ({sub.percentage:g}%)")


def main():
    parser = argparse.ArgumentParser(description="Performance analytics and weekend pacing guide for one learner.")
    parser.add_argument("user_id", help="Learner UUID")
    parser.add_argument("--exam-date", type=_parse_date, default=None, help="Target exam date (YYYY-MM-DD)")
    parser.add_argument("--today", type=_parse_date, default=None, help="Override today's date (YYYY-MM-DD)")
    parser.add_argument("--range", dest="time_range", choices=TIME_RANGES, default=None, help="Only count recent attempts")
    parser.add_argument("--domain", default=None, help="Also show the overview for one domain")
    parser.add_argument("--all-categories", action="store_true", help="Keep records outside the nine domains")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(message)s")

    try:
        db = get_database()
    except ValueError as e:
        print(f"{e}. Set them in .env")
        sys.exit(1)

    report = build_report(
        db,
        args.user_id,
        exam_date=args.exam_date,
        today=args.today,
        now=datetime.combine(args.today, time(23, 59, 59)).astimezone() if args.today else None,
        time_range=args.time_range,
        strict_taxonomy=not args.all_categories,
    )
    if report.error:
        print(report.error)
        sys.exit(1)

    if report.is_empty:
        print("No practice sessions found")
    else:
        print_rollup(report.categories)
    print_plan(report.plan)

    if args.domain:
        overview = build_domain_overview(db, args.user_id, args.domain, time_range=args.time_range or "weekly")
        if overview.error:
            print(overview.error)
            sys.exit(1)
        print_overview(overview)


if __name__ == "__main__":
    main()
