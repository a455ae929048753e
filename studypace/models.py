"""Immutable records consumed and produced by the analytics core."""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Optional, Tuple, Union


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a Supabase timestamptz ("...Z" or "+00:00"); naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class AttemptRecord:
    """One answered quiz question (row of quiz_attempts)."""
    user_id: str
    main_category: str
    subcategory: str
    is_correct: bool
    created_at: datetime

    @classmethod
    def from_row(cls, row: Dict) -> "AttemptRecord":
        return cls(
            user_id=str(row.get("user_id") or ""),
            main_category=row.get("main_category") or "",
            subcategory=row.get("subcategory") or "",
            is_correct=bool(row.get("is_correct")),
            created_at=parse_timestamp(row.get("created_at")),
        )


@dataclass(frozen=True)
class SubdomainProgressRecord:
    """Externally maintained accuracy for one subcategory (row of subdomain_progress)."""
    main_category: str
    subcategory: str
    current_accuracy: float
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict) -> "SubdomainProgressRecord":
        accuracy = row.get("current_accuracy")
        return cls(
            main_category=row.get("main_category") or "",
            subcategory=row.get("subcategory") or "",
            current_accuracy=float(accuracy) if accuracy is not None else 0.0,
            updated_at=parse_timestamp(row.get("updated_at")),
        )


@dataclass(frozen=True)
class SubdomainStats:
    name: str
    percentage: int
    total_attempts: int
    last_attempt_at: Optional[datetime] = None


@dataclass(frozen=True)
class CategoryStats:
    name: str
    percentage: int
    subdomains: Tuple[SubdomainStats, ...] = ()

    @property
    def total_attempts(self) -> int:
        return sum(s.total_attempts for s in self.subdomains)


@dataclass(frozen=True)
class WeakArea:
    name: str
    percentage: float


@dataclass(frozen=True)
class PacingScheduleEntry:
    date: date
    subdomain_name: str
    task: str


@dataclass(frozen=True)
class DailyAccuracy:
    day: date
    label: str
    accuracy: int


@dataclass(frozen=True)
class PacingPlan:
    """Everything the pacing guide shows: details, weak areas and the dated entries."""
    today: date
    exam_date: Optional[date]
    study_frequency: str
    weekend_slots: Tuple[date, ...] = ()
    weak_areas: Tuple[WeakArea, ...] = ()
    entries: Tuple[PacingScheduleEntry, ...] = field(default_factory=tuple)
