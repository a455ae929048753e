from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from studypace.database import DatabaseClient
from studypace.models import AttemptRecord, SubdomainProgressRecord, parse_timestamp

USER_ID = "6f1c2a8e-0000-4000-8000-000000000001"


class FakeQuery:
    """In-memory stand-in for a postgrest select builder."""

    def __init__(self, store, table):
        self.store = store
        self.table_name = table
        self.rows = list(store.tables.get(table, []))
        self.offset = 0
        self.limit = None

    def select(self, *columns):
        return self

    def eq(self, column, value):
        self.rows = [r for r in self.rows if r.get(column) == value]
        return self

    def gte(self, column, value):
        bound = parse_timestamp(value)
        self.rows = [r for r in self.rows if parse_timestamp(r.get(column)) >= bound]
        return self

    def order(self, column, desc=False):
        self.rows.sort(key=lambda r: parse_timestamp(r.get(column)), reverse=desc)
        return self

    def range(self, start, end):
        self.offset = start
        self.limit = end - start + 1
        return self

    def execute(self):
        self.store.calls.append(self.table_name)
        if self.table_name in self.store.failing:
            raise ConnectionError(f"{self.table_name} unavailable")
        data = self.rows[self.offset:]
        if self.limit is not None:
            data = data[: self.limit]
        return SimpleNamespace(data=data)


class FakeSupabase:
    def __init__(self, tables=None, failing=()):
        self.tables = tables or {}
        self.failing = set(failing)
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)


def ts(day, hour=12, minute=0, month=1, year=2024):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def attempt(category, sub, correct, created_at, user_id=USER_ID):
    return AttemptRecord(
        user_id=user_id,
        main_category=category,
        subcategory=sub,
        is_correct=correct,
        created_at=created_at,
    )


def progress(category, sub, accuracy, updated_at=None):
    return SubdomainProgressRecord(
        main_category=category,
        subcategory=sub,
        current_accuracy=accuracy,
        updated_at=updated_at,
    )


@pytest.fixture
def attempt_rows():
    return [
        {"user_id": USER_ID, "main_category": "D. Experimental Design", "subcategory": "D.1. Distinguish between dependent and independent variables", "is_correct": True, "created_at": "2024-01-10T09:00:00+00:00"},
        {"user_id": USER_ID, "main_category": "D. Experimental Design", "subcategory": "D.1. Distinguish between dependent and independent variables", "is_correct": False, "created_at": "2024-01-11T09:00:00Z"},
        {"user_id": USER_ID, "main_category": "D. Experimental Design", "subcategory": "D.4. Use reversal designs", "is_correct": True, "created_at": "2024-01-12T09:00:00Z"},
        {"user_id": USER_ID, "main_category": "E. Ethical and Professional Issues", "subcategory": "E.2. Identify risks", "is_correct": False, "created_at": "2024-01-12T10:00:00Z"},
        {"user_id": "someone-else", "main_category": "E. Ethical and Professional Issues", "subcategory": "E.2. Identify risks", "is_correct": True, "created_at": "2024-01-12T11:00:00Z"},
    ]


@pytest.fixture
def progress_rows():
    return [
        {"user_id": USER_ID, "main_category": "D. Experimental Design", "subcategory": "D.1. Distinguish between dependent and independent variables", "current_accuracy": 50, "updated_at": "2024-01-11T09:00:00Z"},
        {"user_id": USER_ID, "main_category": "D. Experimental Design", "subcategory": "D.4. Use reversal designs", "current_accuracy": 95, "updated_at": "2024-01-12T09:00:00Z"},
        {"user_id": USER_ID, "main_category": "D. Experimental Design", "subcategory": "D.6. Use changing criterion designs", "current_accuracy": 20, "updated_at": "2024-01-05T09:00:00Z"},
        {"user_id": USER_ID, "main_category": "E. Ethical and Professional Issues", "subcategory": "E.2. Identify risks", "current_accuracy": 0, "updated_at": "2023-06-01T09:00:00Z"},
    ]


@pytest.fixture
def fake_supabase(attempt_rows, progress_rows):
    return FakeSupabase({"quiz_attempts": attempt_rows, "subdomain_progress": progress_rows})


@pytest.fixture
def db(fake_supabase):
    return DatabaseClient(client=fake_supabase)
