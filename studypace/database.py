"""
Read-only Supabase queries feeding the analytics core.
Fetches quiz attempts and subdomain progress for one user.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import UUID

from supabase import Client

from db import get_supabase
from engine import ATTEMPTS_TABLE, PAGE_SIZE, PROGRESS_TABLE
from studypace.models import AttemptRecord, SubdomainProgressRecord

logger = logging.getLogger(__name__)

ATTEMPT_COLUMNS = "user_id, main_category, subcategory, is_correct, created_at"
PROGRESS_COLUMNS = "main_category, subcategory, current_accuracy, updated_at"


class DataSourceError(RuntimeError):
    """A Supabase query failed; callers treat it as "no data available"."""


class DatabaseClient:
    """Wrapper around the Supabase client with the two analytics read queries."""

    def __init__(self, client: Optional[Client] = None, page_size: int = PAGE_SIZE):
        if client is None:
            client = get_supabase()
        self.client = client
        self.page_size = page_size

    def _fetch_all(self, build_query: Callable, label: str, parse: Callable) -> List:
        """Run a query page by page (Supabase caps a response at ~1000 rows) and parse each row."""
        rows: List[Dict] = []
        offset = 0
        try:
            while True:
                response = build_query().range(offset, offset + self.page_size - 1).execute()
                data = response.data or []
                rows.extend(data)
                if len(data) < self.page_size:
                    break
                offset += self.page_size
        except Exception as e:
            logger.error(f"Error fetching {label}: {e}")
            raise DataSourceError(f"Error fetching {label}") from e
        logger.debug(f"Fetched {len(rows)} {label} rows")
        try:
            return [parse(row) for row in rows]
        except (TypeError, ValueError) as e:
            logger.error(f"Malformed {label} row: {e}")
            raise DataSourceError(f"Malformed {label} row") from e

    def fetch_attempts(
        self,
        user_id: UUID | str,
        category: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> List[AttemptRecord]:
        """
        Fetch a user's quiz attempts, oldest first.

        Args:
            user_id: UUID of user
            category: Optional main_category filter (exact match)
            since: Optional lower bound on created_at

        Returns:
            List of AttemptRecord

        Raises:
            DataSourceError: the query failed
        """
        def build_query():
            query = self.client.table(ATTEMPTS_TABLE).select(ATTEMPT_COLUMNS).eq("user_id", str(user_id))
            if category:
                query = query.eq("main_category", category)
            if since is not None:
                query = query.gte("created_at", since.isoformat())
            return query.order("created_at")

        return self._fetch_all(build_query, "quiz attempts", AttemptRecord.from_row)

    def fetch_progress(
        self,
        user_id: UUID | str,
        category: Optional[str] = None,
        updated_since: Optional[datetime] = None,
    ) -> List[SubdomainProgressRecord]:
        """
        Fetch a user's per-subcategory progress rows.

        Raises:
            DataSourceError: the query failed
        """
        def build_query():
            query = self.client.table(PROGRESS_TABLE).select(PROGRESS_COLUMNS).eq("user_id", str(user_id))
            if category:
                query = query.eq("main_category", category)
            if updated_since is not None:
                query = query.gte("updated_at", updated_since.isoformat())
            return query.order("updated_at")

        return self._fetch_all(build_query, "subdomain progress", SubdomainProgressRecord.from_row)


# Singleton instance
_db_client: Optional[DatabaseClient] = None


def get_database() -> DatabaseClient:
    """Get or create database client singleton."""
    global _db_client
    if _db_client is None:
        _db_client = DatabaseClient()
    return _db_client
