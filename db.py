"""Supabase client factory. Credentials come from .env (SUPABASE_URL, SUPABASE_KEY)."""
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from supabase import create_client, Client

load_dotenv()

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


def get_supabase() -> Client:
    """Shared client for the process (created on first use)."""
    global _client
    if _client is None:
        logger.debug("Creating Supabase client")
        _client = _env_client()
    return _client
