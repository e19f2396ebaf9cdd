"""Supabase client shared by the report and collector repositories."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the process-wide Supabase client, or None without credentials.

    Creating the client does not open a connection; the first table query is
    where network problems surface. Callers treat None as "use the in-memory
    repositories".
    """
    if not (settings.supabase_url and settings.supabase_key):
        logger.warning("WASTEROUTE_SUPABASE_URL/KEY not set; reports and collectors are kept in memory")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as exc:
        logger.error(f"Could not create Supabase client for {settings.supabase_url}: {exc}")
        return None
    logger.info(f"Using Supabase tables '{settings.reports_table}' and '{settings.collectors_table}'")
    return client
