"""Shared FastAPI dependencies for repositories and the clock."""

from __future__ import annotations

from functools import lru_cache

from ..clock import Clock, SystemClock
from ..db.supabase import get_supabase_client
from ..repositories.base import CollectorRepository, ReportRepository
from ..repositories.memory import InMemoryCollectorRepository, InMemoryReportRepository


@lru_cache()
def get_report_repository() -> ReportRepository:
    client = get_supabase_client()
    if client is None:
        return InMemoryReportRepository()
    from ..repositories.supabase import SupabaseReportRepository

    return SupabaseReportRepository(client)


@lru_cache()
def get_collector_repository() -> CollectorRepository:
    client = get_supabase_client()
    if client is None:
        return InMemoryCollectorRepository()
    from ..repositories.supabase import SupabaseCollectorRepository

    return SupabaseCollectorRepository(client)


def get_clock() -> Clock:
    return SystemClock()
