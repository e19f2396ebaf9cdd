"""Liveness and storage-backend checks."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from ...config import settings
from ...db.supabase import get_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Report which report store is active and whether it answers a count query."""
    client = get_supabase_client()
    if client is None:
        return {"backend": "memory", "configured": False}

    try:
        response = client.table(settings.reports_table).select("id", count="exact").limit(1).execute()
    except Exception as exc:
        logger.warning(f"Supabase health probe failed: {exc}")
        return {"backend": "supabase", "configured": True, "connected": False, "error": str(exc)}
    return {"backend": "supabase", "configured": True, "connected": True, "reports": response.count}
