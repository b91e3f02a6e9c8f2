"""
db.py — async Supabase client singleton.

Usage:
    from sichr_shared.db import get_supabase_client

    supabase = await get_supabase_client()
    result = await supabase.table("apartments").select("id").limit(1).execute()
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog
from supabase import AsyncClient, acreate_client

from sichr_shared.config import settings

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Supabase — one service-role client per process
# ---------------------------------------------------------------------------
_supabase_lock = asyncio.Lock()
_supabase_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """
    Return the process-wide Supabase client.

    The maintenance RPCs and analytics reads need full access, so the
    service role key is always used.

    Returns:
        supabase.AsyncClient instance.

    Raises:
        RuntimeError: SUPABASE_SERVICE_KEY is not configured.
    """
    global _supabase_client

    async with _supabase_lock:
        if _supabase_client is None:
            if not settings.supabase_service_key:
                raise RuntimeError(
                    "SUPABASE_SERVICE_KEY is not set. Set it in .env."
                )
            _supabase_client = await acreate_client(
                settings.supabase_url,
                settings.supabase_service_key,
            )
            logger.info("supabase_client_created", role="service_role")
        return _supabase_client


def reset_supabase_client() -> None:
    """Reset the singleton client (useful in tests)."""
    global _supabase_client
    _supabase_client = None
