"""Supabase client for the studio website backend."""
import asyncio
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from supabase import AsyncClient, acreate_client

load_dotenv()

logger = logging.getLogger(__name__)

SUPABASE_URL = os.environ.get("SUPABASE_URL")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY")

REFERENCE_PHOTOS_BUCKET = "reference-photos"

_client: Optional[AsyncClient] = None
_client_lock = asyncio.Lock()


def is_supabase_configured() -> bool:
    """Both the project URL and the anon key are needed to talk to Supabase."""
    return bool(SUPABASE_URL and SUPABASE_ANON_KEY)


async def get_supabase() -> Optional[AsyncClient]:
    """Get the shared Supabase client, or None when credentials are missing.

    Missing credentials are an expected deployment state (e.g. a static
    preview build), so callers degrade instead of failing here.
    """
    global _client
    if not is_supabase_configured():
        return None
    async with _client_lock:
        if _client is None:
            logger.info("Creating Supabase client for %s", SUPABASE_URL)
            _client = await acreate_client(SUPABASE_URL, SUPABASE_ANON_KEY)
    return _client
