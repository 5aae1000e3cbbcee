"""
Supabase client configuration.
Server-side service-role client; it bypasses row level security, so it
must never be handed to the browser.
"""
from functools import lru_cache

from supabase import Client, create_client

from cleanclick.core.config import settings


@lru_cache()
def get_supabase_client() -> Client:
    """Get cached Supabase client instance."""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
