"""Supabase client for server-side store access."""

from functools import lru_cache

from supabase import Client, create_client

from taskboard.config import settings


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """
    Service-role client, created once per process.

    It bypasses row-level security. The API authenticates callers itself,
    so every store call and session revocation goes through this client.
    """
    return create_client(settings.supabase_url, settings.supabase_service_role_key)
