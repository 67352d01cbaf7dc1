"""
Meal Mate - Supabase Client.

Two kinds of client: a service client (service role key, used to validate
access tokens) and user-scoped clients that carry the caller's JWT so row
level security applies to every query.
"""

from supabase import Client, create_client

from mealmate.config import settings
from mealmate.exceptions import StoreError

# Singleton service client instance
_service_client: Client | None = None


def _require(value: str | None, name: str) -> str:
    if not value:
        raise StoreError(f"Supabase is not configured: set {name.upper()}")
    return value


def get_service_client() -> Client:
    """
    Get the Supabase service client.

    Uses singleton pattern to reuse connection.
    """
    global _service_client

    if _service_client is None:
        url = _require(settings.supabase_url, "supabase_url")
        key = _require(settings.supabase_service_role_key, "supabase_service_role_key")
        try:
            _service_client = create_client(url, key)
        except Exception as e:
            raise StoreError(f"Could not create Supabase client: {e}") from e

    return _service_client


def get_authenticated_client(access_token: str) -> Client:
    """
    Get a client that acts as the user owning `access_token`.

    A new client per request; never cached because it carries the user's JWT.
    """
    url = _require(settings.supabase_url, "supabase_url")
    key = _require(settings.supabase_anon_key, "supabase_anon_key")
    try:
        client = create_client(url, key)
        client.postgrest.auth(access_token)
    except Exception as e:
        raise StoreError(f"Could not create Supabase client: {e}") from e
    return client


def reset_clients() -> None:
    """Drop the cached service client (tests)."""
    global _service_client
    _service_client = None
