# app/core/supabase_client.py
import logging
from functools import lru_cache
from typing import Any

from postgrest.exceptions import APIError
from supabase import create_client, Client

from app.core.config import get_settings
from app.core.errors import RemoteError

settings = get_settings()

logger = logging.getLogger(__name__)


@lru_cache
def supabase_public() -> Client:
    """
    Create a Supabase client with the anon/public key.

    Use cases:
      - reading the public catalog
      - reading public buckets

    Note: This client still respects RLS.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - uploading product images to Storage
      - cart / order writes on behalf of an already verified user
      - any operation that needs to bypass RLS

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def get_supabase() -> Client:
    """
    FastAPI dependency returning the data client.

    Ownership checks happen in the JWT dependencies (app.core.auth), so the
    service-role client is used whenever it is configured.

    Usage:

        @router.get("/example")
        def example_endpoint(client: Client = Depends(get_supabase)):
            ...
    """
    if settings.SUPABASE_SERVICE_ROLE_KEY:
        return supabase_admin()
    return supabase_public()


def get_auth_client() -> Client:
    """
    FastAPI dependency returning a fresh, uncached client for Auth calls.

    sign_in / sign_up store the session on the client object, so a shared
    client would leak one visitor's session to the next.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def run_query(builder: Any, action: str) -> list[dict[str, Any]]:
    """
    Execute a supabase-py query builder and return its rows.

    Args:
        builder: a built query (select / insert / update / upsert / delete).
        action: short label used in logs, e.g. "carts.insert".

    Returns:
        The response rows (empty list when PostgREST returns nothing).

    Raises:
        RemoteError: when PostgREST reports a failure.
    """
    try:
        response = builder.execute()
    except APIError as exc:
        logger.warning("Supabase call %s failed: %s", action, exc.message)
        raise RemoteError(exc.message, code=exc.code) from exc

    data = getattr(response, "data", None)
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)
