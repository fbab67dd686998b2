# app/core/supabase_client.py
import logging

from supabase import create_client, Client

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_gateway(settings: Settings | None = None, access_token: str | None = None) -> Client | None:
    """
    Create a Supabase client with the anon/public key.

    Every service takes this client as an explicit argument; a return value
    of None means the backend is not configured and callers fall back to
    their BackendUnavailable policy.

    Args:
        settings: settings to read credentials from (defaults to get_settings()).
        access_token: caller's JWT; when given, table queries run as that user
            so row-level security applies to them.

    Note: This client always respects RLS. There is no service-role
    client in this project.
    """
    settings = settings or get_settings()
    if not settings.supabase_configured:
        logger.warning("Supabase credentials not configured; running without a backend")
        return None

    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    if access_token:
        client.postgrest.auth(access_token)
    return client
