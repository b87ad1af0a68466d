"""
Supabase client factory.

Every logged-in session gets its own client: supabase-py keeps the auth
session on the client instance and forwards the session's access token to
PostgREST, so row-level security sees the right user.
"""

import logging

from supabase import Client, create_client

from reflectai.core.config import settings
from reflectai.shared.errors import ConfigurationError

logger = logging.getLogger("Reflect.Database")


def create_supabase_client() -> Client:
    """Create a fresh Supabase client for one session."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")

    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    logger.debug("Supabase client created")
    return client
