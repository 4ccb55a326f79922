"""
Supabase client — one process-wide supabase-py Client for the part stores.

The service-role key is required: both part tables are written by the
sync worker, never by end users.
Version: 1.0.0
"""
import logging

from supabase import create_client, Client

from partsync.core.config import Settings

logger = logging.getLogger("supabase_client")


class SupabaseClient:
    _instance: Client | None = None

    def __init__(self, settings: Settings) -> None:
        self._url = settings.supabase_url
        self._key = settings.supabase_service_role_key

        missing = [
            name for name, value in (
                ("SUPABASE_URL", self._url),
                ("SUPABASE_SERVICE_ROLE_KEY", self._key),
            )
            if not value
        ]
        if missing:
            raise RuntimeError(f"{' and '.join(missing)} must be set to reach the part tables")

    def get_client(self) -> Client:
        """Return the shared Client, connecting on first call."""
        if SupabaseClient._instance is None:
            SupabaseClient._instance = create_client(self._url, self._key)
            logger.info("supabase connected url=%s", self._url)
        return SupabaseClient._instance

    @property
    def client(self) -> Client:
        return self.get_client()
