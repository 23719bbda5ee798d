from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions
from app.config.settings import settings
import logging
import uuid

logger = logging.getLogger(__name__)


def _session_less_options() -> ClientOptions:
    return ClientOptions(auto_refresh_token=False, persist_session=False)


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Client with the anon key; subject to RLS policies."""
        if cls._client is None:
            cls._client = create_client(
                settings.supabase_url, settings.supabase_key, options=_session_less_options()
            )
            logger.info("Supabase client initialized for %s", settings.supabase_url)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Used for all table access."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=_session_less_options(),
            )
            logger.info("Supabase service client initialized for %s", settings.supabase_url)
        return cls._service_client or cls.get_client()

    @classmethod
    def create_auth_client(cls) -> Client:
        """Fresh client for password sign-in.

        Signing in on a shared client swaps its bearer token for the user's
        session, so table queries made afterwards would run under RLS.
        """
        return create_client(
            settings.supabase_url, settings.supabase_key, options=_session_less_options()
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_service_client()


def is_valid_id(value: str) -> bool:
    """Primary keys are uuid columns; anything else can never match a row"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
