from typing import Optional

from supabase import create_client, Client

from config.settings import SUPABASE_URL, SUPABASE_KEY

_supabase_client: Optional[Client] = None


def _require(value: Optional[str], var_name: str) -> str:
    """Raise a clear error if a required setting is missing."""
    if not value:
        raise RuntimeError(
            f"Missing required environment variable '{var_name}'. "
            "Please set it before starting the application."
        )
    return value


def get_supabase() -> Client:
    """
    Return the process-wide Supabase client, creating it on first use.
    Services call this in __init__, so tests patch it per service module.
    """
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = create_client(
            _require(SUPABASE_URL, "SUPABASE_URL"),
            _require(SUPABASE_KEY, "SUPABASE_SERVICE_KEY"),
        )
    return _supabase_client
