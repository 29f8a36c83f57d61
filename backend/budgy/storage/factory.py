"""Factory for creating the configured remote store."""
from budgy.config import settings
from budgy.storage.database import SqliteRemoteStore
from budgy.storage.remote import RemoteStore
from budgy.storage.supabase import SupabaseRemoteStore


def get_remote_store(backend: str = "", **kwargs) -> RemoteStore:
    """
    Create the remote store named by ``backend`` (defaults to ``settings.remote_backend``).

    Args:
        backend: "sqlite" or "supabase"
        **kwargs: Backend-specific configuration

    Returns:
        RemoteStore instance
    """
    backend = (backend or settings.remote_backend).lower()
    if backend == "supabase":
        return SupabaseRemoteStore(**kwargs)
    elif backend == "sqlite":
        return SqliteRemoteStore(kwargs.pop("db_path", settings.remote_sqlite_path), **kwargs)
    else:
        raise ValueError(f"Unknown remote backend: {backend}")
