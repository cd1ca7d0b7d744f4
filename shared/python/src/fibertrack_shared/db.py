"""
db.py — Supabase client cache, one client per key role.

Two roles are in use:
  anon          dashboard services (fibertrack_pipeline.services); RLS applies
  service_role  CSV ingestion writes (SupabaseStore); bypasses RLS

Usage:
    from fibertrack_shared.db import get_supabase_client

    supabase = get_supabase_client()                    # anon
    supabase = get_supabase_client(service_role=True)   # service_role
"""

from __future__ import annotations

import threading
from typing import Final, Literal

import structlog
from supabase import Client, create_client

from fibertrack_shared.config import settings

logger = structlog.get_logger(__name__)

KeyRole = Literal["anon", "service_role"]

# role → (settings attribute, environment variable)
_ROLE_KEYS: Final[dict[KeyRole, tuple[str, str]]] = {
    "anon": ("supabase_anon_key", "SUPABASE_ANON_KEY"),
    "service_role": ("supabase_service_key", "SUPABASE_SERVICE_KEY"),
}

_clients: dict[KeyRole, Client] = {}
_clients_lock = threading.Lock()


def _key_for(role: KeyRole) -> str:
    attr, env_var = _ROLE_KEYS[role]
    key = getattr(settings, attr)
    if not key:
        raise RuntimeError(f"{env_var} is not set; add it to .env to use the {role} client.")
    return key


def get_supabase_client(*, service_role: bool = False) -> Client:
    """
    Return the process-wide client for the requested role, creating it once.

    Raises:
        RuntimeError: If the key for that role is not configured.
    """
    role: KeyRole = "service_role" if service_role else "anon"
    with _clients_lock:
        client = _clients.get(role)
        if client is None:
            client = create_client(settings.supabase_url, _key_for(role))
            _clients[role] = client
            logger.info("supabase_client_created", role=role, url=settings.supabase_url)
        return client


def reset_supabase_clients() -> None:
    """Drop cached clients so the next call rebuilds them from current settings."""
    with _clients_lock:
        _clients.clear()
