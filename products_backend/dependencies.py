"""
Dependency wiring for the FastAPI app.

The mock/live decision is made once, when the app is built, and the
resulting clients live on ``app.state.backends`` for the app's lifetime.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request
from supabase import Client, create_client

from products_backend.auth import AuthClient, InMemoryAuthClient, SupabaseAuthClient
from products_backend.config import Settings
from products_backend.store import (
    InMemoryStoreClient,
    RecordStore,
    StoreClient,
    SupabaseStoreClient,
)

logger = logging.getLogger(__name__)


@dataclass
class Backends:
    store: StoreClient
    auth: AuthClient
    mode: str
    record_store: Optional[RecordStore] = None


def in_memory_backends(record_store: RecordStore | None = None) -> Backends:
    record_store = record_store if record_store is not None else RecordStore()
    return Backends(
        store=InMemoryStoreClient(record_store),
        auth=InMemoryAuthClient(record_store),
        mode="mock",
        record_store=record_store,
    )


def build_backends(
    settings: Settings,
    client_factory: Callable[[str, str], Client] = create_client,
) -> Backends:
    """
    Use Supabase when both URL and key are configured, otherwise the in-memory store.
    """
    if not settings.has_backend_credentials:
        logger.warning(
            "SUPABASE_URL or SUPABASE_KEY not set. Falling back to mock in-memory DB."
        )
        return in_memory_backends()

    client = client_factory(settings.supabase_url.strip(), settings.supabase_key.strip())
    logger.info("Supabase client created")
    return Backends(
        store=SupabaseStoreClient(client),
        auth=SupabaseAuthClient(client),
        mode="live",
    )


def get_backends(request: Request) -> Backends:
    return request.app.state.backends


def get_store_client(request: Request) -> StoreClient:
    return get_backends(request).store


def get_auth_client(request: Request) -> AuthClient:
    return get_backends(request).auth
