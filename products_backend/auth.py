"""
Authentication adapters: Supabase Auth for live mode and a users table in
the in-memory RecordStore for local development.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Protocol

import httpx
from supabase import AuthError, Client

from products_backend.errors import (
    BackendError,
    DuplicateUserError,
    InvalidCredentialsError,
)
from products_backend.store import Record, RecordStore

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


class AuthClient(Protocol):
    """Sign-up and password sign-in as seen by the routes."""

    def sign_up(self, email: str, password: str) -> Any:
        ...

    def sign_in(self, email: str, password: str) -> Any:
        ...


class InMemoryAuthClient:
    """
    Mock auth over the ``users`` table of a RecordStore.

    Passwords are stored and compared in plaintext; this client only exists
    for local runs without Supabase credentials.
    """

    def __init__(self, store: RecordStore | None = None):
        self.store = store if store is not None else RecordStore()

    def sign_up(self, email: str, password: str) -> Record:
        with self.store.lock:
            users = self.store.table(USERS_TABLE)
            if any(user.get("email") == email for user in users):
                raise DuplicateUserError("User already exists")
            (user_id,) = self.store.allocate_ids(USERS_TABLE, 1)
            user = {"id": user_id, "email": email, "password": password}
            users.append(user)
            return dict(user)

    def sign_in(self, email: str, password: str) -> Record:
        with self.store.lock:
            for user in self.store.table(USERS_TABLE):
                if user.get("email") == email and user.get("password") == password:
                    return dict(user)
        raise InvalidCredentialsError("Invalid credentials")


class SupabaseAuthClient:
    """Relays sign-up/sign-in to Supabase Auth and returns its payload as JSON data."""

    def __init__(self, client: Client):
        self._client = client

    def _call(
        self, action: str, method: Callable[[dict], Any], credentials: dict
    ) -> Dict[str, Any]:
        try:
            response = method(credentials)
        except AuthError as exc:
            logger.warning("Supabase %s failed: %s", action, exc.message)
            raise BackendError(exc.message) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase %s unreachable: %s", action, exc)
            raise BackendError(str(exc)) from exc
        return response.model_dump(mode="json")

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        return self._call(
            "sign_up",
            self._client.auth.sign_up,
            {"email": email, "password": password},
        )

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        return self._call(
            "sign_in",
            self._client.auth.sign_in_with_password,
            {"email": email, "password": password},
        )
