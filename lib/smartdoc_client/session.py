from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SessionAccessor(Protocol):
    """Read-only view of the caller's session, plus sign-out."""

    def get_current_token(self) -> str | None:
        ...

    def invalidate(self) -> None:
        ...


class AnonymousSession:
    def get_current_token(self) -> str | None:
        return None

    def invalidate(self) -> None:
        return None


class StaticSession:
    """In-memory session holding a single bearer token."""

    def __init__(self, token: str | None = None):
        self._token = token or None

    def get_current_token(self) -> str | None:
        return self._token

    def invalidate(self) -> None:
        self._token = None
