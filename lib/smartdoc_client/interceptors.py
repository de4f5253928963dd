from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .errors import AuthError, SmartdocClientError
from .request import RequestDescriptor, without_header
from .session import SessionAccessor

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

OutgoingInterceptor = Callable[[RequestDescriptor], RequestDescriptor]
IncomingInterceptor = Callable[[RequestDescriptor, SmartdocClientError], None]


class AuthInjector:
    """Stamp the current session token as a bearer Authorization header."""

    def __init__(self, session: SessionAccessor):
        self._session = session

    def __call__(self, request: RequestDescriptor) -> RequestDescriptor:
        headers = without_header(request.headers, "Authorization")
        try:
            token = self._session.get_current_token()
        except Exception as exc:
            logger.warning("Error getting auth token, sending %s unauthenticated: %s", request.describe(), exc)
            token = None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return dataclasses.replace(request, headers=headers)


def negotiate_content_type(request: RequestDescriptor) -> RequestDescriptor:
    headers = without_header(request.headers, "Content-Type")
    if not request.is_multipart:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return dataclasses.replace(request, headers=headers)


class SessionExpiryHandler:
    """On 401: sign the session out and send the user to sign-in.

    The original error is left untouched for the caller.
    """

    def __init__(self, session: SessionAccessor, on_expired: Callable[[], None] | None = None):
        self._session = session
        self._on_expired = on_expired

    def __call__(self, request: RequestDescriptor, error: SmartdocClientError) -> None:
        if not isinstance(error, AuthError):
            return
        logger.info("Session rejected on %s, signing out", request.describe())
        try:
            self._session.invalidate()
        except Exception as exc:
            logger.warning("Session invalidation failed: %s", exc)
        if self._on_expired is None:
            return
        try:
            self._on_expired()
        except Exception as exc:
            logger.warning("Sign-in redirect hook failed: %s", exc)


@dataclass(frozen=True)
class InterceptorChain:
    outgoing: Sequence[OutgoingInterceptor] = field(default_factory=tuple)
    incoming: Sequence[IncomingInterceptor] = field(default_factory=tuple)

    def prepare(self, request: RequestDescriptor) -> RequestDescriptor:
        for step in self.outgoing:
            request = step(request)
        return request

    def inspect(self, request: RequestDescriptor, error: SmartdocClientError) -> None:
        for step in self.incoming:
            step(request, error)


def default_chain(session: SessionAccessor, on_expired: Callable[[], None] | None = None) -> InterceptorChain:
    return InterceptorChain(
        outgoing=(AuthInjector(session), negotiate_content_type),
        incoming=(SessionExpiryHandler(session, on_expired),),
    )
