from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from .errors import NetworkError, SmartdocClientError
from .request import RequestDescriptor, RetryPhase, RetryState

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_BACKOFF_MS = 2000
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded replay of idempotent requests that never got a response.

    HTTP error responses are never replayed, and neither is anything that
    may have side effects on the backend (uploads, analyses, report renders).
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_ms: int = DEFAULT_BACKOFF_MS
    idempotent_methods: frozenset[str] = IDEMPOTENT_METHODS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_ms < 0:
            raise ValueError("backoff_ms must be >= 0")

    def new_state(self) -> RetryState:
        return RetryState(attempt=1, max_attempts=self.max_attempts)

    def is_idempotent(self, method: str) -> bool:
        return method.upper() in self.idempotent_methods

    def should_retry(self, request: RequestDescriptor, error: BaseException) -> bool:
        state = request.retry_state
        return (
                isinstance(error, NetworkError)
                and self.is_idempotent(request.method)
                and state.attempt < state.max_attempts
        )

    async def execute(
            self,
            request: RequestDescriptor,
            send: Callable[[RequestDescriptor], Awaitable[Any]],
            *,
            on_error: Callable[[RequestDescriptor, SmartdocClientError], None] | None = None,
            sleep: Sleep = asyncio.sleep,
    ) -> Any:
        state = request.retry_state
        while True:
            try:
                result = await send(request)
            except SmartdocClientError as exc:
                if on_error is not None:
                    on_error(request, exc)
                if not self.should_retry(request, exc):
                    state.phase = RetryPhase.EXHAUSTED
                    raise
                state.phase = RetryPhase.RETRYING
                logger.warning(
                    "%s failed (%s), retrying in %d ms (attempt %d/%d)",
                    request.describe(), exc, self.backoff_ms, state.attempt + 1, state.max_attempts,
                )
                await sleep(self.backoff_ms / 1000)
                state.attempt += 1
                continue
            state.phase = RetryPhase.SUCCEEDED
            return result
