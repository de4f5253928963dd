from __future__ import annotations

from typing import Any


class SmartdocClientError(Exception):
    """Base client error."""


class NetworkError(SmartdocClientError):
    """No response was received (connectivity, DNS, timeout)."""

    def __init__(self, message: str, *, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class ApiError(SmartdocClientError):
    def __init__(
            self,
            status_code: int,
            message: str,
            details: str | None = None,
            detail: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details
        self.detail = detail


class AuthError(ApiError):
    """Session rejected by the backend (401)."""


class ValidationError(ApiError):
    """Request rejected by the backend (4xx other than 401)."""


class ServerError(ApiError):
    """Backend failure (5xx)."""


def api_error_for_status(status_code: int) -> type[ApiError]:
    if status_code == 401:
        return AuthError
    if 400 <= status_code < 500:
        return ValidationError
    if status_code >= 500:
        return ServerError
    return ApiError
