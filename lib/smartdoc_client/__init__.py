from .client import SmartdocClient
from .config_types import ClientConfig, build_base_url
from .degradation import FallbackValue
from .errors import ApiError, AuthError, NetworkError, ServerError, SmartdocClientError, ValidationError
from .retry import RetryPolicy
from .session import AnonymousSession, SessionAccessor, StaticSession

__all__ = [
    "SmartdocClient",
    "ClientConfig",
    "build_base_url",
    "FallbackValue",
    "SmartdocClientError",
    "ApiError",
    "AuthError",
    "ValidationError",
    "ServerError",
    "NetworkError",
    "RetryPolicy",
    "SessionAccessor",
    "AnonymousSession",
    "StaticSession",
]
