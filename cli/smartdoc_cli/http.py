from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, NoReturn, TypeVar
from urllib.parse import urlsplit

import typer
from smartdoc_client import ApiError, ClientConfig, RetryPolicy, SmartdocClient, SmartdocClientError, build_base_url
from smartdoc_client.errors_utils import format_api_error

from . import console
from .auth_state import ConfigSession
from .compat import cli_version
from .config import AppConfig, apply_profile, normalize_base_url, resolve_api_prefix, resolve_api_url

T = TypeVar("T")


def _signin_redirect() -> None:
    console.warn("Session expired. Run `smartdoc auth login` to sign in again.")


def make_client(
        cfg: AppConfig,
        *,
        profile: str | None,
        base_url_override: str | None,
) -> SmartdocClient:
    effective_cfg = apply_profile(cfg, profile)
    if base_url_override:
        base_url = normalize_base_url(base_url_override, warn=True)
        if not urlsplit(base_url).path:
            base_url = build_base_url(base_url, resolve_api_prefix(effective_cfg))
    else:
        base_url = build_base_url(resolve_api_url(effective_cfg), resolve_api_prefix(effective_cfg))

    return SmartdocClient(
        ClientConfig(
            base_url=base_url,
            timeout_ms=effective_cfg.timeout_ms,
            client_version=cli_version(),
        ),
        session=ConfigSession(effective_cfg, persist=not profile),
        on_session_expired=_signin_redirect,
        retry_policy=RetryPolicy(
            max_attempts=effective_cfg.retry.max_attempts,
            backoff_ms=effective_cfg.retry.backoff_ms,
        ),
    )


def run_with_client(client: SmartdocClient, call: Callable[[SmartdocClient], Awaitable[T]]) -> T:
    """Run one API call on a fresh event loop and close the client afterwards."""

    async def _run() -> Any:
        try:
            return await call(client)
        finally:
            await client.aclose()

    return asyncio.run(_run())


def exit_on_error(exc: SmartdocClientError) -> NoReturn:
    if isinstance(exc, ApiError):
        console.err(format_api_error(exc))
    else:
        console.err(f"Backend unreachable: {exc}")
    raise typer.Exit(code=2)
