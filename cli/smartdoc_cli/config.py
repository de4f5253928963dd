from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from smartdoc_client.config_types import (
    API_PREFIX_DEFAULT,
    API_URL_DEFAULT,
    DEFAULT_TIMEOUT_MS,
    ENV_API_PREFIX,
    ENV_API_URL,
)
from smartdoc_client.retry import DEFAULT_BACKOFF_MS, DEFAULT_MAX_ATTEMPTS

from . import console

APP_NAME = "smartdoc"
CONFIG_FILENAME = "config.toml"
ENV_TOKEN = "SMARTDOC_TOKEN"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AuthConfig:
    token: str = ""
    token_type: str = "bearer"


@dataclass
class RetryConfig:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_ms: int = DEFAULT_BACKOFF_MS


@dataclass
class AppConfig:
    api_url: str
    auth: AuthConfig
    api_prefix: str = API_PREFIX_DEFAULT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retry: RetryConfig = field(default_factory=RetryConfig)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        api_url=API_URL_DEFAULT,
        auth=AuthConfig(token="", token_type="bearer"),
        api_prefix=API_PREFIX_DEFAULT,
        timeout_ms=DEFAULT_TIMEOUT_MS,
        retry=RetryConfig(),
    )


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def normalize_prefix(raw: str | None) -> str:
    value = (raw or "").strip().rstrip("/")
    if value and not value.startswith("/"):
        value = f"/{value}"
    return value


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"api_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "api_url": cfg.api_url,
        "api_prefix": cfg.api_prefix,
        "timeout_ms": int(cfg.timeout_ms),
        "auth": {
            "token": cfg.auth.token,
            "token_type": cfg.auth.token_type,
        },
        "retry": {
            "max_attempts": int(cfg.retry.max_attempts),
            "backoff_ms": int(cfg.retry.backoff_ms),
        },
    }


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    api_url = normalize_base_url(str(data.get("api_url") or ""), warn=True)
    if api_url:
        cfg.api_url = api_url
    if "api_prefix" in data:
        cfg.api_prefix = normalize_prefix(str(data.get("api_prefix") or ""))
    cfg.timeout_ms = _int_or(data.get("timeout_ms"), DEFAULT_TIMEOUT_MS)

    auth_raw = data.get("auth") or {}
    if isinstance(auth_raw, dict):
        cfg.auth = AuthConfig(
            token=str(auth_raw.get("token") or ""),
            token_type=str(auth_raw.get("token_type") or "bearer"),
        )

    retry_raw = data.get("retry") or {}
    if isinstance(retry_raw, dict):
        cfg.retry = RetryConfig(
            max_attempts=max(1, _int_or(retry_raw.get("max_attempts"), DEFAULT_MAX_ATTEMPTS)),
            backoff_ms=max(0, _int_or(retry_raw.get("backoff_ms"), DEFAULT_BACKOFF_MS)),
        )
    return cfg


def _read_toml() -> dict[str, Any] | None:
    try:
        with open(config_path(), "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return None


def load_config() -> AppConfig:
    data = _read_toml()
    if data is None:
        return default_config()
    return from_toml(data)


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    data = _read_toml()
    if data is None:
        return cfg

    profiles_raw = data.get("profiles") or {}
    if not isinstance(profiles_raw, dict):
        return cfg
    prof = profiles_raw.get(profile)
    if not isinstance(prof, dict):
        return cfg

    api_url = normalize_base_url(str(prof.get("api_url") or cfg.api_url), warn=True)
    api_prefix = normalize_prefix(str(prof["api_prefix"])) if "api_prefix" in prof else cfg.api_prefix
    token = str(prof.get("token") or cfg.auth.token)
    return AppConfig(
        api_url=api_url or cfg.api_url,
        auth=AuthConfig(token=token, token_type=cfg.auth.token_type),
        api_prefix=api_prefix,
        timeout_ms=_int_or(prof.get("timeout_ms"), cfg.timeout_ms),
        retry=cfg.retry,
    )


def resolve_api_url(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_API_URL, "").strip()
    if env_value:
        return normalize_base_url(env_value)
    return (cfg.api_url or API_URL_DEFAULT).strip().rstrip("/")


def resolve_api_prefix(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_API_PREFIX)
    if env_value is not None:
        return normalize_prefix(env_value)
    return normalize_prefix(cfg.api_prefix)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    data = _read_toml() or {}
    data.update(to_toml(cfg))
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(data).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
