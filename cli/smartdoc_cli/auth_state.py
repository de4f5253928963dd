from __future__ import annotations

import os
from dataclasses import dataclass

from .config import ENV_TOKEN, AppConfig, config_path, load_config, save_config


class ConfigSession:
    """Session accessor backed by the token stored in config.toml.

    `SMARTDOC_TOKEN` takes precedence over the stored token. Invalidation
    clears both the in-memory token and the saved one.
    """

    def __init__(self, cfg: AppConfig, *, persist: bool = True):
        self._cfg = cfg
        self._persist = persist
        self._env_token = os.getenv(ENV_TOKEN, "").strip() or None

    def get_current_token(self) -> str | None:
        if self._env_token:
            return self._env_token
        return (self._cfg.auth.token or "").strip() or None

    def invalidate(self) -> None:
        self._env_token = None
        if not self._cfg.auth.token:
            return
        self._cfg.auth.token = ""
        if self._persist:
            save_config(self._cfg)


@dataclass
class AuthContext:
    state: str


def resolve_auth_context() -> AuthContext:
    if os.getenv(ENV_TOKEN, "").strip():
        return AuthContext(state="token_present")
    if not os.path.exists(config_path()):
        return AuthContext(state="no_config")
    cfg = load_config()
    if not (cfg.auth.token or "").strip():
        return AuthContext(state="no_token")
    return AuthContext(state="token_present")
