from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

API_URL_DEFAULT = "http://localhost:8000"
API_PREFIX_DEFAULT = "/api/v1"
ENV_API_URL = "SMARTDOC_API_URL"
ENV_API_PREFIX = "SMARTDOC_API_PREFIX"

DEFAULT_TIMEOUT_MS = 30_000
REPORT_TIMEOUT_MS = 60_000
DOCUMENT_TIMEOUT_MS = 120_000


def build_base_url(api_url: str | None = None, api_prefix: str | None = None) -> str:
    url = (api_url or os.getenv(ENV_API_URL, "") or API_URL_DEFAULT).strip().rstrip("/")
    prefix = api_prefix if api_prefix is not None else os.getenv(ENV_API_PREFIX, API_PREFIX_DEFAULT)
    prefix = (prefix or "").strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    return f"{url}{prefix}"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    default_headers: Mapping[str, str] = field(default_factory=dict)
    client_version: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_headers", MappingProxyType(dict(self.default_headers)))
