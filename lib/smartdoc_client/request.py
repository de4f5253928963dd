from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .encoders import JsonBody, MultipartBody


class ResponseKind(str, enum.Enum):
    JSON = "json"
    BINARY = "binary"


class RetryPhase(str, enum.Enum):
    INITIAL = "initial"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass
class RetryState:
    attempt: int = 1
    max_attempts: int = 2
    phase: RetryPhase = RetryPhase.INITIAL


@dataclass
class RequestDescriptor:
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: JsonBody | MultipartBody | None = None
    response_kind: ResponseKind = ResponseKind.JSON
    timeout_override_ms: int | None = None
    params: dict[str, Any] | None = None
    retry_state: RetryState = field(default_factory=RetryState)

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @property
    def is_multipart(self) -> bool:
        return isinstance(self.body, MultipartBody)

    def describe(self) -> str:
        return f"{self.method} {self.path}"


def header_lookup(headers: dict[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def without_header(headers: dict[str, str], name: str) -> dict[str, str]:
    lowered = name.lower()
    return {k: v for k, v in headers.items() if k.lower() != lowered}
