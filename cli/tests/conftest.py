from __future__ import annotations

from typing import Callable

import httpx
import pytest

from smartdoc_client import ClientConfig, SmartdocClient, StaticSession

BASE_URL = "http://api.test/api/v1"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def session() -> StaticSession:
    return StaticSession("tok-123")


@pytest.fixture
def make_client(sleep, session) -> Callable[..., SmartdocClient]:
    def _make(handler, **kwargs) -> SmartdocClient:
        kwargs.setdefault("session", session)
        kwargs.setdefault("sleep", sleep)
        cfg = kwargs.pop("cfg", None) or ClientConfig(base_url=BASE_URL)
        return SmartdocClient(cfg, transport=httpx.MockTransport(handler), **kwargs)

    return _make
