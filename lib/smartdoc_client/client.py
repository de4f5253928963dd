from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, Mapping
from urllib.parse import quote

import httpx

from .config_types import DOCUMENT_TIMEOUT_MS, REPORT_TIMEOUT_MS, ClientConfig
from .degradation import USER_STATS, Degradation
from .encoders import FileInput, JsonBody, build_multipart
from .interceptors import InterceptorChain, default_chain
from .request import RequestDescriptor, ResponseKind
from .retry import RetryPolicy, Sleep
from .session import AnonymousSession, SessionAccessor
from .transport import Transport

logger = logging.getLogger(__name__)


class SmartdocClient:
    """Async client for the SmartDoc analysis API.

    Every call goes through the interceptor chain (auth stamping,
    content-type negotiation, session expiry) and the retry policy.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            session: SessionAccessor | None = None,
            on_session_expired: Callable[[], None] | None = None,
            retry_policy: RetryPolicy | None = None,
            degradation: Degradation | None = None,
            chain: InterceptorChain | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
            sleep: Sleep = asyncio.sleep,
    ):
        self._cfg = cfg
        self._session = session or AnonymousSession()
        self._chain = chain or default_chain(self._session, on_session_expired)
        self._retry = retry_policy or RetryPolicy()
        self._degradation = degradation or Degradation()
        self._sleep = sleep
        self._t = Transport(cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    async def aclose(self) -> None:
        await self._t.aclose()

    async def __aenter__(self) -> "SmartdocClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _descriptor(
            self,
            method: str,
            path: str,
            *,
            body=None,
            response_kind: ResponseKind = ResponseKind.JSON,
            timeout_ms: int | None = None,
            params: dict[str, Any] | None = None,
    ) -> RequestDescriptor:
        return RequestDescriptor(
            method=method,
            path=path,
            body=body,
            response_kind=response_kind,
            timeout_override_ms=timeout_ms,
            params=params,
            retry_state=self._retry.new_state(),
        )

    async def _send(self, request: RequestDescriptor) -> Any:
        prepared = self._chain.prepare(request)
        return await self._t.send(prepared)

    async def _dispatch(self, request: RequestDescriptor) -> Any:
        logger.debug("%s", request.describe())
        return await self._retry.execute(
            request,
            self._send,
            on_error=self._chain.inspect,
            sleep=self._sleep,
        )

    async def _request_json(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        """Internal helper for endpoints that should return JSON."""
        data = await self._dispatch(self._descriptor(method, path, **kwargs))
        if isinstance(data, dict):
            return data
        if isinstance(data, list):
            return {"items": data}
        return {"raw": data}

    # --- API methods ---
    async def health(self) -> dict[str, Any]:
        return await self._request_json("GET", "/health")

    async def analyze_text(self, text: str, *, analysis_type: str = "text") -> dict[str, Any]:
        body = JsonBody({"text": text, "analysis_type": analysis_type})
        return await self._request_json("POST", "/analyze/text", body=body)

    async def analyze_legal_document(self, file: FileInput) -> dict[str, Any]:
        body = build_multipart([("file", file)])
        return await self._request_json("POST", "/analyze/legal", body=body, timeout_ms=DOCUMENT_TIMEOUT_MS)

    async def analyze_feedback(self, text: str, *, source: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"text": text}
        if source:
            payload["source"] = source
        return await self._request_json("POST", "/analyze/feedback", body=JsonBody(payload))

    async def get_sample_documents(self) -> dict[str, Any]:
        return await self._request_json("GET", "/samples")

    async def analyze_sample_document(self, key: str) -> dict[str, Any]:
        return await self._request_json("GET", f"/samples/{quote(key, safe='')}")

    async def get_user_stats(self) -> dict[str, Any]:
        return await self._degradation.guard(USER_STATS, lambda: self._request_json("GET", "/stats"))

    async def get_user_history(self, limit: int = 10) -> dict[str, Any]:
        return await self._request_json("GET", "/history", params={"limit": int(limit)})

    async def download_report(self, analysis: Mapping[str, Any], filename: str) -> bytes:
        body = JsonBody({"analysis": dict(analysis), "filename": filename})
        request = self._descriptor(
            "POST",
            "/report/legal",
            body=body,
            response_kind=ResponseKind.BINARY,
            timeout_ms=REPORT_TIMEOUT_MS,
        )
        return await self._dispatch(request)

    async def batch_analyze(self, files: Iterable[FileInput]) -> dict[str, Any]:
        body = build_multipart([("files", f) for f in files])
        return await self._request_json("POST", "/analyze/batch-files", body=body, timeout_ms=DOCUMENT_TIMEOUT_MS)

    async def compare_documents(self, first: FileInput, second: FileInput) -> dict[str, Any]:
        body = build_multipart([("file1", first), ("file2", second)])
        return await self._request_json("POST", "/compare", body=body, timeout_ms=DOCUMENT_TIMEOUT_MS)
