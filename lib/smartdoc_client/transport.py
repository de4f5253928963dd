from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .config_types import ClientConfig
from .encoders import JsonBody, MultipartBody, decode_response
from .errors import NetworkError, api_error_for_status
from .request import RequestDescriptor, ResponseKind, header_lookup

logger = logging.getLogger(__name__)

USER_AGENT = "smartdoc-client/0.1.0"

ACCEPT_BY_KIND = {
    ResponseKind.JSON: "application/json",
    ResponseKind.BINARY: "application/pdf, */*",
}


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self._cfg = cfg
        headers = {"User-Agent": USER_AGENT}
        if cfg.client_version:
            headers["X-Client-Version"] = cfg.client_version
        # Content-Type is per request; a client-wide value would override the multipart boundary.
        headers.update({k: v for k, v in cfg.default_headers.items() if k.lower() != "content-type"})

        self._client = httpx.AsyncClient(
            base_url=cfg.base_url.rstrip("/"),
            timeout=cfg.timeout_ms / 1000,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, request: RequestDescriptor) -> Any:
        headers = dict(request.headers)
        if header_lookup(headers, "Accept") is None:
            headers["Accept"] = ACCEPT_BY_KIND.get(request.response_kind, "*/*")
        kwargs: dict[str, Any] = {"headers": headers}
        if request.params:
            kwargs["params"] = request.params
        if request.timeout_override_ms is not None:
            kwargs["timeout"] = request.timeout_override_ms / 1000
        if isinstance(request.body, JsonBody):
            kwargs["content"] = json.dumps(request.body.value, ensure_ascii=False).encode("utf-8")
        elif isinstance(request.body, MultipartBody):
            kwargs["files"] = request.body.httpx_files()
            if request.body.fields:
                kwargs["data"] = request.body.fields

        try:
            r = await self._client.request(request.method, request.path, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(f"{request.describe()} timed out: {e}", timeout=True) from e
        except httpx.RequestError as e:
            raise NetworkError(f"{request.describe()} failed: {e}") from e

        logger.debug("%s -> %s", request.describe(), r.status_code)
        if r.status_code >= 400:
            raise _error_from_response(request, r)
        return decode_response(r, request.response_kind)


def _error_from_response(request: RequestDescriptor, r: httpx.Response):
    msg = f"{request.describe()} failed with {r.status_code}"
    details = None
    detail = None

    # Try parse body as json for better errors
    data: Any = None
    try:
        data = r.json()
    except ValueError:
        data = None

    if isinstance(data, dict) and ("detail" in data or "error" in data):
        details = json.dumps(data, ensure_ascii=False)
        detail = data.get("detail", data.get("error"))
        if isinstance(detail, str) and detail:
            msg = detail
    elif r.text:
        details = r.text[:1000]

    return api_error_for_status(r.status_code)(r.status_code, msg, details, detail)
