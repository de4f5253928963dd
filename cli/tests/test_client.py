from __future__ import annotations

import asyncio
import json
import time

import httpx
import pytest

from smartdoc_client import (
    AuthError,
    ClientConfig,
    NetworkError,
    ServerError,
    StaticSession,
    ValidationError,
)
from smartdoc_client.encoders import FilePart

from conftest import BASE_URL


def _timeouts(request: httpx.Request) -> set[float]:
    return set(request.extensions["timeout"].values())


def test_analyze_text_posts_json_and_passes_422_detail_through(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(422, json={"detail": "Text must be at least 10 characters"})

    client = make_client(handler)

    async def _run():
        async with client:
            await client.analyze_text("short")

    with pytest.raises(ValidationError) as exc:
        asyncio.run(_run())

    assert exc.value.status_code == 422
    assert exc.value.message == "Text must be at least 10 characters"
    assert len(seen) == 1
    req = seen[0]
    assert req.method == "POST"
    assert req.url == httpx.URL(f"{BASE_URL}/analyze/text")
    assert req.headers["content-type"] == "application/json"
    assert json.loads(req.content) == {"text": "short", "analysis_type": "text"}


def test_analyze_legal_document_uploads_multipart_with_extended_timeout(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        seen.append(request)
        return httpx.Response(200, json={"success": True, "parties": []})

    client = make_client(handler)
    part = FilePart.from_bytes("contract.pdf", b"%" * (2 * 1024 * 1024))

    async def _run():
        async with client:
            return await client.analyze_legal_document(part)

    result = asyncio.run(_run())

    assert result == {"success": True, "parties": []}
    req = seen[0]
    content_type = req.headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    assert b'name="file"; filename="contract.pdf"' in req.content
    assert _timeouts(req) == {120.0}


def test_default_requests_use_configured_timeout(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "healthy"})

    client = make_client(handler)

    async def _run():
        async with client:
            return await client.health()

    assert asyncio.run(_run()) == {"status": "healthy"}
    assert _timeouts(seen[0]) == {30.0}
    assert seen[0].headers["content-type"] == "application/json"


def test_client_wide_content_type_never_reaches_multipart(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    cfg = ClientConfig(base_url=BASE_URL, default_headers={"Content-Type": "application/json", "X-App": "web"})
    client = make_client(handler, cfg=cfg)

    async def _run():
        async with client:
            await client.compare_documents(
                FilePart.from_bytes("a.txt", b"one"),
                FilePart.from_bytes("b.txt", b"two"),
            )

    asyncio.run(_run())
    req = seen[0]
    assert req.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert req.headers["x-app"] == "web"


def test_auth_header_follows_session(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"documents": [], "count": 0})

    anon = make_client(handler, session=StaticSession(None))
    authed = make_client(handler)

    async def _run():
        async with anon:
            await anon.get_sample_documents()
        async with authed:
            await authed.get_sample_documents()

    asyncio.run(_run())
    assert "authorization" not in seen[0].headers
    assert seen[1].headers["authorization"] == "Bearer tok-123"


def test_401_invalidates_session_and_still_raises(make_client, session) -> None:
    redirects: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "Not authenticated"})

    client = make_client(handler, on_session_expired=lambda: redirects.append("/login"))

    async def _run():
        async with client:
            await client.get_user_history(10)

    with pytest.raises(AuthError) as exc:
        asyncio.run(_run())

    assert exc.value.status_code == 401
    assert session.get_current_token() is None
    assert redirects == ["/login"]


def test_history_network_failure_retries_once_after_backoff(make_client, sleep) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectTimeout("timed out", request=request)

    client = make_client(handler)

    async def _run():
        async with client:
            await client.get_user_history(10)

    with pytest.raises(NetworkError) as exc:
        asyncio.run(_run())

    assert exc.value.timeout is True
    assert len(calls) == 2
    assert sleep.delays == [2.0]
    assert calls[0].url.params["limit"] == "10"


def test_retry_recovers_when_second_attempt_succeeds(make_client, sleep) -> None:
    attempts = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["n"] += 1
        if attempts["n"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"analyses": [{"id": 1}]})

    client = make_client(handler)

    async def _run():
        async with client:
            return await client.get_user_history(5)

    assert asyncio.run(_run()) == {"analyses": [{"id": 1}]}
    assert sleep.delays == [2.0]


def test_uploads_are_never_retried(make_client, sleep) -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        raise httpx.ConnectError("connection reset", request=request)

    client = make_client(handler)

    async def _run():
        async with client:
            await client.batch_analyze([FilePart.from_bytes("a.pdf", b"1"), FilePart.from_bytes("b.pdf", b"2")])

    with pytest.raises(NetworkError):
        asyncio.run(_run())
    assert calls["n"] == 1
    assert sleep.delays == []


def test_server_errors_are_not_retried(make_client, sleep) -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(503, json={"detail": "Database unavailable"})

    client = make_client(handler)

    async def _run():
        async with client:
            await client.get_user_history()

    with pytest.raises(ServerError) as exc:
        asyncio.run(_run())
    assert exc.value.message == "Database unavailable"
    assert calls["n"] == 1
    assert sleep.delays == []


def test_user_stats_degrades_to_demo_data(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    client = make_client(handler)

    async def _run():
        async with client:
            return await client.get_user_stats()

    result = asyncio.run(_run())
    assert result["is_demo"] is True
    assert "total_analyses" in result["stats"]


def test_user_stats_passes_real_data_through(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "stats": {"total_analyses": 3}})

    client = make_client(handler)

    async def _run():
        async with client:
            return await client.get_user_stats()

    result = asyncio.run(_run())
    assert result == {"success": True, "stats": {"total_analyses": 3}}


def test_download_report_returns_bytes(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"%PDF-1.7 data", headers={"Content-Type": "application/pdf"})

    client = make_client(handler)

    async def _run():
        async with client:
            return await client.download_report({"success": True}, "smartdoc-report.pdf")

    blob = asyncio.run(_run())
    assert blob == b"%PDF-1.7 data"
    req = seen[0]
    assert req.url.path == "/api/v1/report/legal"
    assert req.headers["content-type"] == "application/json"
    assert json.loads(req.content) == {"analysis": {"success": True}, "filename": "smartdoc-report.pdf"}
    assert _timeouts(req) == {60.0}


def test_batch_and_compare_field_names(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        seen.append(request)
        return httpx.Response(200, json=[{"ok": True}])

    client = make_client(handler)

    async def _run():
        async with client:
            batch = await client.batch_analyze(
                [FilePart.from_bytes("a.txt", b"one"), FilePart.from_bytes("b.txt", b"two")]
            )
            await client.compare_documents(FilePart.from_bytes("x.txt", b"x"), FilePart.from_bytes("y.txt", b"y"))
            return batch

    batch = asyncio.run(_run())
    assert batch == {"items": [{"ok": True}]}
    assert seen[0].url.path == "/api/v1/analyze/batch-files"
    assert seen[0].content.count(b'name="files"') == 2
    assert _timeouts(seen[0]) == {120.0}
    assert seen[1].url.path == "/api/v1/compare"
    assert b'name="file1"; filename="x.txt"' in seen[1].content
    assert b'name="file2"; filename="y.txt"' in seen[1].content


def test_sample_key_is_quoted(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    client = make_client(handler)

    async def _run():
        async with client:
            await client.analyze_sample_document("nda/v2")

    asyncio.run(_run())
    assert seen[0].url.raw_path == b"/api/v1/samples/nda%2Fv2"


def test_feedback_source_is_optional(make_client) -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True})

    client = make_client(handler)

    async def _run():
        async with client:
            await client.analyze_feedback("Great service overall")
            await client.analyze_feedback("Great service overall", source="survey")

    asyncio.run(_run())
    assert bodies == [{"text": "Great service overall"}, {"text": "Great service overall", "source": "survey"}]


def test_history_timeouts_sequential_vs_concurrent(make_client) -> None:
    # 2 s backoff scaled down to 200 ms
    async def scaled_sleep(seconds: float) -> None:
        await asyncio.sleep(seconds / 10)

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async def _one(client):
        with pytest.raises(NetworkError):
            await client.get_user_history(10)

    async def _sequential() -> float:
        client = make_client(handler, sleep=scaled_sleep)
        async with client:
            start = time.monotonic()
            await _one(client)
            await _one(client)
            return time.monotonic() - start

    async def _concurrent() -> float:
        client = make_client(handler, sleep=scaled_sleep)
        async with client:
            start = time.monotonic()
            await asyncio.gather(_one(client), _one(client))
            return time.monotonic() - start

    sequential = asyncio.run(_sequential())
    concurrent = asyncio.run(_concurrent())

    assert sequential >= 0.39
    assert 0.19 <= concurrent < 0.35


def test_user_stats_401_signs_out_and_still_returns_demo_data(make_client, session) -> None:
    redirects: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "Not authenticated"})

    client = make_client(handler, on_session_expired=lambda: redirects.append("/login"))

    async def _run():
        async with client:
            return await client.get_user_stats()

    result = asyncio.run(_run())

    assert result["is_demo"] is True
    assert result["stats"]["total_analyses"] == 57
    assert session.get_current_token() is None
    assert redirects == ["/login"]


def test_accept_header_follows_response_kind(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/report/legal"):
            return httpx.Response(200, content=b"%PDF-1.7", headers={"Content-Type": "application/pdf"})
        return httpx.Response(200, json={"status": "healthy"})

    client = make_client(handler)

    async def _run():
        async with client:
            await client.health()
            await client.download_report({"success": True}, "report.pdf")

    asyncio.run(_run())
    assert seen[0].headers["accept"] == "application/json"
    assert seen[1].headers["accept"] == "application/pdf, */*"
