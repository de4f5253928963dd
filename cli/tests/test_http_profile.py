from __future__ import annotations

from smartdoc_cli import config
from smartdoc_cli.http import make_client


def test_make_client_uses_profile_config(tmp_path, monkeypatch) -> None:
    def _config_dir(_: str) -> str:
        return str(tmp_path)

    monkeypatch.setattr(config, "user_config_dir", _config_dir)
    monkeypatch.delenv("SMARTDOC_API_URL", raising=False)
    monkeypatch.delenv("SMARTDOC_API_PREFIX", raising=False)
    monkeypatch.delenv("SMARTDOC_TOKEN", raising=False)
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_text(
        '\n'.join(
            [
                'api_url = "http://default.test"',
                "",
                "[auth]",
                'token = "default-token"',
                "",
                "[profiles.prod]",
                'api_url = "https://prod.test"',
                'api_prefix = "/api/v2"',
                'token = "prod-token"',
                "",
            ]
        ),
        encoding="utf-8",
    )

    cfg = config.load_config()
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg, *, session, on_session_expired, retry_policy):
            captured["base_url"] = client_cfg.base_url
            captured["token"] = session.get_current_token()
            captured["max_attempts"] = retry_policy.max_attempts

    monkeypatch.setattr("smartdoc_cli.http.SmartdocClient", _FakeClient)

    make_client(cfg, profile="prod", base_url_override=None)

    assert captured["base_url"] == "https://prod.test/api/v2"
    assert captured["token"] == "prod-token"
    assert captured["max_attempts"] == 2


def test_make_client_normalizes_base_url_override(monkeypatch) -> None:
    cfg = config.default_config()
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg, **_kwargs):
            captured["base_url"] = client_cfg.base_url

    monkeypatch.setattr("smartdoc_cli.http.SmartdocClient", _FakeClient)

    make_client(cfg, profile=None, base_url_override="example.com/api/v1/")

    assert captured["base_url"] == "https://example.com/api/v1"


def test_make_client_builds_real_client_with_timeout(monkeypatch) -> None:
    monkeypatch.delenv("SMARTDOC_API_URL", raising=False)
    monkeypatch.delenv("SMARTDOC_API_PREFIX", raising=False)
    cfg = config.default_config()
    cfg.timeout_ms = 45000

    client = make_client(cfg, profile=None, base_url_override=None)

    assert client.config.base_url == "http://localhost:8000/api/v1"
    assert client.config.timeout_ms == 45000


def test_make_client_adds_prefix_to_bare_host_override(monkeypatch) -> None:
    monkeypatch.delenv("SMARTDOC_API_PREFIX", raising=False)
    cfg = config.default_config()
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg, **_kwargs):
            captured["base_url"] = client_cfg.base_url

    monkeypatch.setattr("smartdoc_cli.http.SmartdocClient", _FakeClient)

    make_client(cfg, profile=None, base_url_override="api.example.com/")

    assert captured["base_url"] == "https://api.example.com/api/v1"
