from __future__ import annotations

from datetime import datetime, timezone

import typer
from smartdoc_client import SmartdocClientError

from ..config import load_config
from ..console import err, ok, print_json
from ..http import make_client, run_with_client


def health(
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_output: bool = typer.Option(False, "--json", help="Output JSON only."),
) -> None:
    """Check that the analysis backend is reachable."""
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    endpoint = client.config.base_url
    result: dict[str, object] = {
        "checked_at": datetime.now(timezone.utc).isoformat(),
        "base_url": endpoint,
        "ok": False,
    }
    try:
        data = run_with_client(client, lambda c: c.health())
    except SmartdocClientError as exc:
        result["error"] = str(exc)
        if json_output:
            print_json(result)
        else:
            err(f"Backend at {endpoint} is unhealthy: {exc}")
        raise typer.Exit(code=2)

    result["ok"] = True
    result["backend"] = data
    if json_output:
        print_json(result)
        return
    status = data.get("status") or "ok"
    version = data.get("version")
    ok(f"Backend at {endpoint} is {status}" + (f" (version {version})." if version else "."))
