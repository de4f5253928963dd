from __future__ import annotations

import json
from pathlib import Path

import typer
from smartdoc_client import SmartdocClientError

from .. import console
from ..config import load_config
from ..http import exit_on_error, make_client, run_with_client

DEFAULT_REPORT_NAME = "smartdoc-report.pdf"

app = typer.Typer(help="PDF reports.")


def _load_analysis(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        console.err(f"Cannot read {path}: {exc}")
        raise typer.Exit(code=2)
    except ValueError as exc:
        console.err(f"{path} is not valid JSON: {exc}")
        raise typer.Exit(code=2)
    if not isinstance(data, dict):
        console.err(f"{path} must contain a JSON object.")
        raise typer.Exit(code=2)
    return data


@app.command("download")
def download(
        analysis: Path | None = typer.Option(None, "--analysis", help="Analysis result saved with --json."),
        sample: str | None = typer.Option(None, "--sample", help="Analyze a sample document and render it."),
        out: Path = typer.Option(Path(DEFAULT_REPORT_NAME), "--out", "-o", help="Where to save the PDF."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
):
    if (analysis is None) == (sample is None):
        console.err("Pass exactly one of --analysis or --sample.")
        raise typer.Exit(code=2)
    payload = _load_analysis(analysis) if analysis is not None else None

    async def _call(client):
        data = payload if payload is not None else await client.analyze_sample_document(sample)
        return await client.download_report(data, out.name)

    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        blob = run_with_client(client, _call)
    except SmartdocClientError as exc:
        exit_on_error(exc)

    out.write_bytes(blob)
    console.ok(f"Report saved to {out} ({len(blob)} bytes).")
