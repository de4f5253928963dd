from __future__ import annotations

import typer
from smartdoc_client import SmartdocClientError

from .. import console
from ..config import load_config
from ..http import exit_on_error, make_client, run_with_client
from ..render import render_legal, render_samples

app = typer.Typer(help="Canned sample documents.")


@app.command("list")
def list_samples(
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.get_sample_documents())
    except SmartdocClientError as exc:
        exit_on_error(exc)
    if json_out:
        console.print_json(result)
        return
    render_samples(result)


@app.command("show")
def show_sample(
        key: str = typer.Argument(..., help="Sample document key."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.analyze_sample_document(key))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    if json_out:
        console.print_json(result)
        return
    render_legal(result)
