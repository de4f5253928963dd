from __future__ import annotations

import typer
from smartdoc_client import SmartdocClientError

from .. import console
from ..config import load_config
from ..http import exit_on_error, make_client, run_with_client
from ..render import render_history, render_stats


def stats(
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Show usage statistics."""
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    result = run_with_client(client, lambda c: c.get_user_stats())
    if json_out:
        console.print_json(result)
        return
    render_stats(result)


def history(
        limit: int = typer.Option(10, "--limit", min=1, help="Number of analyses to show."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Show recent analyses."""
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.get_user_history(limit))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    if json_out:
        console.print_json(result)
        return
    render_history(result)
