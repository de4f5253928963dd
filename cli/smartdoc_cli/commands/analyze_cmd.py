from __future__ import annotations

from pathlib import Path

import typer
from smartdoc_client import SmartdocClientError
from smartdoc_client.encoders import FilePart, UploadRejected, check_upload

from .. import console
from ..config import load_config
from ..http import exit_on_error, make_client, run_with_client
from ..render import render_feedback, render_legal, render_text_analysis

MIN_TEXT_LENGTH = 10

app = typer.Typer(help="Analyze text and documents.")


def _read_text(text: str | None, file: Path | None) -> str:
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except OSError as exc:
            console.err(f"Cannot read {file}: {exc}")
            raise typer.Exit(code=2)
    return text or ""


def _require_text(value: str) -> str:
    value = value.strip()
    if len(value) < MIN_TEXT_LENGTH:
        console.err(f"Text must be at least {MIN_TEXT_LENGTH} characters.")
        raise typer.Exit(code=2)
    return value


def _load_upload(path: Path) -> FilePart:
    try:
        part = FilePart.from_input(path)
        check_upload(part)
    except OSError as exc:
        console.err(f"Cannot read {path}: {exc}")
        raise typer.Exit(code=2)
    except UploadRejected as exc:
        console.err(f"{path.name}: {exc}")
        raise typer.Exit(code=2)
    return part


@app.command("text")
def analyze_text(
        text: str | None = typer.Argument(None, help="Text to analyze."),
        file: Path | None = typer.Option(None, "--file", "-f", help="Read text from a file."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = _require_text(_read_text(text, file))
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.analyze_text(body))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    if json_out:
        console.print_json(result)
        return
    render_text_analysis(result)


@app.command("legal")
def analyze_legal(
        path: Path = typer.Argument(..., help="Document to analyze (.pdf, .docx, .doc, .txt)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    part = _load_upload(path)
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.analyze_legal_document(part))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    if json_out:
        console.print_json(result)
        return
    render_legal(result)


@app.command("feedback")
def analyze_feedback(
        text: str | None = typer.Argument(None, help="Feedback text."),
        file: Path | None = typer.Option(None, "--file", "-f", help="Read feedback from a file."),
        source: str | None = typer.Option(None, "--source", help="Where the feedback came from."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = _require_text(_read_text(text, file))
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.analyze_feedback(body, source=source))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    if json_out:
        console.print_json(result)
        return
    render_feedback(result)


@app.command("batch")
def analyze_batch(
        paths: list[Path] = typer.Argument(..., help="Documents to analyze."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
):
    parts = [_load_upload(p) for p in paths]
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.batch_analyze(parts))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    console.print_json(result)


@app.command("compare")
def compare(
        first: Path = typer.Argument(..., help="First document."),
        second: Path = typer.Argument(..., help="Second document."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API URL (the API prefix is added when no path is given)."),
):
    a = _load_upload(first)
    b = _load_upload(second)
    client = make_client(load_config(), profile=None, base_url_override=base_url)
    try:
        result = run_with_client(client, lambda c: c.compare_documents(a, b))
    except SmartdocClientError as exc:
        exit_on_error(exc)
    console.print_json(result)
