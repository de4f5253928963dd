from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_url, normalize_prefix, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/smartdoc/config.toml).")

_INT_KEYS = {"timeout_ms", "retry.max_attempts", "retry.backoff_ms"}


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        api_url: str = typer.Option(
            ...,
            "--api-url",
            prompt="API URL",
            help="API URL like http://localhost:8000",
        ),
        api_prefix: str = typer.Option("/api/v1", "--api-prefix", help="API path prefix."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.api_url = normalize_base_url(api_url, warn=True)
    if not cfg.api_url:
        console.err("API URL cannot be empty.")
        raise typer.Exit(code=2)
    cfg.api_prefix = normalize_prefix(api_prefix)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    token_state = "(set)" if (cfg.auth.token or "").strip() else "(empty)"
    console.print(
        f"api_url={cfg.api_url} api_prefix={cfg.api_prefix} timeout_ms={cfg.timeout_ms} "
        f"retry.max_attempts={cfg.retry.max_attempts} retry.backoff_ms={cfg.retry.backoff_ms} token={token_state}"
    )


@app.command("set")
def set_setting(
        key: str = typer.Argument(..., help="api_url, api_prefix, timeout_ms, retry.max_attempts, retry.backoff_ms"),
        value: str = typer.Argument(..., help="New value."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k in _INT_KEYS:
        try:
            number = int(value)
        except ValueError:
            console.err(f"{key} must be an integer.")
            raise typer.Exit(code=2)
        if number < (1 if k != "retry.backoff_ms" else 0):
            console.err(f"{key} is out of range.")
            raise typer.Exit(code=2)
        if k == "timeout_ms":
            cfg.timeout_ms = number
        elif k == "retry.max_attempts":
            cfg.retry.max_attempts = number
        else:
            cfg.retry.backoff_ms = number
    elif k == "api_url":
        cfg.api_url = normalize_base_url(value, warn=True)
        if not cfg.api_url:
            console.err("API URL cannot be empty.")
            raise typer.Exit(code=2)
    elif k == "api_prefix":
        cfg.api_prefix = normalize_prefix(value)
    else:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"{k} updated in {saved}")
