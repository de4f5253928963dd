from __future__ import annotations

import typer

from .. import console
from ..auth_state import resolve_auth_context
from ..config import load_config, save_config

app = typer.Typer(help="Auth commands.")


@app.command("login")
def login(
        token: str = typer.Option(..., "--token", prompt=True, hide_input=True, help="Access token from the sign-in page."),
):
    value = token.strip()
    if not value:
        console.err("Token cannot be empty.")
        raise typer.Exit(code=2)
    cfg = load_config()
    cfg.auth.token = value
    cfg.auth.token_type = "bearer"
    save_path = save_config(cfg)
    console.ok(f"Token saved to {save_path}.")


@app.command("logout", help="Clear the stored access token.")
def logout():
    cfg = load_config()
    cfg.auth.token = ""
    save_path = save_config(cfg)
    console.ok(f"Token cleared from {save_path}.")


@app.command("status")
def status():
    ctx = resolve_auth_context()
    if ctx.state == "token_present":
        console.ok("Signed in (token present).")
    elif ctx.state == "no_token":
        console.info("Not signed in. Public endpoints only.")
    else:
        console.info("No config yet. Run `smartdoc settings init`.")
