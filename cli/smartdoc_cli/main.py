from __future__ import annotations

import typer

from .commands import account_cmd, analyze_cmd, auth_cmd, health_cmd, report_cmd, samples_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="smartdoc",
        help="SmartDoc document analysis CLI",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(auth_cmd.app, name="auth")
    app.add_typer(analyze_cmd.app, name="analyze")
    app.add_typer(samples_cmd.app, name="samples")
    app.add_typer(report_cmd.app, name="report")
    app.command("health")(health_cmd.health)
    app.command("stats")(account_cmd.stats)
    app.command("history")(account_cmd.history)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
