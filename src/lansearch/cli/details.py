from __future__ import annotations

import json

import typer
from rich.console import Console

from lansearch.services import build_service
from lansearch.utils.redaction import Redactor

from .common import build_database, load_settings_or_exit, run_or_exit
from .search import print_details


def register(app: typer.Typer) -> None:
    @app.command()
    def details(
        ip: str = typer.Argument(..., help="IPv4 address to look up"),
        plugins: list[str] | None = typer.Option(
            None, "--plugin", "-p", help="Only query this plugin (repeatable)"
        ),
        live: bool = typer.Option(
            False, "--live", help="Ping private addresses to refresh their status"
        ),
        as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
        redact: bool = typer.Option(
            False,
            "--redact",
            help="Redact sensitive values in output",
        ),
    ) -> None:
        """Show what every source knows about one IP address."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        service = build_service(settings, db, live_ping=live)

        detail = run_or_exit(service.ip_details(ip, plugins or None))

        if as_json:
            typer.echo(json.dumps(detail.as_payload(), indent=2, default=str))
            return

        console = Console()
        if not detail.sources:
            console.print(f"No source knows about {ip}.")
            return
        print_details(console, detail, Redactor(enabled=redact))
