from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from lansearch.config import PRIORITY_SOURCES

from .common import build_database, load_settings_or_exit


def register(app: typer.Typer) -> None:
    @app.command("import")
    def import_snapshot(
        plugin: str = typer.Argument(..., help="freebox, unifi or scanner"),
        file: Path = typer.Argument(
            ..., exists=True, dir_okay=False, help="JSON file to import"
        ),
    ) -> None:
        """Import a source snapshot (or the scanner host table) from JSON."""
        console = Console()
        if plugin not in PRIORITY_SOURCES:
            typer.echo(
                f"Unknown plugin '{plugin}' (expected one of: "
                f"{', '.join(PRIORITY_SOURCES)})",
                err=True,
            )
            raise typer.Exit(1)

        settings = load_settings_or_exit()
        db = build_database(settings)
        try:
            if plugin == "scanner":
                entries = db.import_scan_entries(file)
                console.print(
                    f"[green]✓[/green] Imported {len(entries)} host(s) "
                    f"into {db.hosts_path}"
                )
                return
            target = db.import_snapshot(plugin, file)
        except (OSError, ValueError) as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        console.print(f"[green]✓[/green] Imported {plugin} snapshot to {target}")
