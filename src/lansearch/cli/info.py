from __future__ import annotations

import typer
from rich.console import Console

from .common import build_database, load_settings_or_exit, resolve_config_path_or_exit


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show lansearch data directory info and stats."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)

        console = Console()

        console.print("[bold]lansearch Info[/bold]\n")
        console.print(f"Data directory: {db.path}")
        console.print(f"Scanner table: {db.hosts_path}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]Configuration[/bold]")
        console.print(f"Enabled plugins: {', '.join(settings.plugins.enabled)}")
        console.print(f"Plugin timeout: {settings.search.plugin_timeout}s")
        console.print(
            f"Ping: {settings.ping.count} echo(es), "
            f"{settings.ping.delay}s between batch targets"
        )
        console.print(
            f"Hostname priority: {' > '.join(settings.priority.hostname)}"
        )
        console.print(f"Vendor priority: {' > '.join(settings.priority.vendor)}")

        console.print("\n[bold]Statistics[/bold]")
        snapshots = db.list_snapshots()
        console.print(f"Snapshots: {', '.join(snapshots) if snapshots else 'none'}")
        try:
            entries = db.load_scan_entries()
        except ValueError as exc:
            console.print(f"[red]Scanner table unreadable:[/red] {exc}")
            return
        online = sum(1 for entry in entries if entry.status == "online")
        console.print(f"Scanner hosts: {len(entries)} ({online} online)")
