from __future__ import annotations

from typing import Annotated

import typer

from lansearch.config import Settings, render_settings_toml, write_settings

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Show or create the config file.")


@app.command("show")
def show_config(
    defaults: Annotated[
        bool,
        typer.Option("--defaults", help="Show built-in defaults instead"),
    ] = False,
) -> None:
    """Print the effective configuration as TOML."""
    if defaults:
        typer.echo(render_settings_toml(Settings()))
        return

    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)
    typer.echo(f"Config source: {path if exists else 'defaults'}")
    typer.echo(render_settings_toml(settings))


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write the default configuration (all sources enabled, router first)."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path} (use --force to replace it)")
        return

    write_settings(Settings(), path)
    typer.echo(f"Wrote default config to {path}")
    typer.echo("Import source snapshots with 'lansearch import PLUGIN FILE'.")
