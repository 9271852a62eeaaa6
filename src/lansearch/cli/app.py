from __future__ import annotations

from typing import Annotated

import typer

from lansearch.utils.logging import setup_logging

from . import config as config_cmd
from .details import register as register_details
from .import_cmd import register as register_import
from .info import register as register_info
from .init_cmd import register as register_init
from .ping import register as register_ping
from .search import register as register_search

app = typer.Typer(
    help="lansearch - search devices, leases and clients across LAN sources",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")

register_init(app)
register_search(app)
register_details(app)
register_ping(app)
register_import(app)
register_info(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug output"),
    ] = False,
) -> None:
    """lansearch CLI."""
    setup_logging(verbose=verbose)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"lansearch version {get_version('lansearch')}")
        raise typer.Exit()
