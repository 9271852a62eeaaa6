from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from lansearch.core import BatchPlan, is_ip_range
from lansearch.models import PingResult
from lansearch.services import SearchService, build_service
from lansearch.storage import Database
from lansearch.utils.net import is_private_ipv4

from .common import build_database, format_latency, load_settings_or_exit, run_or_exit


async def _collect(
    service: SearchService, plan: BatchPlan
) -> list[tuple[str, PingResult]]:
    return [pair async for pair in service.ping_results(plan)]


def _ping_range(
    console: Console, service: SearchService, db: Database, target: str, save: bool
) -> None:
    plan = service.range_plan(target)
    if not plan.targets:
        console.print(f"No private address to ping in {target}.")
        if plan.refused:
            raise typer.Exit(1)
        return

    try:
        results = run_or_exit(_collect(service, plan))
    except KeyboardInterrupt:
        console.print("\n[yellow]Ping interrupted.[/yellow]")
        raise typer.Exit(130) from None

    table = Table(title=f"Ping {target}")
    table.add_column("IP", style="cyan", no_wrap=True)
    table.add_column("Result")
    online = 0
    for ip, result in results:
        if result.success:
            online += 1
            table.add_row(ip, f"[green]{format_latency(result.latency_ms)}[/green]")
        else:
            kind = result.error_kind.value if result.error_kind else "unreachable"
            table.add_row(ip, f"[red]{kind}[/red]")
        if save:
            db.record_ping(ip, result)

    console.print(table)
    console.print(f"\n[green]{online} of {len(results)} host(s) answered[/green]")
    if plan.refused:
        console.print(f"Skipped {len(plan.refused)} public address(es).")


def register(app: typer.Typer) -> None:
    @app.command()
    def ping(
        target: str = typer.Argument(
            ...,
            help=(
                "IPv4 address or domain name, or a private range to sweep "
                "(192.168.1.*, 192.168.1.10-50, 192.168.1.0/24)"
            ),
        ),
        count: int | None = typer.Option(
            None,
            "--count",
            "-c",
            min=1,
            max=10,
            help="Echo requests to send to a single target",
        ),
        save: bool = typer.Option(
            True, help="Record the outcome of private addresses in the scanner table"
        ),
    ) -> None:
        """Ping one target, or every private host of a range one by one.

        Public addresses are allowed for a single target only.
        """
        console = Console()
        settings = load_settings_or_exit()
        db = build_database(settings)
        service = build_service(settings, db)

        target = target.strip()
        if is_ip_range(target):
            _ping_range(console, service, db, target, save)
            return

        result = run_or_exit(service.ping(target, count))

        if result.success:
            console.print(
                f"[green]{target} is reachable[/green] "
                f"({format_latency(result.latency_ms)})"
            )
        else:
            kind = result.error_kind.value if result.error_kind else "unreachable"
            console.print(f"[red]{target} did not answer[/red] ({kind})")

        if save and is_private_ipv4(target):
            db.record_ping(target, result)

        if not result.success:
            raise typer.Exit(2)
