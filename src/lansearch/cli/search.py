from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.table import Table

from lansearch.errors import PingErrorKind
from lansearch.models import IpDetail, PingEntry, RecordType, SearchRecord
from lansearch.services import SearchRequest, SearchService, build_service
from lansearch.utils.redaction import Redactor

from .common import build_database, format_latency, load_settings_or_exit, run_or_exit

logger = logging.getLogger(__name__)


async def _search_and_ping(
    service: SearchService, request: SearchRequest, ping: bool
) -> tuple[list[SearchRecord], IpDetail | None, dict[str, PingEntry], list[str]]:
    response = await service.search(request)
    if not (ping and response.results):
        return response.results, response.details, {}, []

    plan = service.pinger.plan(response.results)
    async for ip, result in service.ping_results(plan):
        logger.debug("Ping %s: %s", ip, result)
    pings = service.pinger.board.snapshot()
    return response.results, response.details, pings, plan.refused


def _ping_cell(ip: str | None, pings: dict[str, PingEntry]) -> str:
    entry = pings.get(ip) if ip else None
    if entry is None or entry.result is None:
        return "-"
    result = entry.result
    if result.success:
        return f"[green]{format_latency(result.latency_ms)}[/green]"
    kind = result.error_kind or PingErrorKind.UNREACHABLE
    return f"[red]{kind.value}[/red]"


def print_details(console: Console, detail: IpDetail, redactor: Redactor) -> None:
    table = Table(title=f"Details for {redactor.redact_ip(detail.ip)}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="yellow")

    table.add_row("Hostname", detail.hostname or "-", detail.hostname_source or "")
    table.add_row("Vendor", detail.vendor or "-", detail.vendor_source or "")
    table.add_row("Connection", detail.connection or "-", "")
    table.add_row("Sources", ", ".join(detail.sources) or "none", "")

    scanner = detail.source("scanner") or {}
    if scanner.get("status"):
        table.add_row("Status", str(scanner["status"]), "scanner")
    if scanner.get("ping_latency") is not None:
        table.add_row("Latency", format_latency(scanner["ping_latency"]), "scanner")
    dhcp = (detail.source("freebox") or {}).get("dhcp")
    if isinstance(dhcp, dict):
        lease = "static" if dhcp.get("static") else "dynamic"
        table.add_row("DHCP lease", lease, "freebox")
    client = (detail.source("unifi") or {}).get("client")
    if isinstance(client, dict):
        if client.get("ssid"):
            table.add_row("SSID", str(client["ssid"]), "unifi")
        if client.get("ap_name"):
            table.add_row("Access point", str(client["ap_name"]), "unifi")
        if client.get("sw_port") is not None:
            table.add_row("Switch port", str(client["sw_port"]), "unifi")

    console.print(table)


def register(app: typer.Typer) -> None:
    @app.command()
    def search(
        query: str = typer.Argument(
            ...,
            help=(
                "IP (192.168.1.10), wildcard (192.168.1.*), range (192.168.1.10-50 "
                "or 192.168.1.0/24), MAC (AA:BB:CC:*) or text"
            ),
        ),
        plugins: list[str] | None = typer.Option(
            None, "--plugin", "-p", help="Only query this plugin (repeatable)"
        ),
        types: list[RecordType] | None = typer.Option(
            None, "--type", "-t", help="Only return this record type (repeatable)"
        ),
        extended: bool = typer.Option(
            False,
            "--extended",
            help="Substring IP matching and MAC prefix matching",
        ),
        case_sensitive: bool = typer.Option(
            False, "--case-sensitive", help="Case-sensitive text matching"
        ),
        ping: bool = typer.Option(
            False, "--ping", help="Ping the private addresses found, one by one"
        ),
        redact: bool = typer.Option(
            False,
            "--redact",
            help="Redact sensitive values in output",
        ),
    ) -> None:
        """Search every enabled source for devices, leases and clients."""
        console = Console()

        settings = load_settings_or_exit()
        db = build_database(settings)
        service = build_service(settings, db)

        request = SearchRequest(
            query=query,
            plugin_ids=plugins or None,
            types=types or None,
            exact_match=settings.search.exact_match and not extended,
            case_sensitive=case_sensitive or settings.search.case_sensitive,
        )
        logger.debug("Plugins: %s", ", ".join(service.registry.ids) or "none")

        try:
            records, details, pings, refused = run_or_exit(
                _search_and_ping(service, request, ping)
            )
        except KeyboardInterrupt:
            console.print("\n[yellow]Search interrupted.[/yellow]")
            raise typer.Exit(130) from None

        redactor = Redactor(enabled=redact)
        if details is not None and details.sources:
            print_details(console, details, redactor)

        if not records:
            console.print("No results.")
            return

        table = Table()
        table.add_column("Source", style="yellow")
        table.add_column("Type")
        table.add_column("Name", style="green")
        table.add_column("IP", style="cyan", no_wrap=True)
        table.add_column("MAC Address", no_wrap=True)
        table.add_column("Hostname")
        table.add_column("Active")
        if ping:
            table.add_column("Ping")

        for record in records:
            active = "" if record.active is None else ("yes" if record.active else "no")
            row = [
                record.plugin_name,
                record.type.value,
                record.name,
                redactor.redact_ip(record.ip),
                redactor.redact_mac(record.mac),
                record.hostname or "",
                active,
            ]
            if ping:
                row.append(_ping_cell(record.ip, pings))
            table.add_row(*row)

        console.print(table)
        console.print(f"\n[green]Found {len(records)} result(s)[/green]")
        if refused:
            console.print(
                f"Skipped {len(refused)} public address(es); "
                "use 'lansearch ping' to probe them."
            )
