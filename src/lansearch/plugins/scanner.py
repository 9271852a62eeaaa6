"""Local network scanner table with OUI vendor fallback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from typing import Any

from lansearch.core.matching import filter_records
from lansearch.core.ping import PingOrchestrator
from lansearch.core.vendor import is_valid_vendor, lookup_vendor
from lansearch.models import (
    QueryIntent,
    RecordType,
    ScanEntry,
    SearchOptions,
    SearchRecord,
    compact,
)
from lansearch.utils.net import is_private_ipv4

from .base import PluginResultSource

logger = logging.getLogger(__name__)

EntryProvider = Callable[[], Awaitable[list[ScanEntry]]]

DEFAULT_LIVE_TIMEOUT = 2.0


def _vendor(entry: ScanEntry) -> tuple[str | None, str | None]:
    if is_valid_vendor(entry.vendor):
        return str(entry.vendor).strip(), entry.vendor_source
    detected = lookup_vendor(entry.mac)
    if detected:
        return detected, "oui"
    return None, None


class ScannerSource(PluginResultSource):
    plugin_id = "scanner"
    plugin_name = "Network Scanner"

    def __init__(
        self,
        entries: EntryProvider,
        pinger: PingOrchestrator | None = None,
        live_timeout: float = DEFAULT_LIVE_TIMEOUT,
    ) -> None:
        self._entries = entries
        self._pinger = pinger
        self._live_timeout = live_timeout

    async def search(
        self, intent: QueryIntent, options: SearchOptions
    ) -> list[SearchRecord]:
        entries = await self._entries()
        records = [record for record in self._records(entries) if record is not None]
        return filter_records(records, intent, options)

    def _records(self, entries: list[ScanEntry]) -> Iterator[SearchRecord | None]:
        for entry in entries:
            vendor, vendor_source = _vendor(entry)
            yield self.make_record(
                RecordType.DEVICE,
                id=entry.ip,
                name=entry.hostname or vendor or entry.ip,
                ip=entry.ip,
                mac=entry.mac,
                hostname=entry.hostname,
                active=entry.status == "online",
                last_seen=entry.last_seen,
                additional_data={
                    "vendor": vendor,
                    "status": entry.status,
                    "pingLatency": entry.ping_latency,
                    "hostnameSource": entry.hostname_source,
                    "vendorSource": vendor_source,
                    "scanCount": entry.scan_count,
                },
            )

    async def _live_status(
        self, pinger: PingOrchestrator, ip: str, latency: int | None
    ) -> tuple[str, int | None]:
        """One echo, bounded so the stored entry outlives a silent host."""
        try:
            result = await asyncio.wait_for(
                pinger.ping(ip, count=1), timeout=self._live_timeout
            )
        except (asyncio.TimeoutError, TimeoutError):
            logger.debug("Live ping of %s timed out", ip)
            return "offline", latency
        if result.latency_ms is not None:
            latency = result.latency_ms
        status = "online" if result.success else "offline"
        logger.debug("Live status of %s: %s", ip, status)
        return status, latency

    async def fetch_ip_detail(self, ip: str) -> dict[str, Any] | None:
        entries = await self._entries()
        entry = next((e for e in entries if e.ip == ip), None)

        status = entry.status if entry else "unknown"
        latency = entry.ping_latency if entry else None
        if self._pinger is not None and is_private_ipv4(ip):
            status, latency = await self._live_status(self._pinger, ip, latency)

        if entry is None:
            if status == "online":
                return compact({"status": status, "ping_latency": latency})
            return None

        vendor, vendor_source = _vendor(entry)
        return compact(
            {
                "mac": entry.mac,
                "hostname": entry.hostname,
                "vendor": vendor,
                "hostname_source": entry.hostname_source,
                "vendor_source": vendor_source,
                "status": status,
                "ping_latency": latency,
                "first_seen": entry.first_seen,
                "last_seen": entry.last_seen,
                "scan_count": entry.scan_count,
                "additional_info": entry.additional_info or None,
            }
        )
