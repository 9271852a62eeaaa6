"""Search, IP detail and ping entry points used by the CLI and other callers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any

from pydantic import BaseModel, Field

from lansearch.config import Settings
from lansearch.core import (
    BatchPlan,
    IpAggregator,
    PingOrchestrator,
    SearchDispatcher,
    SystemPingProber,
    classify,
)
from lansearch.errors import InvalidQuery
from lansearch.models import (
    ExactIP,
    IpDetail,
    PingResult,
    RangeIP,
    RecordType,
    ScanEntry,
    SearchOptions,
    SearchRecord,
    WildcardIP,
)
from lansearch.plugins import (
    FreeboxSource,
    PluginRegistry,
    ScannerSource,
    SnapshotProvider,
    UniFiSource,
)
from lansearch.plugins.scanner import EntryProvider
from lansearch.storage import Database

logger = logging.getLogger(__name__)

MAX_RANGE_HOSTS = 254


class SearchRequest(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    query: str
    plugin_ids: list[str] | None = None
    types: list[RecordType] | None = None
    exact_match: bool = True
    case_sensitive: bool = False


class SearchResponse(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    query: str
    count: int
    results: list[SearchRecord] = Field(default_factory=list)
    details: IpDetail | None = None


class SearchService:
    def __init__(
        self,
        registry: PluginRegistry,
        settings: Settings | None = None,
        pinger: PingOrchestrator | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._registry = registry
        timeout = self._settings.search.plugin_timeout
        self._dispatcher = SearchDispatcher(registry, timeout=timeout)
        self._aggregator = IpAggregator(registry, timeout=timeout)
        self.pinger = pinger or PingOrchestrator(config=self._settings.ping)

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    async def search(self, request: SearchRequest) -> SearchResponse:
        query = request.query.strip()
        intent = classify(query)
        options = SearchOptions(
            case_sensitive=request.case_sensitive,
            exact_match=request.exact_match,
            types=frozenset(request.types) if request.types else None,
        )
        logger.debug("Searching %r as %s", query, intent.kind)

        if request.exact_match and isinstance(intent, ExactIP):
            results, details = await asyncio.gather(
                self._dispatcher.search(intent, request.plugin_ids, options),
                self._aggregator.aggregate(
                    intent, request.plugin_ids, self._settings.priority
                ),
            )
        else:
            results = await self._dispatcher.search(
                intent, request.plugin_ids, options
            )
            details = None

        return SearchResponse(
            query=query, count=len(results), results=results, details=details
        )

    async def ip_details(
        self, ip: str, plugin_ids: Iterable[str] | None = None
    ) -> IpDetail:
        intent = classify(ip)
        if not isinstance(intent, ExactIP):
            raise InvalidQuery(f"Invalid IP address: {ip}")
        return await self._aggregator.aggregate(
            intent, plugin_ids, self._settings.priority
        )

    async def ping(self, target: str, count: int | None = None) -> PingResult:
        return await self.pinger.ping(target, count)

    def range_plan(self, query: str) -> BatchPlan:
        """Batch plan for the hosts of a wildcard, dashed range or CIDR block."""
        intent = classify(query)
        if isinstance(intent, WildcardIP):
            hosts = intent.expand()
        elif isinstance(intent, RangeIP):
            hosts = intent.expand(limit=MAX_RANGE_HOSTS)
            if hosts[-1] != intent.end:
                logger.warning(
                    "Range %s truncated to its first %d hosts", query, MAX_RANGE_HOSTS
                )
        else:
            raise InvalidQuery(f"Not an IP range: {query}")
        return self.pinger.plan(hosts)

    def ping_results(
        self,
        records: BatchPlan | Iterable[SearchRecord | str],
        stop: asyncio.Event | None = None,
    ) -> AsyncIterator[tuple[str, PingResult]]:
        if isinstance(records, BatchPlan):
            return self.pinger.run_plan(records, stop)
        return self.pinger.run_batch(records, stop)


def _snapshot_provider(db: Database, plugin_id: str) -> SnapshotProvider:
    async def load() -> dict[str, Any] | None:
        return await asyncio.to_thread(db.load_snapshot, plugin_id)

    return load


def _entries_provider(db: Database) -> EntryProvider:
    async def load() -> list[ScanEntry]:
        return await asyncio.to_thread(db.load_scan_entries)

    return load


def build_registry(
    settings: Settings, db: Database, pinger: PingOrchestrator | None = None
) -> PluginRegistry:
    """Register the enabled plugins, wired to the snapshots stored in ``db``."""
    registry = PluginRegistry()
    for plugin_id in settings.plugins.enabled:
        if plugin_id == "freebox":
            registry.register(FreeboxSource(_snapshot_provider(db, plugin_id)))
        elif plugin_id == "unifi":
            registry.register(UniFiSource(_snapshot_provider(db, plugin_id)))
        elif plugin_id == "scanner":
            # The live check has to end inside the source budget.
            live_timeout = settings.search.plugin_timeout / 2
            registry.register(
                ScannerSource(
                    _entries_provider(db), pinger=pinger, live_timeout=live_timeout
                )
            )
        else:
            logger.warning("Unknown plugin '%s' in configuration", plugin_id)
    return registry


def build_service(
    settings: Settings, db: Database, live_ping: bool = False
) -> SearchService:
    """Service with the system ping prober; live scanner pings when asked."""
    pinger = PingOrchestrator(SystemPingProber(settings.ping), settings.ping)
    registry = build_registry(settings, db, pinger if live_ping else None)
    return SearchService(registry, settings, pinger)
