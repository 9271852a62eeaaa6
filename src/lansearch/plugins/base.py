from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from lansearch.core.matching import filter_records
from lansearch.models import (
    QueryIntent,
    RecordType,
    SearchOptions,
    SearchRecord,
    compact,
)

logger = logging.getLogger(__name__)

Snapshot = Mapping[str, Any]
SnapshotProvider = Callable[[], Awaitable[Snapshot | None]]


class PluginResultSource(ABC):
    """A data source the search core can query.

    ``search`` returns the records matching an intent and ``fetch_ip_detail``
    returns this source's view of one address, or None when it has nothing.
    """

    plugin_id: str
    plugin_name: str

    @abstractmethod
    async def search(
        self, intent: QueryIntent, options: SearchOptions
    ) -> list[SearchRecord]: ...

    @abstractmethod
    async def fetch_ip_detail(self, ip: str) -> dict[str, Any] | None: ...

    def make_record(
        self,
        record_type: RecordType,
        *,
        id: str,
        name: str,
        additional_data: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> SearchRecord | None:
        try:
            return SearchRecord(
                plugin_id=self.plugin_id,
                plugin_name=self.plugin_name,
                type=record_type,
                id=id,
                name=name,
                additional_data=compact(additional_data or {}),
                **{key: value for key, value in fields.items() if value is not None},
            )
        except ValidationError as exc:
            logger.debug("Skipping malformed %s record %r: %s", self.plugin_id, id, exc)
            return None


class SnapshotSource(PluginResultSource):
    """Source backed by the latest stats snapshot of a device connector."""

    def __init__(self, snapshot: SnapshotProvider) -> None:
        self._snapshot = snapshot

    async def search(
        self, intent: QueryIntent, options: SearchOptions
    ) -> list[SearchRecord]:
        stats = await self._snapshot()
        if not stats:
            return []
        records = [record for record in self.records(stats) if record is not None]
        return filter_records(records, intent, options)

    async def fetch_ip_detail(self, ip: str) -> dict[str, Any] | None:
        stats = await self._snapshot()
        if not stats:
            return None
        detail = self.detail(stats, ip)
        return compact(detail) if detail else None

    @abstractmethod
    def records(self, stats: Snapshot) -> Iterator[SearchRecord | None]: ...

    @abstractmethod
    def detail(self, stats: Snapshot, ip: str) -> dict[str, Any] | None: ...


class PluginRegistry:
    """Plugins keyed by id, iterated in registration order."""

    def __init__(self, plugins: Iterable[PluginResultSource] = ()) -> None:
        self._plugins: dict[str, PluginResultSource] = {}
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: PluginResultSource) -> None:
        if plugin.plugin_id in self._plugins:
            raise ValueError(f"Plugin already registered: {plugin.plugin_id}")
        self._plugins[plugin.plugin_id] = plugin
        logger.debug("Registered plugin '%s'", plugin.plugin_id)

    def get(self, plugin_id: str) -> PluginResultSource | None:
        return self._plugins.get(plugin_id)

    @property
    def ids(self) -> list[str]:
        return list(self._plugins)

    def select(
        self, plugin_ids: Iterable[str] | None = None
    ) -> list[PluginResultSource]:
        if plugin_ids is None:
            return list(self._plugins.values())
        wanted = set(plugin_ids)
        for unknown in sorted(wanted - self._plugins.keys()):
            logger.warning("Ignoring unknown plugin '%s'", unknown)
        return [plugin for pid, plugin in self._plugins.items() if pid in wanted]

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    def __iter__(self) -> Iterator[PluginResultSource]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)
