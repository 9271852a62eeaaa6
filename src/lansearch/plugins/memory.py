from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from lansearch.core.matching import filter_records
from lansearch.models import QueryIntent, SearchOptions, SearchRecord

from .base import PluginResultSource


class StaticSource(PluginResultSource):
    """In-memory source with fixed content, for tests and demos.

    ``records`` are returned unfiltered unless ``match`` is set, so a test can
    feed records the dispatcher is expected to reject.
    """

    def __init__(
        self,
        plugin_id: str,
        records: Iterable[SearchRecord] = (),
        details: Mapping[str, dict[str, Any]] | None = None,
        *,
        plugin_name: str | None = None,
        match: bool = False,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.plugin_id = plugin_id
        self.plugin_name = plugin_name or plugin_id
        self._records = list(records)
        self._details = dict(details or {})
        self._match = match
        self._delay = delay
        self._error = error
        self.search_calls = 0
        self.detail_calls = 0

    async def _wait(self) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error

    async def search(
        self, intent: QueryIntent, options: SearchOptions
    ) -> list[SearchRecord]:
        self.search_calls += 1
        await self._wait()
        if self._match:
            return filter_records(self._records, intent, options)
        return list(self._records)

    async def fetch_ip_detail(self, ip: str) -> dict[str, Any] | None:
        self.detail_calls += 1
        await self._wait()
        detail = self._details.get(ip)
        return dict(detail) if detail is not None else None
