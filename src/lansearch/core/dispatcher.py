from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from lansearch.core.matching import filter_records
from lansearch.errors import AllSourcesFailed
from lansearch.models import QueryIntent, SearchOptions, SearchRecord

if TYPE_CHECKING:
    from lansearch.plugins import PluginRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PLUGIN_TIMEOUT = 5.0


class _Failed:
    def __init__(self, error: BaseException) -> None:
        self.error = error


async def _bounded(
    source_id: str, call: Awaitable[T], timeout: float
) -> T | _Failed:
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except (asyncio.TimeoutError, TimeoutError) as exc:
        logger.warning("Source '%s' timed out after %.1fs", source_id, timeout)
        return _Failed(exc)
    except Exception as exc:
        logger.warning("Source '%s' failed: %s", source_id, exc)
        logger.debug("Source '%s' failure details", source_id, exc_info=True)
        return _Failed(exc)


async def fan_out(
    calls: Sequence[tuple[str, Awaitable[T]]], timeout: float
) -> tuple[list[tuple[str, T]], dict[str, BaseException]]:
    """Run every call concurrently; results keep the order of ``calls``.

    Raises AllSourcesFailed when there was at least one call and none of them
    succeeded.
    """
    outcomes = await asyncio.gather(
        *(_bounded(source_id, call, timeout) for source_id, call in calls)
    )
    results: list[tuple[str, T]] = []
    failures: dict[str, BaseException] = {}
    for (source_id, _), outcome in zip(calls, outcomes):
        if isinstance(outcome, _Failed):
            failures[source_id] = outcome.error
        else:
            results.append((source_id, outcome))
    if calls and not results:
        raise AllSourcesFailed(failures)
    return results, failures


class SearchDispatcher:
    """Fan a classified query out to the selected plugins.

    Records come back in plugin registration order, each plugin's records in
    the order it returned them. A failing or slow plugin contributes nothing.
    """

    def __init__(
        self, registry: PluginRegistry, timeout: float = DEFAULT_PLUGIN_TIMEOUT
    ) -> None:
        self._registry = registry
        self._timeout = timeout

    async def search(
        self,
        intent: QueryIntent,
        plugin_ids: Iterable[str] | None = None,
        options: SearchOptions | None = None,
    ) -> list[SearchRecord]:
        options = options or SearchOptions()
        plugins = self._registry.select(plugin_ids)
        if not plugins:
            return []

        results, failures = await fan_out(
            [(plugin.plugin_id, plugin.search(intent, options)) for plugin in plugins],
            self._timeout,
        )

        records: list[SearchRecord] = []
        for plugin_id, plugin_records in results:
            kept = filter_records(plugin_records, intent, options)
            if len(kept) != len(plugin_records):
                logger.debug(
                    "Dropped %d non-matching record(s) from '%s'",
                    len(plugin_records) - len(kept),
                    plugin_id,
                )
            records.extend(kept)

        logger.debug(
            "Search returned %d record(s) from %d source(s), %d failed",
            len(records),
            len(results),
            len(failures),
        )
        return records
