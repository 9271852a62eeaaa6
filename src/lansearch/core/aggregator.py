"""Unified per-IP view built from every source's detail blob."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from lansearch.config import PriorityConfig
from lansearch.core.dispatcher import DEFAULT_PLUGIN_TIMEOUT, fan_out
from lansearch.core.vendor import is_valid_vendor
from lansearch.errors import InvalidQuery
from lansearch.models import ConnectionType, ExactIP, IpDetail

if TYPE_CHECKING:
    from lansearch.plugins import PluginRegistry

logger = logging.getLogger(__name__)

SCANNER_ID = "scanner"

Path = tuple[str, ...]

FIELD_PATHS: dict[str, dict[str, tuple[Path, ...]]] = {
    "hostname": {
        "freebox": (("dhcp", "hostname"), ("hostname",), ("name",)),
        "unifi": (("client", "hostname"), ("client", "name"), ("device", "name")),
        "scanner": (("hostname",),),
    },
    "vendor": {
        "freebox": (("vendor",),),
        "unifi": (("client", "oui"), ("device", "vendor")),
        "scanner": (("vendor",),),
    },
}
DEFAULT_PATHS: dict[str, tuple[Path, ...]] = {
    "hostname": (("hostname",),),
    "vendor": (("vendor",),),
}

WIRELESS_HINTS = ("ssid", "essid", "ap_mac", "ap_name")


def _lookup(blob: Mapping[str, Any], path: Path) -> tuple[bool, Any]:
    node: Any = blob
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return False, None
        node = node[key]
    return True, node


def _usable(field: str, value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if field == "vendor" and not is_valid_vendor(text):
        return None
    return text


def report(
    field: str, source_id: str, blob: Mapping[str, Any]
) -> tuple[bool, str | None]:
    """Whether a source reports ``field`` at all, and its first usable value."""
    paths = FIELD_PATHS[field].get(source_id, DEFAULT_PATHS[field])
    reported = False
    for path in paths:
        found, value = _lookup(blob, path)
        if not found:
            continue
        reported = True
        usable = _usable(field, value)
        if usable is not None:
            return True, usable
    return reported, None


def merge_field(
    field: str,
    sources: Mapping[str, Mapping[str, Any]],
    order: Iterable[str],
    overwrite: bool,
) -> tuple[str | None, str | None]:
    """Pick (value, source_id) for a field by source priority.

    Sources listed in ``order`` are consulted first, the rest in the order
    they appear in ``sources``. The first non-empty value wins. Without
    ``overwrite`` a source that reported the field blank locks it.
    """
    ranked = [source_id for source_id in order if source_id in sources]
    ranked += [source_id for source_id in sources if source_id not in ranked]

    for source_id in ranked:
        reported, value = report(field, source_id, sources[source_id])
        if not reported:
            continue
        if value is not None:
            return value, source_id
        if not overwrite:
            logger.debug("%s left empty by '%s' and locked", field, source_id)
            return None, None
    return None, None


def connection_type(
    sources: Mapping[str, Mapping[str, Any]],
) -> ConnectionType | None:
    for blob in sources.values():
        for candidate in (blob.get("client"), blob):
            if not isinstance(candidate, Mapping):
                continue
            if candidate.get("is_wireless") is True:
                return "wireless"
            if candidate.get("is_wired") is True:
                return "wired"
            if any(candidate.get(hint) for hint in WIRELESS_HINTS):
                return "wireless"
            if candidate.get("sw_port"):
                return "wired"
    return None


class IpAggregator:
    def __init__(
        self,
        registry: PluginRegistry,
        timeout: float = DEFAULT_PLUGIN_TIMEOUT,
        scanner_id: str = SCANNER_ID,
    ) -> None:
        self._registry = registry
        self._timeout = timeout
        self._scanner_id = scanner_id

    async def aggregate(
        self,
        intent: ExactIP,
        plugin_ids: Iterable[str] | None = None,
        priority: PriorityConfig | None = None,
    ) -> IpDetail:
        if not isinstance(intent, ExactIP):
            raise InvalidQuery("IP details need an exact IPv4 address")
        priority = priority or PriorityConfig()

        plugins = self._registry.select(plugin_ids)
        scanner = self._registry.get(self._scanner_id)
        if scanner is not None and scanner not in plugins:
            plugins.append(scanner)

        results, _ = await fan_out(
            [
                (plugin.plugin_id, plugin.fetch_ip_detail(intent.address))
                for plugin in plugins
            ],
            self._timeout,
        )
        sources = {source_id: blob for source_id, blob in results if blob}
        logger.debug(
            "Details for %s from: %s", intent.address, ", ".join(sources) or "none"
        )

        hostname, hostname_source = merge_field(
            "hostname",
            sources,
            priority.order("hostname"),
            priority.overwrite("hostname"),
        )
        vendor, vendor_source = merge_field(
            "vendor",
            sources,
            priority.order("vendor"),
            priority.overwrite("vendor"),
        )
        return IpDetail(
            ip=intent.address,
            sources=sources,
            hostname=hostname,
            hostname_source=hostname_source,
            vendor=vendor,
            vendor_source=vendor_source,
            connection=connection_type(sources),
        )
