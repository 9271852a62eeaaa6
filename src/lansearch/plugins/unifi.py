"""WiFi controller source: access points, switches and connected clients."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

from lansearch.models import RecordType, SearchRecord
from lansearch.utils.net import canonical_mac

from .base import Snapshot, SnapshotSource

CLIENT_TYPES = {"client", "sta"}
SWITCH_PREFIXES = ("usw", "ugw")


def _kind(device: dict[str, Any]) -> str | None:
    device_type = str(device.get("type") or "").strip().lower()
    if device_type in ("ap", "accesspoint") or device_type.startswith("uap"):
        return "ap"
    if device_type in ("switch", "gateway") or device_type.startswith(SWITCH_PREFIXES):
        return "switch"
    if device_type in CLIENT_TYPES or not device_type:
        return "client"
    if device.get("ip") and not device.get("model"):
        return "client"
    return None


def _epoch(value: Any) -> datetime | None:
    if isinstance(value, (int, float)) and value > 0:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


def _is_client_device(device: dict[str, Any]) -> bool:
    return _kind(device) == "client" and not device.get("model")


def _find_infra(
    devices: list[dict[str, Any]], mac: str | None, kind: str
) -> dict[str, Any] | None:
    wanted = canonical_mac(mac)
    if not wanted:
        return None
    for device in devices:
        if canonical_mac(device.get("mac")) == wanted and _kind(device) == kind:
            return device
    return None


def _normalize_client(client: dict[str, Any]) -> dict[str, Any]:
    wired_port = client.get("sw_port") or client.get("sw_port_idx")
    signal = client.get("signal")
    rssi = client.get("rssi")
    if isinstance(signal, (int, float)) and signal < 0:
        rssi = signal

    normalized: dict[str, Any] = {
        **client,
        "name": client.get("name") or client.get("hostname"),
        "ssid": client.get("ssid")
        or client.get("essid")
        or client.get("wifi_ssid")
        or client.get("wlan_ssid"),
        "ap_mac": client.get("ap_mac") or (
            None if wired_port else client.get("last_uplink_mac")
        ),
        "ap_name": client.get("ap_name") or (
            None if wired_port else client.get("last_uplink_name")
        ),
        "sw_port": wired_port,
        "sw_mac": client.get("sw_mac") or (
            client.get("last_uplink_mac") if wired_port else None
        ),
        "rssi": rssi,
        "tx_rate": client.get("tx_rate") or client.get("phy_tx_rate"),
        "rx_rate": client.get("rx_rate") or client.get("phy_rx_rate"),
    }
    return normalized


class UniFiSource(SnapshotSource):
    plugin_id = "unifi"
    plugin_name = "UniFi"

    def records(self, stats: Snapshot) -> Iterator[SearchRecord | None]:
        devices = stats.get("devices") or []
        for device in devices:
            kind = _kind(device)
            if kind not in ("ap", "switch"):
                continue
            yield self.make_record(
                RecordType.AP if kind == "ap" else RecordType.SWITCH,
                id=device.get("id") or device.get("mac") or "",
                name=device.get("name") or device.get("model") or "Unknown Device",
                ip=device.get("ip"),
                mac=device.get("mac"),
                active=device.get("active"),
                last_seen=device.get("lastSeen"),
                additional_data=device,
            )

        seen: set[str] = set()
        for client in stats.get("clients") or []:
            key = client.get("mac") or client.get("_id") or ""
            seen.add(key)
            yield self.make_record(
                RecordType.CLIENT,
                id=client.get("_id") or client.get("mac") or "",
                name=client.get("name") or client.get("hostname") or "Unknown Client",
                ip=client.get("ip"),
                mac=client.get("mac"),
                hostname=client.get("hostname"),
                active=client.get("active", True),
                last_seen=_epoch(client.get("last_seen")),
                additional_data=client,
            )

        for device in devices:
            if _kind(device) != "client":
                continue
            if (device.get("mac") or device.get("id") or "") in seen:
                continue
            yield self.make_record(
                RecordType.CLIENT,
                id=device.get("id") or device.get("mac") or "",
                name=device.get("name") or device.get("hostname") or "Unknown Client",
                ip=device.get("ip"),
                mac=device.get("mac"),
                hostname=device.get("hostname"),
                active=device.get("active"),
                last_seen=device.get("lastSeen"),
                additional_data=device,
            )

    def detail(self, stats: Snapshot, ip: str) -> dict[str, Any] | None:
        devices = stats.get("devices") or []
        blob: dict[str, Any] = {}

        device = next(
            (d for d in devices if d.get("ip") == ip and _kind(d) in ("ap", "switch")),
            None,
        )
        if device is not None:
            blob["device"] = device

        client = next(
            (d for d in devices if d.get("ip") == ip and _is_client_device(d)), None
        )
        if client is None:
            client = next(
                (c for c in stats.get("clients") or [] if c.get("ip") == ip), None
            )
        if client is not None:
            normalized = _normalize_client(client)
            blob["client"] = normalized

            switch = _find_infra(devices, normalized.get("sw_mac"), "switch")
            if switch is not None:
                blob["switch"] = {
                    key: switch.get(key)
                    for key in ("name", "mac", "ip", "model", "port_table", "num_port")
                }
            ap = _find_infra(devices, normalized.get("ap_mac"), "ap")
            if ap is not None:
                blob["ap"] = {
                    key: ap.get(key) for key in ("name", "mac", "ip", "model", "ssids")
                }

        return blob or None
