"""Home router source: devices, DHCP leases and port forwarding rules."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from lansearch.models import RecordType, SearchRecord

from .base import Snapshot, SnapshotSource


def _dhcp(stats: Snapshot) -> dict[str, Any]:
    system = stats.get("system") or {}
    return system.get("dhcp") or {}


def _leases(stats: Snapshot) -> list[dict[str, Any]]:
    dhcp = _dhcp(stats)
    return [*(dhcp.get("leases") or []), *(dhcp.get("staticLeases") or [])]


def _port_forwarding(stats: Snapshot) -> list[dict[str, Any]]:
    rules = (stats.get("system") or {}).get("portForwarding")
    return rules if isinstance(rules, list) else []


def _lease_ip(lease: dict[str, Any]) -> str | None:
    if lease.get("ip"):
        return lease["ip"]
    if lease.get("static_ip"):
        return lease["static_ip"]
    for conn in lease.get("l3connectivities") or []:
        if conn.get("addr"):
            return conn["addr"]
    return None


def _lease_mac(lease: dict[str, Any]) -> str | None:
    return lease.get("mac") or (lease.get("l2ident") or {}).get("id")


def _lease_has_ip(lease: dict[str, Any], ip: str) -> bool:
    if ip in (lease.get("ip"), lease.get("static_ip")):
        return True
    return any(conn.get("addr") == ip for conn in lease.get("l3connectivities") or [])


class FreeboxSource(SnapshotSource):
    plugin_id = "freebox"
    plugin_name = "Freebox"

    def records(self, stats: Snapshot) -> Iterator[SearchRecord | None]:
        for device in stats.get("devices") or []:
            yield self.make_record(
                RecordType.DEVICE,
                id=device.get("id") or device.get("mac") or "",
                name=device.get("name") or "Unknown Device",
                ip=device.get("ip"),
                mac=device.get("mac"),
                hostname=device.get("hostname"),
                active=device.get("active"),
                last_seen=device.get("lastSeen"),
                additional_data={**device, "vendor": device.get("type")},
            )

        static_leases = _dhcp(stats).get("staticLeases") or []
        for lease in _leases(stats):
            hostname = lease.get("hostname") or lease.get("host")
            ip = _lease_ip(lease)
            yield self.make_record(
                RecordType.DHCP,
                id=_lease_mac(lease) or ip or "",
                name=hostname or "Unknown",
                ip=ip,
                mac=_lease_mac(lease),
                hostname=hostname,
                additional_data={
                    **lease,
                    "static": self._is_static(lease, static_leases),
                },
            )

        for rule in _port_forwarding(stats):
            wan_port = rule.get("wan_port_start")
            ip = rule.get("lan_ip") or rule.get("host_ip") or rule.get("host")
            yield self.make_record(
                RecordType.PORT_FORWARD,
                id=str(rule.get("id") or f"{wan_port}-{rule.get('lan_port')}"),
                name=rule.get("name") or rule.get("comment") or f"Port {wan_port}",
                ip=ip,
                port=wan_port or rule.get("lan_port"),
                additional_data={
                    **rule,
                    "protocol": rule.get("ip_proto") or rule.get("protocol"),
                    "wanPort": wan_port,
                    "lanPort": rule.get("lan_port"),
                },
            )

    def detail(self, stats: Snapshot, ip: str) -> dict[str, Any] | None:
        blob: dict[str, Any] = {}

        device = next(
            (d for d in stats.get("devices") or [] if d.get("ip") == ip), None
        )
        if device is not None:
            blob.update(device)

        lease = next(
            (item for item in _leases(stats) if _lease_has_ip(item, ip)), None
        )
        if lease is not None:
            static_leases = _dhcp(stats).get("staticLeases") or []
            blob["dhcp"] = {
                **lease,
                "ip": _lease_ip(lease) or ip,
                "hostname": lease.get("hostname")
                or lease.get("host")
                or lease.get("primary_name"),
                "mac": _lease_mac(lease),
                "static": self._is_static(lease, static_leases),
                "lease_time": lease.get("lease_time") or lease.get("leaseTime"),
                "comment": lease.get("comment") or lease.get("description"),
            }

        rules = [rule for rule in _port_forwarding(stats) if rule.get("lan_ip") == ip]
        if rules:
            blob["port_forwarding"] = [
                {
                    "id": rule.get("id"),
                    "enabled": rule.get("enabled") is not False,
                    "comment": rule.get("comment") or "",
                    "lan_port": rule.get("lan_port"),
                    "wan_port_start": rule.get("wan_port_start"),
                    "wan_port_end": rule.get("wan_port_end")
                    or rule.get("wan_port_start"),
                    "lan_ip": rule.get("lan_ip"),
                    "ip_proto": rule.get("ip_proto") or "tcp",
                    "src_ip": rule.get("src_ip"),
                }
                for rule in rules
            ]

        return blob or None

    @staticmethod
    def _is_static(lease: dict[str, Any], static_leases: list[dict[str, Any]]) -> bool:
        if "static" in lease:
            return lease["static"] is True
        ip, mac = _lease_ip(lease), _lease_mac(lease)
        for static in static_leases:
            if static is lease:
                return True
            if ip and static.get("ip") == ip:
                return True
            if mac and static.get("mac") == mac:
                return True
        return False
