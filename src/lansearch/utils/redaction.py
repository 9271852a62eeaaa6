from __future__ import annotations

from dataclasses import dataclass, field

from lansearch.utils.net import canonical_mac, is_ipv4


@dataclass
class Redactor:
    """Masks addresses in output meant to be shared.

    The last IPv4 octet stays visible so rows can still be told apart. MAC
    addresses keep their OUI and get a stable per-run counter.
    """

    enabled: bool = True
    _mac_map: dict[str, int] = field(default_factory=dict)
    _mac_counter: int = 0

    def redact_ip(self, ip: str | None) -> str:
        if ip is None:
            return ""
        if not self.enabled or not is_ipv4(ip):
            return ip
        return f"x.x.x.{ip.rsplit('.', 1)[1]}"

    def redact_mac(self, mac: str | None) -> str:
        if mac is None:
            return ""
        if not self.enabled:
            return mac
        key = canonical_mac(mac)
        if len(key) != 12:
            return mac
        separator = "-" if "-" in mac else ":"
        counter = self._mac_map.get(key)
        if counter is None:
            self._mac_counter += 1
            counter = self._mac_counter
            self._mac_map[key] = counter
        prefix = separator.join(key[i : i + 2] for i in range(0, 6, 2))
        return separator.join([prefix, "xx", "xx", f"{counter:02d}"])
