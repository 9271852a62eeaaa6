from __future__ import annotations

import ipaddress
import re
import string

# ASCII digits only; str.isdigit() and \d also accept other scripts.
IPV4_SHAPE = re.compile(r"^(?:[0-9]{1,3}\.){3}[0-9]{1,3}$")

PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(block)
    for block in ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "127.0.0.0/8")
)


def parse_ipv4(value: str | None) -> ipaddress.IPv4Address | None:
    """Return the address for a dotted quad, or None if it is not one."""
    if not value or not IPV4_SHAPE.match(value):
        return None
    try:
        return ipaddress.IPv4Address(value)
    except ValueError:
        return None


def parse_octets(value: str) -> tuple[int, int, int, int] | None:
    """Return the four octets of a dotted quad, or None if it is not one."""
    address = parse_ipv4(value)
    if address is None:
        return None
    a, b, c, d = address.packed
    return a, b, c, d


def is_ipv4(value: str | None) -> bool:
    return parse_ipv4(value) is not None


def ipv4_to_int(value: str) -> int:
    address = parse_ipv4(value)
    if address is None:
        raise ValueError(f"Not an IPv4 address: {value!r}")
    return int(address)


def int_to_ipv4(number: int) -> str:
    return str(ipaddress.IPv4Address(number))


def is_private_ipv4(value: str | None) -> bool:
    address = parse_ipv4(value)
    if address is None:
        return False
    return any(address in network for network in PRIVATE_NETWORKS)


def canonical_mac(value: str | None) -> str:
    """Uppercase hex digits with separators stripped (AABBCCDDEEFF)."""
    if not value:
        return ""
    cleaned = value.replace(":", "").replace("-", "").replace(".", "")
    if all(ch in string.hexdigits for ch in cleaned):
        return cleaned.upper()
    return ""
