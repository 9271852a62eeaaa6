"""Turn a free-form search string into a typed query intent.

Precedence is fixed: exact IP, wildcard IP, IP range (CIDR or dashed), MAC
address, free text. A CIDR block becomes the range of its host addresses.
Strings that are clearly IP-shaped but malformed raise InvalidQuery instead
of falling through to a hostname search.
"""

from __future__ import annotations

import ipaddress
import re

from pydantic import ValidationError

from lansearch.errors import EmptyQuery, InvalidQuery
from lansearch.models import (
    ExactIP,
    FreeText,
    MacPattern,
    QueryIntent,
    RangeIP,
    WildcardIP,
)
from lansearch.utils.net import IPV4_SHAPE, parse_octets

WILDCARD_SHAPE = re.compile(
    r"^([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{0,3})\*$"
)
SHORT_RANGE_END = re.compile(r"^[0-9]{1,3}$")
CIDR_SHAPE = re.compile(r"^((?:[0-9]{1,3}\.){3}[0-9]{1,3})/([0-9]{1,3})$")
MAC_FULL = re.compile(r"^[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$")
MAC_PREFIX = re.compile(r"^([0-9A-Fa-f]{2}(?:([:-])[0-9A-Fa-f]{2}){0,4})[:-]?\*$")


def classify(raw: str) -> QueryIntent:
    query = (raw or "").strip()
    if not query:
        raise EmptyQuery()

    if IPV4_SHAPE.match(query):
        return _exact_ip(query)

    wildcard = WILDCARD_SHAPE.match(query)
    if wildcard:
        return _wildcard_ip(query, wildcard)

    cidr = CIDR_SHAPE.match(query)
    if cidr:
        return _cidr_range(query, cidr)

    if query.count("-") == 1:
        left, right = (part.strip() for part in query.split("-"))
        if IPV4_SHAPE.match(left) and (
            SHORT_RANGE_END.match(right) or IPV4_SHAPE.match(right)
        ):
            return _range_ip(query, left, right)

    mac = _mac_pattern(query)
    if mac is not None:
        return mac

    return FreeText(text=query)


def is_ip_range(query: str) -> bool:
    """True for a well-formed wildcard, dashed range or CIDR block."""
    try:
        return isinstance(classify(query), (WildcardIP, RangeIP))
    except InvalidQuery:
        return False


def _exact_ip(query: str) -> ExactIP:
    if parse_octets(query) is None:
        raise InvalidQuery(f"Invalid IP address: {query} (octets must be 0-255)")
    return ExactIP(address=query)


def _wildcard_ip(query: str, match: re.Match[str]) -> WildcardIP:
    a, b, c = (int(group) for group in match.group(1, 2, 3))
    if any(octet > 255 for octet in (a, b, c)):
        raise InvalidQuery(f"Invalid IP wildcard: {query} (octets must be 0-255)")

    digits = match.group(4)
    if not digits:
        return WildcardIP(prefix_octets=(a, b, c), trailing_pattern="*")

    if len(digits) > 2 or digits.startswith("0"):
        raise InvalidQuery(f"Invalid IP wildcard: {query}")
    intent = WildcardIP(prefix_octets=(a, b, c), trailing_pattern=f"{digits}*")
    if not intent.last_octets():
        raise InvalidQuery(f"Invalid IP wildcard: {query} (no octet value matches)")
    return intent


def _range_ip(query: str, left: str, right: str) -> RangeIP:
    start_octets = parse_octets(left)
    if start_octets is None:
        raise InvalidQuery(f"Invalid IP range: {query} (octets must be 0-255)")

    if SHORT_RANGE_END.match(right):
        last = int(right)
        if last > 255:
            raise InvalidQuery(f"Invalid IP range: {query} (octets must be 0-255)")
        if start_octets[3] > last:
            raise InvalidQuery(f"Invalid IP range: {query} (start is after end)")
        end = ".".join(str(octet) for octet in (*start_octets[:3], last))
    else:
        if parse_octets(right) is None:
            raise InvalidQuery(f"Invalid IP range: {query} (octets must be 0-255)")
        end = right

    try:
        return RangeIP(start=left, end=end)
    except ValidationError as exc:
        raise InvalidQuery(f"Invalid IP range: {query} (start is after end)") from exc


def _cidr_range(query: str, match: re.Match[str]) -> RangeIP:
    address, prefix = match.group(1, 2)
    if parse_octets(address) is None or int(prefix) > 32:
        raise InvalidQuery(
            f"Invalid CIDR range: {query} (octets must be 0-255, prefix 0-32)"
        )
    network = ipaddress.IPv4Network(f"{address}/{int(prefix)}", strict=False)
    first, last = network.network_address, network.broadcast_address
    # /31 and /32 have no network or broadcast address to skip.
    if network.prefixlen <= 30:
        first, last = first + 1, last - 1
    return RangeIP(start=str(first), end=str(last))


def _mac_pattern(query: str) -> MacPattern | None:
    if MAC_FULL.match(query):
        segments = re.split(r"[:-]", query.upper())
        return MacPattern(segments=tuple(segments), has_wildcard=False)

    prefix = MAC_PREFIX.match(query)
    if prefix:
        body = prefix.group(1)
        separators = set(re.findall(r"[:-]", query[:-1]))
        if len(separators) > 1:
            return None
        segments = re.split(r"[:-]", body.upper())
        return MacPattern(segments=tuple(segments), has_wildcard=True)

    return None
