"""Typed query intents produced by the classifier."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from lansearch.utils.net import (
    canonical_mac,
    int_to_ipv4,
    ipv4_to_int,
    is_ipv4,
    parse_octets,
)

FULL_OCTET_WILDCARD = "*"


class ExactIP(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["exact_ip"] = "exact_ip"
    address: str

    def contains(self, ip: str | None) -> bool:
        return ip == self.address


class WildcardIP(BaseModel):
    """`a.b.c.*` (hosts 1-254) or `a.b.c.P*` (P followed by one more digit)."""

    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["wildcard_ip"] = "wildcard_ip"
    prefix_octets: tuple[int, int, int]
    trailing_pattern: str

    def last_octets(self) -> range:
        if self.trailing_pattern == FULL_OCTET_WILDCARD:
            return range(1, 255)
        low = int(self.trailing_pattern[:-1]) * 10
        return range(low, min(low + 9, 255) + 1)

    def contains(self, ip: str | None) -> bool:
        if not ip:
            return False
        octets = parse_octets(ip)
        if octets is None:
            return False
        return octets[:3] == self.prefix_octets and octets[3] in self.last_octets()

    def expand(self) -> list[str]:
        a, b, c = self.prefix_octets
        return [f"{a}.{b}.{c}.{d}" for d in self.last_octets()]


class RangeIP(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["range_ip"] = "range_ip"
    start: str
    end: str

    @model_validator(mode="after")
    def _check_order(self) -> RangeIP:
        if not (is_ipv4(self.start) and is_ipv4(self.end)):
            raise ValueError("range endpoints must be IPv4 addresses")
        if ipv4_to_int(self.start) > ipv4_to_int(self.end):
            raise ValueError(f"range start {self.start} is after end {self.end}")
        return self

    def contains(self, ip: str | None) -> bool:
        if not is_ipv4(ip):
            return False
        value = ipv4_to_int(ip)  # type: ignore[arg-type]
        return ipv4_to_int(self.start) <= value <= ipv4_to_int(self.end)

    def expand(self, limit: int | None = None) -> list[str]:
        first, last = ipv4_to_int(self.start), ipv4_to_int(self.end)
        if limit is not None:
            last = min(last, first + limit - 1)
        return [int_to_ipv4(number) for number in range(first, last + 1)]


class MacPattern(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["mac"] = "mac"
    segments: tuple[str, ...]
    has_wildcard: bool = False

    @property
    def canonical(self) -> str:
        return "".join(self.segments)

    def matches(self, mac: str | None) -> bool:
        candidate = canonical_mac(mac)
        if not candidate:
            return False
        if self.has_wildcard:
            return candidate.startswith(self.canonical)
        return candidate == self.canonical


class FreeText(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["text"] = "text"
    text: str


QueryIntent = Annotated[
    Union[ExactIP, WildcardIP, RangeIP, MacPattern, FreeText],
    Field(discriminator="kind"),
]
