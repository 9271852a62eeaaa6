from __future__ import annotations

import pytest

from lansearch.core import classify, is_ip_range
from lansearch.errors import EmptyQuery, InvalidQuery
from lansearch.models import ExactIP, FreeText, MacPattern, RangeIP, WildcardIP


def test_exact_ip():
    intent = classify(" 192.168.1.10 ")
    assert intent == ExactIP(address="192.168.1.10")


@pytest.mark.parametrize("query", ["192.168.1.256", "300.1.1.1"])
def test_exact_ip_out_of_range_is_malformed(query):
    with pytest.raises(InvalidQuery):
        classify(query)


def test_full_octet_wildcard_covers_host_addresses():
    intent = classify("192.168.1.*")
    assert isinstance(intent, WildcardIP)
    assert intent.prefix_octets == (192, 168, 1)
    addresses = intent.expand()
    assert addresses[0] == "192.168.1.1"
    assert addresses[-1] == "192.168.1.254"
    assert len(addresses) == 254


def test_partial_wildcard_adds_one_digit():
    intent = classify("192.168.1.1*")
    assert isinstance(intent, WildcardIP)
    assert list(intent.last_octets()) == list(range(10, 20))
    assert intent.contains("192.168.1.15")
    assert not intent.contains("192.168.1.1")
    assert not intent.contains("192.168.2.15")


def test_two_digit_partial_wildcard():
    intent = classify("192.168.1.12*")
    assert isinstance(intent, WildcardIP)
    assert list(intent.last_octets()) == list(range(120, 130))


def test_partial_wildcard_is_clipped_to_255():
    intent = classify("10.0.0.25*")
    assert isinstance(intent, WildcardIP)
    assert list(intent.last_octets()) == [250, 251, 252, 253, 254, 255]


@pytest.mark.parametrize(
    "query", ["192.168.1.26*", "192.168.1.0*", "192.168.1.123*", "192.300.1.*"]
)
def test_malformed_wildcards(query):
    with pytest.raises(InvalidQuery):
        classify(query)


def test_short_range():
    intent = classify("192.168.1.10-20")
    assert intent == RangeIP(start="192.168.1.10", end="192.168.1.20")
    assert intent.contains("192.168.1.20")
    assert not intent.contains("192.168.1.21")


def test_full_range_spans_subnets():
    intent = classify("192.168.1.250-192.168.2.5")
    assert isinstance(intent, RangeIP)
    assert intent.contains("192.168.2.1")
    assert len(intent.expand()) == 12
    assert intent.expand(limit=3) == [
        "192.168.1.250",
        "192.168.1.251",
        "192.168.1.252",
    ]


@pytest.mark.parametrize(
    "query",
    [
        "192.168.1.20-10",
        "192.168.1.30-20",
        "192.168.1.10-300",
        "192.168.2.1-192.168.1.1",
    ],
)
def test_malformed_ranges(query):
    with pytest.raises(InvalidQuery):
        classify(query)


@pytest.mark.parametrize(
    ("query", "start", "end"),
    [
        ("192.168.1.0/24", "192.168.1.1", "192.168.1.254"),
        ("192.168.1.77/24", "192.168.1.1", "192.168.1.254"),
        ("10.0.0.0/30", "10.0.0.1", "10.0.0.2"),
        ("10.0.0.4/31", "10.0.0.4", "10.0.0.5"),
        ("10.0.0.9/32", "10.0.0.9", "10.0.0.9"),
    ],
)
def test_cidr_block_is_a_host_range(query, start, end):
    intent = classify(query)
    assert intent == RangeIP(start=start, end=end)


def test_cidr_block_expands_to_hosts():
    intent = classify("172.16.4.0/23")
    assert intent.contains("172.16.5.200")
    assert not intent.contains("172.16.6.1")
    assert len(intent.expand()) == 510
    assert intent.expand(limit=254)[-1] == "172.16.4.254"


@pytest.mark.parametrize("query", ["192.168.1.0/33", "192.168.300.0/24"])
def test_malformed_cidr_blocks(query):
    with pytest.raises(InvalidQuery):
        classify(query)


@pytest.mark.parametrize(
    "query",
    [
        "\u0661\u0669\u0662.\u0661\u0666\u0668.\u0661.\u0665",
        "\u0661\u0669\u0662.\u0661\u0666\u0668.\u0661.*",
        "192.168.1.\u0665-9",
    ],
)
def test_non_ascii_digits_are_text(query):
    assert classify(query) == FreeText(text=query)


@pytest.mark.parametrize("query", ["AA:BB:CC:DD:EE:FF", "aa-bb-cc-dd-ee-ff"])
def test_full_mac(query):
    intent = classify(query)
    assert isinstance(intent, MacPattern)
    assert intent.segments == ("AA", "BB", "CC", "DD", "EE", "FF")
    assert not intent.has_wildcard
    assert intent.canonical == "AABBCCDDEEFF"


def test_mac_prefix():
    intent = classify("b8:27:eb:*")
    assert isinstance(intent, MacPattern)
    assert intent.has_wildcard
    assert intent.matches("B8-27-EB-12-34-56")
    assert not intent.matches("DC:A6:32:12:34:56")


def test_mixed_mac_separators_fall_back_to_text():
    assert isinstance(classify("AA:BB-CC:DD:EE:FF"), FreeText)
    assert isinstance(classify("AA:BB-*"), FreeText)


@pytest.mark.parametrize("query", ["nas", "my-laptop", "192.168.1", "Living room"])
def test_free_text(query):
    intent = classify(query)
    assert intent == FreeText(text=query)


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query(query):
    with pytest.raises(EmptyQuery, match="Search query is required"):
        classify(query)


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("192.168.1.*", True),
        ("192.168.1.10-20", True),
        ("192.168.1.0/24", True),
        ("192.168.1.10", False),
        ("my-host.lan", False),
        ("192.168.1.0/40", False),
    ],
)
def test_is_ip_range(query, expected):
    assert is_ip_range(query) is expected
