from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from lansearch.models import (
    ExactIP,
    FreeText,
    MacPattern,
    QueryIntent,
    RangeIP,
    SearchOptions,
    SearchRecord,
    WildcardIP,
)
from lansearch.utils.net import canonical_mac


def _strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _strings(item)
    elif isinstance(value, list):
        for item in value:
            yield from _strings(item)


def text_fields(record: SearchRecord) -> Iterator[str]:
    """Name, hostname and every text value of additional_data (vendor, comment...)."""
    for value in (record.name, record.hostname):
        if value:
            yield value
    yield from _strings(record.additional_data)


def contains_text(haystack: Iterable[str], needle: str, case_sensitive: bool) -> bool:
    if not case_sensitive:
        needle = needle.lower()
    for value in haystack:
        candidate = value if case_sensitive else value.lower()
        if needle in candidate:
            return True
    return False


def record_matches(
    record: SearchRecord, intent: QueryIntent, options: SearchOptions
) -> bool:
    if isinstance(intent, ExactIP):
        if options.exact_match:
            return intent.contains(record.ip)
        fields = [record.ip] if record.ip else []
        return contains_text([*fields, *text_fields(record)], intent.address, True)

    if isinstance(intent, (WildcardIP, RangeIP)):
        return intent.contains(record.ip)

    if isinstance(intent, MacPattern):
        if options.exact_match:
            return intent.matches(record.mac)
        candidate = canonical_mac(record.mac)
        return bool(candidate) and candidate.startswith(intent.canonical)

    if isinstance(intent, FreeText):
        return contains_text(text_fields(record), intent.text, options.case_sensitive)

    return False


def filter_records(
    records: Iterable[SearchRecord], intent: QueryIntent, options: SearchOptions
) -> list[SearchRecord]:
    return [
        record
        for record in records
        if options.allows(record.type) and record_matches(record, intent, options)
    ]
