"""Data models for lansearch."""

from lansearch.models.detail import ConnectionType, IpDetail
from lansearch.models.ping import PingEntry, PingResult, PingState, PingTarget
from lansearch.models.query import (
    ExactIP,
    FreeText,
    MacPattern,
    QueryIntent,
    RangeIP,
    WildcardIP,
)
from lansearch.models.records import (
    DataValue,
    RecordType,
    SearchOptions,
    SearchRecord,
    compact,
)
from lansearch.models.scan import ScanEntry

__all__ = [
    "ConnectionType",
    "DataValue",
    "ExactIP",
    "FreeText",
    "IpDetail",
    "MacPattern",
    "PingEntry",
    "PingResult",
    "PingState",
    "PingTarget",
    "QueryIntent",
    "RangeIP",
    "RecordType",
    "ScanEntry",
    "SearchOptions",
    "SearchRecord",
    "WildcardIP",
    "compact",
]
