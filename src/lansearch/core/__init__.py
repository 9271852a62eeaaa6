from __future__ import annotations

from .aggregator import IpAggregator, connection_type, merge_field
from .classifier import classify, is_ip_range
from .dispatcher import SearchDispatcher, fan_out
from .matching import filter_records, record_matches
from .ping import (
    BatchPlan,
    PingBoard,
    PingOrchestrator,
    SystemPingProber,
    validate_target,
)
from .vendor import lookup_vendor

__all__ = [
    "BatchPlan",
    "IpAggregator",
    "PingBoard",
    "PingOrchestrator",
    "SearchDispatcher",
    "SystemPingProber",
    "classify",
    "connection_type",
    "fan_out",
    "filter_records",
    "is_ip_range",
    "lookup_vendor",
    "merge_field",
    "record_matches",
    "validate_target",
]
