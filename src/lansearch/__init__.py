"""lansearch - one search box over the devices, leases and clients of a LAN."""

from __future__ import annotations

from importlib.metadata import version

from .config import PriorityConfig, Settings, get_settings
from .core import IpAggregator, PingOrchestrator, SearchDispatcher, classify
from .errors import (
    AllSourcesFailed,
    ExternalPingRefused,
    InvalidQuery,
    InvalidTarget,
    LanSearchError,
)
from .models import IpDetail, PingResult, QueryIntent, SearchOptions, SearchRecord
from .plugins import PluginRegistry, PluginResultSource
from .services import SearchRequest, SearchResponse, SearchService, build_registry
from .storage import Database

__all__ = [
    "AllSourcesFailed",
    "Database",
    "ExternalPingRefused",
    "InvalidQuery",
    "InvalidTarget",
    "IpAggregator",
    "IpDetail",
    "LanSearchError",
    "PingOrchestrator",
    "PingResult",
    "PluginRegistry",
    "PluginResultSource",
    "PriorityConfig",
    "QueryIntent",
    "SearchDispatcher",
    "SearchOptions",
    "SearchRecord",
    "SearchRequest",
    "SearchResponse",
    "SearchService",
    "Settings",
    "__version__",
    "build_registry",
    "classify",
    "get_settings",
]

__version__ = version("lansearch")
