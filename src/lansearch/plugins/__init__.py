from __future__ import annotations

from .base import PluginRegistry, PluginResultSource, SnapshotProvider, SnapshotSource
from .freebox import FreeboxSource
from .memory import StaticSource
from .scanner import ScannerSource
from .unifi import UniFiSource

__all__ = [
    "FreeboxSource",
    "PluginRegistry",
    "PluginResultSource",
    "ScannerSource",
    "SnapshotProvider",
    "SnapshotSource",
    "StaticSource",
    "UniFiSource",
]
