from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from lansearch.models import PingResult, ScanEntry

SOURCES_DIR = "sources"
SCANNER_DIR = "scanner"
HOSTS_FILE = "hosts.json"

_entries_adapter = TypeAdapter(list[ScanEntry])


def _read_json(path: Path) -> Any:
    try:
        with path.open("r") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}\n{exc}") from exc


class Database:
    """Plugin snapshots and the local scanner table below one data directory."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._sources_dir = data_dir / SOURCES_DIR
        self._scanner_dir = data_dir / SCANNER_DIR
        self._hosts_path = self._scanner_dir / HOSTS_FILE

    @property
    def path(self) -> Path:
        return self._data_dir

    @property
    def hosts_path(self) -> Path:
        return self._hosts_path

    def snapshot_path(self, plugin_id: str) -> Path:
        return self._sources_dir / f"{plugin_id}.json"

    def ensure_dirs(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._sources_dir.mkdir(parents=True, exist_ok=True)
        self._scanner_dir.mkdir(parents=True, exist_ok=True)

    def save_snapshot(self, plugin_id: str, stats: dict[str, Any]) -> None:
        self._sources_dir.mkdir(parents=True, exist_ok=True)
        with self.snapshot_path(plugin_id).open("w") as handle:
            json.dump(stats, handle, indent=2)

    def load_snapshot(self, plugin_id: str) -> dict[str, Any] | None:
        path = self.snapshot_path(plugin_id)
        if not path.exists():
            return None
        data = _read_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid snapshot file: {path} (expected an object)")
        return data

    def import_snapshot(self, plugin_id: str, source: Path) -> Path:
        data = _read_json(source)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid snapshot file: {source} (expected an object)")
        self.save_snapshot(plugin_id, data)
        return self.snapshot_path(plugin_id)

    def list_snapshots(self) -> list[str]:
        if not self._sources_dir.exists():
            return []
        return sorted(path.stem for path in self._sources_dir.glob("*.json"))

    def load_scan_entries(self) -> list[ScanEntry]:
        if not self._hosts_path.exists():
            return []
        try:
            return _entries_adapter.validate_python(_read_json(self._hosts_path))
        except ValidationError as exc:
            raise ValueError(
                f"Invalid scanner file: {self._hosts_path}\n{exc}"
            ) from exc

    def save_scan_entries(self, entries: list[ScanEntry]) -> None:
        self._scanner_dir.mkdir(parents=True, exist_ok=True)
        with self._hosts_path.open("w") as handle:
            json.dump(
                _entries_adapter.dump_python(entries, mode="json"), handle, indent=2
            )

    def import_scan_entries(self, source: Path) -> list[ScanEntry]:
        try:
            entries = _entries_adapter.validate_python(_read_json(source))
        except ValidationError as exc:
            raise ValueError(f"Invalid scanner file: {source}\n{exc}") from exc
        self.save_scan_entries(entries)
        return entries

    def record_ping(self, ip: str, result: PingResult) -> ScanEntry | None:
        """Store a ping outcome; unknown hosts are only added when online."""
        entries = self.load_scan_entries()
        now = datetime.now(timezone.utc)
        entry = next((e for e in entries if e.ip == ip), None)

        if entry is None:
            if not result.success:
                return None
            entry = ScanEntry(ip=ip, first_seen=now)
            entries.append(entry)

        entry.status = "online" if result.success else "offline"
        entry.scan_count += 1
        if result.success:
            entry.ping_latency = result.latency_ms
            entry.last_seen = now
        self.save_scan_entries(entries)
        return entry

    def init(self) -> None:
        self.ensure_dirs()
        if not self._hosts_path.exists():
            self.save_scan_entries([])
