"""Tests for configuration, storage and output helpers."""

from __future__ import annotations

import json

import pytest

from lansearch.config import (
    CONFIG_ENV_VAR,
    PriorityConfig,
    SearchConfig,
    Settings,
    get_settings,
    load_settings,
    write_settings,
)
from lansearch.core import lookup_vendor
from lansearch.core.vendor import is_valid_vendor
from lansearch.errors import PingErrorKind
from lansearch.models import PingResult, ScanEntry
from lansearch.storage import Database
from lansearch.utils.redaction import Redactor


def test_config_roundtrip(tmp_path):
    path = tmp_path / "config.toml"
    settings = Settings(
        search=SearchConfig(plugin_timeout=2.5),
        priority=PriorityConfig(
            hostname=["unifi", "freebox", "scanner"], overwrite_vendor=False
        ),
    )
    write_settings(settings, path)

    loaded = load_settings(path)
    assert loaded == settings
    assert loaded.priority.order("hostname") == ["unifi", "freebox", "scanner"]
    assert loaded.priority.overwrite("vendor") is False


@pytest.mark.parametrize(
    "order",
    [["freebox", "unifi"], ["freebox", "unifi", "scanner", "unifi"]],
)
def test_incomplete_priority_is_rejected(order):
    with pytest.raises(ValueError):
        PriorityConfig(hostname=order)


def test_invalid_priority_in_config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[priority]\nvendor = ["scanner"]\n')

    with pytest.raises(ValueError, match="Invalid config file"):
        load_settings(path)


def test_invalid_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[search\n")

    with pytest.raises(ValueError, match="Invalid TOML"):
        load_settings(path)


def test_missing_config_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
    with pytest.raises(FileNotFoundError):
        get_settings()


def test_snapshot_roundtrip(tmp_path, freebox_stats):
    db = Database(tmp_path)
    assert db.load_snapshot("freebox") is None

    db.save_snapshot("freebox", freebox_stats)

    assert db.load_snapshot("freebox") == freebox_stats
    assert db.list_snapshots() == ["freebox"]


def test_import_snapshot(tmp_path, unifi_stats):
    source = tmp_path / "export.json"
    source.write_text(json.dumps(unifi_stats))
    db = Database(tmp_path / "data")

    target = db.import_snapshot("unifi", source)

    assert target == db.snapshot_path("unifi")
    assert db.load_snapshot("unifi") == unifi_stats


def test_import_rejects_non_object_snapshot(tmp_path):
    source = tmp_path / "export.json"
    source.write_text("[1, 2, 3]")

    with pytest.raises(ValueError, match="expected an object"):
        Database(tmp_path / "data").import_snapshot("freebox", source)


def test_corrupt_snapshot(tmp_path):
    db = Database(tmp_path)
    db.init()
    db.snapshot_path("freebox").write_text("{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        db.load_snapshot("freebox")


def test_scan_entries_roundtrip(tmp_path):
    db = Database(tmp_path)
    db.init()
    assert db.load_scan_entries() == []

    entries = [ScanEntry(ip="192.168.1.60", mac="B8:27:EB:11:22:33", scan_count=3)]
    db.save_scan_entries(entries)

    assert db.load_scan_entries() == entries
    assert db.load_scan_entries()[0].scan_count == 3


def test_record_ping(tmp_path):
    db = Database(tmp_path)
    failed = PingResult.failed(PingErrorKind.TIMEOUT)

    assert db.record_ping("192.168.1.70", failed) is None
    assert db.load_scan_entries() == []

    created = db.record_ping("192.168.1.70", PingResult.ok(4.2))
    assert created.status == "online"
    assert created.ping_latency == 4
    assert created.scan_count == 1
    assert created.first_seen is not None

    updated = db.record_ping("192.168.1.70", failed)
    assert updated.status == "offline"
    assert updated.scan_count == 2
    assert updated.ping_latency == 4

    assert [entry.status for entry in db.load_scan_entries()] == ["offline"]


def test_redactor_masks_addresses():
    redactor = Redactor()

    assert redactor.redact_ip("192.168.1.10") == "x.x.x.10"
    assert redactor.redact_ip("nas.lan") == "nas.lan"
    assert redactor.redact_ip(None) == ""
    first = redactor.redact_mac("b8:27:eb:11:22:33")
    assert first == "B8:27:EB:xx:xx:01"
    assert redactor.redact_mac("B8-27-EB-11-22-33") == "B8-27-EB-xx-xx-01"
    assert redactor.redact_mac("DC:A6:32:00:00:01") == "DC:A6:32:xx:xx:02"


def test_disabled_redactor_passes_through():
    redactor = Redactor(enabled=False)
    assert redactor.redact_ip("192.168.1.10") == "192.168.1.10"
    assert redactor.redact_mac("b8:27:eb:11:22:33") == "b8:27:eb:11:22:33"


def test_vendor_lookup():
    assert lookup_vendor("b8-27-eb-00-11-22") == "Raspberry Pi"
    assert lookup_vendor("02:00:00:00:00:01") is None
    assert lookup_vendor("garbage") is None
    assert not is_valid_vendor(" Unknown ")
    assert is_valid_vendor("Synology")
