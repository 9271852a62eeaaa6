"""Tests for the public API and the command line."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

import lansearch.services as services_module
from lansearch import __version__
from lansearch.cli.app import app
from lansearch.config import (
    CONFIG_ENV_VAR,
    DatabaseConfig,
    Settings,
    get_settings,
    write_settings,
)
from lansearch.storage import Database

runner = CliRunner()


class FakeProber:
    targets: list[str] = []

    def __init__(self, config) -> None:
        self.config = config

    async def probe(self, target: str, count: int) -> float:
        FakeProber.targets.append(target)
        return 7.4


@pytest.fixture
def data_dir(tmp_path, monkeypatch, freebox_stats):
    data_dir = tmp_path / "data"
    config_path = tmp_path / "config.toml"
    write_settings(Settings(database=DatabaseConfig(path=str(data_dir))), config_path)
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    monkeypatch.setenv("COLUMNS", "200")
    get_settings.cache_clear()

    Database(data_dir).save_snapshot("freebox", freebox_stats)
    FakeProber.targets = []
    monkeypatch.setattr(services_module, "SystemPingProber", FakeProber)
    return data_dir


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"lansearch version {__version__}" in result.stdout


def test_search_by_text(data_dir):
    result = runner.invoke(app, ["search", "laptop"])

    assert result.exit_code == 0
    assert "192.168.1.30" in result.stdout
    assert "Found 1 result(s)" in result.stdout


def test_search_exact_ip_shows_details(data_dir):
    result = runner.invoke(app, ["search", "192.168.1.50"])

    assert result.exit_code == 0
    assert "Details for 192.168.1.50" in result.stdout
    assert "static" in result.stdout


def test_search_without_results(data_dir):
    result = runner.invoke(app, ["search", "nothing-here"])

    assert result.exit_code == 0
    assert "No results." in result.stdout


def test_malformed_query_exits_with_error(data_dir):
    result = runner.invoke(app, ["search", "192.168.1.300"])

    assert result.exit_code == 1
    assert "Malformed query" in result.output


def test_search_with_ping_skips_public_addresses(data_dir, freebox_stats):
    freebox_stats["devices"].append(
        {"id": "dns", "name": "dns-forwarder", "ip": "8.8.8.8", "type": "Google"}
    )
    Database(data_dir).save_snapshot("freebox", freebox_stats)

    result = runner.invoke(app, ["search", "192.168.1.*", "--ping"])

    assert result.exit_code == 0
    assert FakeProber.targets == ["192.168.1.20", "192.168.1.30", "192.168.1.50"]

    result = runner.invoke(app, ["search", "dns", "--ping"])
    assert result.exit_code == 0
    assert "Skipped 1 public address(es)" in result.stdout
    assert "8.8.8.8" not in FakeProber.targets


def test_redacted_search(data_dir):
    result = runner.invoke(app, ["search", "laptop", "--redact"])

    assert result.exit_code == 0
    assert "x.x.x.30" in result.stdout
    assert "192.168.1.30" not in result.stdout


def test_details_as_json(data_dir):
    result = runner.invoke(app, ["details", "192.168.1.50", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["ip"] == "192.168.1.50"
    assert payload["hostname"] == "nas"
    assert payload["freebox"]["dhcp"]["static"] is True
    assert "unifi" not in payload


def test_manual_ping_of_public_address(data_dir):
    result = runner.invoke(app, ["ping", "8.8.8.8", "--count", "1"])

    assert result.exit_code == 0
    assert "8.8.8.8 is reachable" in result.stdout
    assert FakeProber.targets == ["8.8.8.8"]
    assert Database(data_dir).load_scan_entries() == []


def test_manual_ping_records_private_host(data_dir):
    result = runner.invoke(app, ["ping", "192.168.1.90"])

    assert result.exit_code == 0
    [entry] = Database(data_dir).load_scan_entries()
    assert entry.ip == "192.168.1.90"
    assert entry.status == "online"
    assert entry.ping_latency == 7


def test_ping_rejects_bad_target(data_dir):
    result = runner.invoke(app, ["ping", "not a host"])

    assert result.exit_code == 1
    assert "Malformed query" in result.output
    assert FakeProber.targets == []


def test_import_snapshot(data_dir, tmp_path, unifi_stats):
    export = tmp_path / "unifi.json"
    export.write_text(json.dumps(unifi_stats))

    result = runner.invoke(app, ["import", "unifi", str(export)])

    assert result.exit_code == 0
    assert Database(data_dir).load_snapshot("unifi") == unifi_stats

    result = runner.invoke(app, ["search", "desktop"])
    assert "192.168.1.41" in result.stdout


def test_import_unknown_plugin(data_dir, tmp_path):
    export = tmp_path / "other.json"
    export.write_text("{}")

    result = runner.invoke(app, ["import", "router", str(export)])

    assert result.exit_code == 1
    assert "Unknown plugin" in result.output


def test_info(data_dir):
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "Snapshots: freebox" in result.stdout
    assert "Scanner hosts: 0" in result.stdout


def test_config_init_and_show(tmp_path, monkeypatch):
    config_path = tmp_path / "lansearch.toml"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))

    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert config_path.exists()

    result = runner.invoke(app, ["config", "init"])
    assert "already exists" in result.stdout

    get_settings.cache_clear()
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert f"Config source: {config_path}" in result.stdout
    assert "[priority]" in result.stdout


def test_ping_sweeps_a_private_range(data_dir):
    result = runner.invoke(app, ["ping", "192.168.1.0/30"])

    assert result.exit_code == 0
    assert FakeProber.targets == ["192.168.1.1", "192.168.1.2"]
    assert "2 of 2 host(s) answered" in result.stdout
    entries = Database(data_dir).load_scan_entries()
    assert [entry.ip for entry in entries] == ["192.168.1.1", "192.168.1.2"]


def test_ping_range_without_private_hosts(data_dir):
    result = runner.invoke(app, ["ping", "8.8.8.0/30"])

    assert result.exit_code == 1
    assert "No private address to ping" in result.stdout
    assert FakeProber.targets == []
