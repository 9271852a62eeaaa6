from __future__ import annotations

from typing import Any

import pytest

from lansearch.config import CONFIG_ENV_VAR, get_settings


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def freebox_stats() -> dict[str, Any]:
    return {
        "devices": [
            {
                "id": "dev-tv",
                "name": "Living room TV",
                "ip": "192.168.1.20",
                "mac": "00:13:A9:11:22:33",
                "active": True,
                "type": "Sony",
            },
        ],
        "system": {
            "dhcp": {
                "leases": [
                    {
                        "ip": "192.168.1.30",
                        "hostname": "laptop",
                        "mac": "00:1B:21:AA:BB:CC",
                        "lease_time": 86400,
                    },
                ],
                "staticLeases": [
                    {
                        "ip": "192.168.1.50",
                        "hostname": "nas",
                        "mac": "00:11:32:DE:AD:01",
                        "comment": "storage",
                    },
                ],
            },
            "portForwarding": [
                {
                    "id": 7,
                    "comment": "nas web",
                    "lan_ip": "192.168.1.50",
                    "lan_port": 5001,
                    "wan_port_start": 8443,
                    "ip_proto": "tcp",
                    "enabled": True,
                },
            ],
        },
    }


@pytest.fixture
def unifi_stats() -> dict[str, Any]:
    return {
        "devices": [
            {
                "id": "ap-1",
                "name": "Hallway AP",
                "type": "uap",
                "model": "U6-Lite",
                "ip": "192.168.1.2",
                "mac": "78:8A:20:00:00:01",
                "active": True,
            },
            {
                "id": "sw-1",
                "name": "Office switch",
                "type": "usw",
                "model": "USW-Lite-8",
                "ip": "192.168.1.3",
                "mac": "78:8A:20:00:00:02",
                "active": True,
            },
        ],
        "clients": [
            {
                "_id": "c-phone",
                "mac": "00:1E:C2:01:02:03",
                "ip": "192.168.1.40",
                "hostname": "phone",
                "essid": "home",
                "ap_mac": "78:8a:20:00:00:01",
                "signal": -55,
                "oui": "Apple",
                "last_seen": 1700000000,
            },
            {
                "_id": "c-desk",
                "mac": "00:13:CE:04:05:06",
                "ip": "192.168.1.41",
                "hostname": "desktop",
                "sw_port": 4,
                "sw_mac": "78:8A:20:00:00:02",
                "oui": "Intel",
            },
        ],
    }
