"""Tests for the search service."""

from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from lansearch.config import PingConfig, PluginsConfig, Settings
from lansearch.core import PingOrchestrator
from lansearch.errors import InvalidQuery
from lansearch.models import RecordType, SearchRecord
from lansearch.plugins import PluginRegistry, StaticSource
from lansearch.services import SearchRequest, SearchService, build_registry
from lansearch.storage import Database

IP = "192.168.1.50"


def _record(plugin_id: str, ip: str, name: str) -> SearchRecord:
    return SearchRecord(
        plugin_id=plugin_id,
        plugin_name=plugin_id,
        type=RecordType.DEVICE,
        id=ip,
        name=name,
        ip=ip,
    )


@pytest.fixture
def sources():
    return [
        StaticSource(
            "freebox",
            [_record("freebox", IP, "nas"), _record("freebox", "192.168.1.51", "tv")],
            {IP: {"hostname": "nas"}},
            match=True,
        ),
        StaticSource(
            "unifi",
            [_record("unifi", "192.168.1.51", "tv")],
            {IP: {"client": {"sw_port": 2, "oui": "Synology"}}},
            match=True,
        ),
    ]


def test_exact_ip_search_attaches_details(sources):
    service = SearchService(PluginRegistry(sources))

    response = asyncio.run(service.search(SearchRequest(query=f" {IP} ")))

    assert response.query == IP
    assert response.count == 1
    assert response.results[0].name == "nas"
    assert response.details is not None
    assert response.details.hostname == "nas"
    assert response.details.vendor == "Synology"
    assert response.details.connection == "wired"


def test_extended_search_has_no_details(sources):
    service = SearchService(PluginRegistry(sources))

    response = asyncio.run(
        service.search(SearchRequest(query="192.168.1.5", exact_match=False))
    )

    assert response.details is None
    assert [record.plugin_id for record in response.results] == [
        "freebox",
        "freebox",
        "unifi",
    ]


def test_non_ip_search_has_no_details(sources):
    service = SearchService(PluginRegistry(sources))

    response = asyncio.run(service.search(SearchRequest(query="TV", types=["device"])))

    assert response.count == 2
    assert response.details is None


def test_malformed_query_fails_before_any_plugin_call(sources):
    service = SearchService(PluginRegistry(sources))

    with pytest.raises(InvalidQuery):
        asyncio.run(service.search(SearchRequest(query="192.168.1.300")))

    assert all(source.search_calls == 0 for source in sources)


def test_request_types_are_validated():
    with pytest.raises(ValidationError):
        SearchRequest(query="nas", types=["printer"])


def test_ip_details_requires_an_address(sources):
    service = SearchService(PluginRegistry(sources))

    detail = asyncio.run(service.ip_details(IP))
    assert detail.sources["freebox"] == {"hostname": "nas"}

    with pytest.raises(InvalidQuery):
        asyncio.run(service.ip_details("nas"))


def test_build_registry_uses_enabled_plugins(tmp_path, freebox_stats):
    db = Database(tmp_path)
    db.save_snapshot("freebox", freebox_stats)
    settings = Settings(plugins=PluginsConfig(enabled=["freebox", "scanner"]))

    registry = build_registry(settings, db)
    assert registry.ids == ["freebox", "scanner"]

    service = SearchService(registry, settings)
    response = asyncio.run(service.search(SearchRequest(query="laptop")))
    assert [record.ip for record in response.results] == ["192.168.1.30"]


class QuickProber:
    def __init__(self) -> None:
        self.targets: list[str] = []

    async def probe(self, target: str, count: int) -> float:
        self.targets.append(target)
        return 1.0


async def _no_sleep(delay: float) -> None:
    return None


@pytest.mark.parametrize(
    ("query", "first", "last"),
    [
        ("192.168.1.0/24", "192.168.1.1", "192.168.1.254"),
        ("192.168.1.*", "192.168.1.1", "192.168.1.254"),
        ("10.0.0.0/16", "10.0.0.1", "10.0.0.254"),
    ],
)
def test_range_plan_is_capped_at_254_hosts(sources, query, first, last):
    service = SearchService(PluginRegistry(sources))

    plan = service.range_plan(query)

    assert len(plan.targets) == 254
    assert (plan.targets[0], plan.targets[-1]) == (first, last)


def test_range_plan_refuses_public_hosts(sources):
    service = SearchService(PluginRegistry(sources))

    plan = service.range_plan("8.8.8.0/30")

    assert plan.targets == []
    assert plan.refused == ["8.8.8.1", "8.8.8.2"]


@pytest.mark.parametrize("query", ["192.168.1.5", "nas"])
def test_range_plan_needs_a_range(sources, query):
    service = SearchService(PluginRegistry(sources))

    with pytest.raises(InvalidQuery):
        service.range_plan(query)


def test_ping_results_sweeps_a_range(sources):
    prober = QuickProber()
    pinger = PingOrchestrator(prober, PingConfig(), sleep=_no_sleep)
    service = SearchService(PluginRegistry(sources), pinger=pinger)
    plan = service.range_plan("192.168.1.10-12")

    async def run():
        return [ip async for ip, result in service.ping_results(plan) if result.success]

    expected = ["192.168.1.10", "192.168.1.11", "192.168.1.12"]
    assert asyncio.run(run()) == expected
    assert prober.targets == expected
