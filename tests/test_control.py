from __future__ import annotations

from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from autommo.config import EnabledFlag
from autommo.runner.control import create_app
from autommo.runner.metrics import MmoMetrics


def _client() -> tuple[TestClient, EnabledFlag, MmoMetrics]:
    registry = CollectorRegistry()
    flag = EnabledFlag(False)
    metrics = MmoMetrics(flag, registry=registry)
    return TestClient(create_app(flag, registry)), flag, metrics


def test_enable_and_disable_are_idempotent() -> None:
    client, flag, _ = _client()

    for _ in range(2):
        res = client.get("/enable")
        assert res.status_code == 200
        assert res.json() == {"enabled": True}
        assert flag.is_enabled is True

    for _ in range(2):
        res = client.get("/disable")
        assert res.status_code == 200
        assert res.json() == {"enabled": False}
        assert flag.is_enabled is False


def test_metrics_exposition_reflects_flag_and_counters() -> None:
    client, _, metrics = _client()
    metrics.increment_steps("nothing")
    metrics.increment_items("legendary", "Jewel")

    body = client.get("/metrics").text
    assert "mmo_is_enabled 0.0" in body
    assert 'mmo_steps_total{type="nothing"} 1.0' in body
    assert 'mmo_found_items_total{name="Jewel",rarity="legendary"} 1.0' in body

    client.get("/enable")
    res = client.get("/metrics")
    assert res.headers["content-type"].startswith("text/plain")
    assert "mmo_is_enabled 1.0" in res.text
