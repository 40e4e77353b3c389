"""Tests for the /metrics and /healthz endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

from healthchecker.api.app import create_app
from healthchecker.models.metrics import HealthMetric
from healthchecker.observability.metrics import GaugeRegistry


def _make_client(registry: GaugeRegistry | None = None) -> TestClient:
    return TestClient(create_app(registry=registry or GaugeRegistry()), raise_server_exceptions=False)


class TestHealthz:
    def test_ok(self) -> None:
        response = _make_client().get("/healthz")

        assert response.status_code == 200
        assert response.text == "ok\n"
        assert response.headers["content-type"].startswith("text/plain")


class TestMetrics:
    def test_content_type(self) -> None:
        response = _make_client().get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")

    def test_before_first_cycle_exposes_nothing(self) -> None:
        assert "openshift_" not in _make_client().get("/metrics").text

    def test_reflects_registry_writes(self) -> None:
        registry = GaugeRegistry()
        client = _make_client(registry)

        registry.set(HealthMetric.SYSTEM_PODS_FAILING, 1)
        assert "openshift_system_pods_failing 1.0" in client.get("/metrics").text

        registry.set(HealthMetric.SYSTEM_PODS_FAILING, 0)
        assert "openshift_system_pods_failing 0.0" in client.get("/metrics").text

    @settings(max_examples=25, deadline=None)
    @given(st.dictionaries(st.sampled_from(list(HealthMetric)), st.sampled_from([0, 1])))
    def test_every_written_value_is_scraped(self, values: dict[HealthMetric, int]) -> None:
        registry = GaugeRegistry()
        for metric, value in values.items():
            registry.set(metric, value)

        text = _make_client(registry).get("/metrics").text

        for metric in HealthMetric:
            if metric in values:
                assert f"{metric.value} {float(values[metric])}" in text
            else:
                assert f"{metric.value} " not in text

    def test_render_failure_returns_500_without_traceback(self) -> None:
        registry = MagicMock()
        registry.render.side_effect = RuntimeError("boom")

        response = _make_client(registry).get("/metrics")

        assert response.status_code == 500
        assert response.json() == {"error": "INTERNAL_ERROR", "detail": "An unexpected error occurred."}
        assert "Traceback" not in response.text


def test_unknown_path_is_404() -> None:
    assert _make_client().get("/api/v1/analyze").status_code == 404
