"""Integration tests for the HealthCheckerApp lifecycle.

The Kubernetes configuration loader, the cluster client and the uvicorn
server are replaced so the bootstrap can run without a cluster or a socket.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from healthchecker.app import HealthCheckerApp, _ComponentError, main
from healthchecker.models.metrics import HealthMetric

from .conftest import FakeCluster, make_node

_VARS = ("CHECK_INTERVAL", "METRICS_PORT", "SYSTEM_NAMESPACE_PREFIXES", "SYSTEM_NAMESPACES", "API_TIMEOUT", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("healthchecker.app.setup_logging", lambda level: None)


@pytest.fixture
def wired_app(monkeypatch: pytest.MonkeyPatch, healthy_cluster: FakeCluster) -> tuple[HealthCheckerApp, dict]:
    """An app whose cluster is *healthy_cluster* and whose REST start records the gauges."""
    seen: dict = {}

    async def _fake_start_rest(self: HealthCheckerApp) -> None:
        assert self.registry is not None
        seen["at_serve"] = self.registry.snapshot()

    monkeypatch.setattr("healthchecker.app.load_kube_configuration", AsyncMock(return_value="kubeconfig"))
    monkeypatch.setattr("healthchecker.app.ClusterClient", lambda **_kwargs: healthy_cluster)
    monkeypatch.setattr(HealthCheckerApp, "_start_rest", _fake_start_rest)
    return HealthCheckerApp(), seen


class TestStartup:
    async def test_initial_cycle_runs_before_serving(self, wired_app: tuple[HealthCheckerApp, dict]) -> None:
        app, seen = wired_app

        await app.start()
        try:
            assert app.running is True
            assert seen["at_serve"] == dict.fromkeys(HealthMetric, 0)
        finally:
            await app.stop()

    async def test_unhealthy_cluster_reported_at_first_scrape(
        self, wired_app: tuple[HealthCheckerApp, dict], healthy_cluster: FakeCluster
    ) -> None:
        healthy_cluster.nodes.append(make_node("worker-9", ready=False))
        app, seen = wired_app

        await app.start()
        await app.stop()

        assert seen["at_serve"][HealthMetric.NODES_NOT_READY] == 1

    async def test_invalid_config_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHECK_INTERVAL", "-1")
        app = HealthCheckerApp()

        with pytest.raises(_ComponentError) as exc_info:
            await app.start()

        assert exc_info.value.component == "config"
        assert "CHECK_INTERVAL" in str(exc_info.value.cause)

    async def test_k8s_config_failure_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "healthchecker.app.load_kube_configuration",
            AsyncMock(side_effect=RuntimeError("no kubeconfig")),
        )
        app = HealthCheckerApp()

        with pytest.raises(_ComponentError) as exc_info:
            await app.start()

        assert exc_info.value.component == "k8s_client"
        await app.stop()

    async def test_main_exits_non_zero_on_fatal_startup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METRICS_PORT", "not-a-port")

        with pytest.raises(SystemExit) as exc_info:
            await main()

        assert exc_info.value.code == 1


class TestShutdown:
    async def test_stop_closes_client_and_scheduler(
        self, wired_app: tuple[HealthCheckerApp, dict], healthy_cluster: FakeCluster
    ) -> None:
        app, _ = wired_app
        await app.start()

        await app.stop()

        assert app.running is False
        assert healthy_cluster.closed is True
        await app.wait_stopped()

    async def test_stop_is_idempotent(self, wired_app: tuple[HealthCheckerApp, dict]) -> None:
        app, _ = wired_app
        await app.start()

        await app.stop()
        await app.stop()

    async def test_stop_during_initial_cycle_aborts_startup(
        self, wired_app: tuple[HealthCheckerApp, dict], healthy_cluster: FakeCluster
    ) -> None:
        app, seen = wired_app
        entered = asyncio.Event()
        gate = asyncio.Event()
        list_nodes = healthy_cluster.list_nodes

        async def _blocking_list_nodes() -> list:
            entered.set()
            await gate.wait()
            return await list_nodes()

        healthy_cluster.list_nodes = _blocking_list_nodes  # type: ignore[method-assign]

        starting = asyncio.create_task(app.start())
        await asyncio.wait_for(entered.wait(), timeout=1.0)
        stopping = asyncio.create_task(app.stop())
        await asyncio.sleep(0.05)

        # The in-flight initial cycle still owns the client.
        assert not stopping.done()
        assert healthy_cluster.closed is False

        gate.set()
        await asyncio.wait_for(starting, timeout=1.0)
        await asyncio.wait_for(stopping, timeout=1.0)

        assert "at_serve" not in seen
        assert app.running is False
        assert app._scheduler is not None
        assert app._scheduler.running is False
        assert healthy_cluster.closed is True
        await asyncio.wait_for(app.wait_stopped(), timeout=1.0)

    async def test_concurrent_stop_waits_for_teardown(
        self, wired_app: tuple[HealthCheckerApp, dict], healthy_cluster: FakeCluster
    ) -> None:
        app, _ = wired_app
        await app.start()

        await asyncio.gather(app.stop(), app.stop())

        assert healthy_cluster.closed is True

    async def test_stop_without_start(self) -> None:
        app = HealthCheckerApp()
        await app.stop()
        await app.wait_stopped()
