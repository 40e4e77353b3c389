"""Shared fixtures for health checker integration tests.

Provides an in-memory FakeCluster implementing the ClusterAPI interface plus
resource factories, so check units and the scheduler can be exercised end to
end without a real cluster.
"""

from __future__ import annotations

import pytest

from healthchecker.errors import FetchError
from healthchecker.models.config import NamespaceRule
from healthchecker.models.resources import (
    CheckableResource,
    ConditionStatus,
    ContainerState,
    ResourceCondition,
    ResourceKind,
)
from healthchecker.observability.metrics import GaugeRegistry

# ---------------------------------------------------------------------------
# Resource factories
# ---------------------------------------------------------------------------


def _cond(condition_type: str, status: bool | None, message: str = "") -> ResourceCondition:
    value = ConditionStatus.UNKNOWN if status is None else ConditionStatus.TRUE if status else ConditionStatus.FALSE
    return ResourceCondition(type=condition_type, status=value, message=message)


def make_operator(name: str, degraded: bool = False, available: bool = True) -> CheckableResource:
    """Create a ClusterOperator with Available/Progressing/Degraded conditions."""
    return CheckableResource(
        kind=ResourceKind.CLUSTER_OPERATOR,
        name=name,
        conditions=(
            _cond("Available", available, "" if available else f"{name} is unavailable"),
            _cond("Progressing", False),
            _cond("Degraded", degraded, f"{name} is degraded" if degraded else ""),
        ),
    )


def make_version(name: str = "version", degraded: bool = False, available: bool = True) -> CheckableResource:
    return CheckableResource(
        kind=ResourceKind.CLUSTER_VERSION,
        name=name,
        conditions=(_cond("Available", available), _cond("Degraded", degraded)),
    )


def make_node(name: str, ready: bool | None = True, with_ready: bool = True) -> CheckableResource:
    """Create a Node.  ``with_ready=False`` omits the Ready condition entirely."""
    conditions = [_cond("MemoryPressure", False), _cond("DiskPressure", False)]
    if with_ready:
        conditions.append(_cond("Ready", ready))
    return CheckableResource(kind=ResourceKind.NODE, name=name, conditions=tuple(conditions))


def make_pod(
    name: str,
    namespace: str,
    phase: str = "Running",
    waiting: str = "",
    terminated: str = "",
    init: bool = False,
) -> CheckableResource:
    containers: tuple[ContainerState, ...] = ()
    if waiting or terminated:
        containers = (ContainerState(name="app", init=init, waiting_reason=waiting, terminated_reason=terminated),)
    return CheckableResource(kind=ResourceKind.POD, name=name, namespace=namespace, phase=phase, containers=containers)


# ---------------------------------------------------------------------------
# Fake cluster
# ---------------------------------------------------------------------------


class FakeCluster:
    """In-memory ClusterAPI.  Set ``failures[operation] = True`` to raise FetchError.

    Operation keys: ``list_operators``, ``get_version``, ``list_nodes``,
    ``list_namespaces``, ``list_pods:<namespace>``.
    """

    def __init__(self) -> None:
        self.operators: list[CheckableResource] = []
        self.version: CheckableResource | None = make_version()
        self.nodes: list[CheckableResource] = []
        self.namespaces: list[str] = []
        self.pods: dict[str, list[CheckableResource]] = {}
        self.failures: dict[str, bool] = {}
        self.calls: list[str] = []
        self.closed = False

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if self.failures.get(operation):
            raise FetchError(operation, "simulated API failure")

    async def list_operators(self) -> list[CheckableResource]:
        self._record("list_operators")
        return list(self.operators)

    async def get_version(self, name: str) -> CheckableResource:
        self._record("get_version")
        if self.version is None or self.version.name != name:
            raise FetchError(f"get ClusterVersion {name!r}", "HTTP 404: Not Found")
        return self.version

    async def list_nodes(self) -> list[CheckableResource]:
        self._record("list_nodes")
        return list(self.nodes)

    async def list_namespaces(self) -> list[str]:
        self._record("list_namespaces")
        return list(self.namespaces)

    async def list_pods(self, namespace: str) -> list[CheckableResource]:
        self._record(f"list_pods:{namespace}")
        return list(self.pods.get(namespace, []))

    def add_pod(self, pod: CheckableResource) -> None:
        if pod.namespace not in self.namespaces:
            self.namespaces.append(pod.namespace)
        self.pods.setdefault(pod.namespace, []).append(pod)

    async def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> GaugeRegistry:
    return GaugeRegistry()


@pytest.fixture
def namespace_rule() -> NamespaceRule:
    return NamespaceRule(prefixes=frozenset({"openshift-", "kube-"}))


@pytest.fixture
def healthy_cluster() -> FakeCluster:
    """A small healthy cluster: 3 operators incl. etcd, 3 ready nodes, system and user pods."""
    cluster = FakeCluster()
    cluster.operators = [make_operator("etcd"), make_operator("authentication"), make_operator("dns")]
    cluster.nodes = [make_node("master-0"), make_node("master-1"), make_node("worker-0")]
    cluster.add_pod(make_pod("etcd-master-0", "openshift-etcd"))
    cluster.add_pod(make_pod("coredns-abc", "kube-system"))
    cluster.add_pod(make_pod("installer-7", "openshift-etcd", phase="Succeeded", terminated="Completed"))
    cluster.add_pod(make_pod("web-1", "my-app"))
    cluster.namespaces.append("default")
    return cluster
