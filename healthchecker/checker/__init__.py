"""Health check engine.

Submodules
----------
conditions -- Pure condition/pod predicates (degraded, ready, failing).
namespaces -- System namespace classification.
base       -- CheckUnit: fetch, evaluate, write; fail-closed on FetchError.
operators  -- ClusterOperator check (operators + etcd gauges).
version    -- ClusterVersion check.
nodes      -- Node readiness check.
pods       -- System namespace pod check.
scheduler  -- CheckScheduler: fixed-interval cooperative loop.
"""

from __future__ import annotations

from healthchecker.checker.base import CheckUnit
from healthchecker.checker.nodes import NodeReadinessCheck
from healthchecker.checker.operators import ClusterOperatorCheck
from healthchecker.checker.pods import SystemPodCheck
from healthchecker.checker.scheduler import CheckScheduler
from healthchecker.checker.version import ClusterVersionCheck
from healthchecker.cluster.base import ClusterAPI
from healthchecker.models.config import CheckerConfig
from healthchecker.observability.metrics import GaugeRegistry


def build_check_units(cluster: ClusterAPI, registry: GaugeRegistry, config: CheckerConfig) -> list[CheckUnit]:
    """Create the four check units, each owning a disjoint set of metrics."""
    return [
        ClusterOperatorCheck(cluster, registry),
        ClusterVersionCheck(cluster, registry),
        NodeReadinessCheck(cluster, registry),
        SystemPodCheck(cluster, registry, config.namespaces),
    ]


def build_scheduler(cluster: ClusterAPI, registry: GaugeRegistry, config: CheckerConfig) -> CheckScheduler:
    return CheckScheduler(build_check_units(cluster, registry, config), interval_seconds=config.interval_seconds)


__all__ = [
    "CheckScheduler",
    "CheckUnit",
    "ClusterOperatorCheck",
    "ClusterVersionCheck",
    "NodeReadinessCheck",
    "SystemPodCheck",
    "build_check_units",
    "build_scheduler",
]
