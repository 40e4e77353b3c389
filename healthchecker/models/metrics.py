"""Identities of the exposed health gauges.

Metric names are stable identifiers scraped by external alerting; renaming
one requires a migration note for consumers.
"""

from __future__ import annotations

from enum import StrEnum


class HealthMetric(StrEnum):
    """The five binary gauges.  Value 1 means unhealthy."""

    CLUSTER_OPERATORS_DEGRADED = "openshift_cluster_operators_degraded"
    ETCD_DEGRADED = "openshift_etcd_degraded"
    CLUSTERVERSION_DEGRADED = "openshift_clusterversion_degraded"
    NODES_NOT_READY = "openshift_nodes_not_ready"
    SYSTEM_PODS_FAILING = "openshift_system_pods_failing"


METRIC_HELP: dict[HealthMetric, str] = {
    HealthMetric.CLUSTER_OPERATORS_DEGRADED: (
        "1 if any ClusterOperator (excluding etcd) is degraded or unavailable, 0 otherwise."
    ),
    HealthMetric.ETCD_DEGRADED: "1 if the etcd ClusterOperator is degraded or unavailable, 0 otherwise.",
    HealthMetric.CLUSTERVERSION_DEGRADED: (
        "1 if the ClusterVersion 'version' is degraded or unavailable, 0 otherwise."
    ),
    HealthMetric.NODES_NOT_READY: "1 if any Node has condition Ready != True, 0 otherwise.",
    HealthMetric.SYSTEM_PODS_FAILING: (
        "1 if any pod in a system/platform namespace is failing "
        "(phase=Failed or container in CrashLoopBackOff/OOMKilled/Error), 0 otherwise."
    ),
}
