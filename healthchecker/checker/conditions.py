"""Pure predicates mapping reported status to a healthy/unhealthy verdict.

Nothing here touches the gauge registry.  When a condition type appears
more than once on a resource (which the API contract forbids) the first
occurrence wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from healthchecker.models.resources import (
    CheckableResource,
    ConditionStatus,
    ContainerState,
    PodPhase,
    ResourceCondition,
)

DEGRADED = "Degraded"
AVAILABLE = "Available"
READY = "Ready"

FATAL_CONTAINER_REASONS: frozenset[str] = frozenset({"CrashLoopBackOff", "OOMKilled", "Error"})


def find_condition(conditions: Iterable[ResourceCondition], condition_type: str) -> ResourceCondition | None:
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


def degraded_reason(conditions: Iterable[ResourceCondition]) -> ResourceCondition | None:
    """Return the condition that makes a resource degraded, or None if healthy.

    Degraded=True or Available=False.  Used by ClusterOperator and
    ClusterVersion.
    """
    conditions = tuple(conditions)
    degraded = find_condition(conditions, DEGRADED)
    if degraded is not None and degraded.status == ConditionStatus.TRUE:
        return degraded
    available = find_condition(conditions, AVAILABLE)
    if available is not None and available.status == ConditionStatus.FALSE:
        return available
    return None


def is_degraded(conditions: Iterable[ResourceCondition]) -> bool:
    return degraded_reason(conditions) is not None


def is_node_ready(conditions: Iterable[ResourceCondition]) -> bool:
    """A node is ready only with Ready=True.  A missing Ready condition is not ready."""
    ready = find_condition(conditions, READY)
    return ready is not None and ready.status == ConditionStatus.TRUE


def is_container_failing(state: ContainerState) -> bool:
    return state.waiting_reason in FATAL_CONTAINER_REASONS or state.terminated_reason in FATAL_CONTAINER_REASONS


def failing_container(pod: CheckableResource) -> ContainerState | None:
    for state in pod.containers:
        if is_container_failing(state):
            return state
    return None


def is_pod_failing(pod: CheckableResource) -> bool:
    """Phase Failed, or any container or init container in a fatal state."""
    if pod.phase == PodPhase.FAILED:
        return True
    return failing_container(pod) is not None
