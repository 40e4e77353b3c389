"""Read-only snapshots of the cluster resources the checks evaluate.

Snapshots are built fresh from the API on every cycle and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ConditionStatus(StrEnum):
    """Status of a resource condition, as reported by the API."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ResourceKind(StrEnum):
    """Kinds of resource a check unit can evaluate."""

    CLUSTER_OPERATOR = "ClusterOperator"
    CLUSTER_VERSION = "ClusterVersion"
    NODE = "Node"
    POD = "Pod"


class PodPhase(StrEnum):
    """Pod lifecycle phase."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ResourceCondition:
    """A single status condition (type unique within a resource)."""

    type: str
    status: ConditionStatus
    message: str = ""


@dataclass(frozen=True)
class ContainerState:
    """Waiting/terminated reasons of one container or init container.

    An empty reason means the container is not in that state.
    """

    name: str
    init: bool = False
    waiting_reason: str = ""
    terminated_reason: str = ""


@dataclass(frozen=True)
class CheckableResource:
    """A resource snapshot with its ordered status conditions.

    ``namespace`` is empty for cluster-scoped kinds.  ``phase`` and
    ``containers`` are only populated for pods.
    """

    kind: ResourceKind
    name: str
    namespace: str = ""
    conditions: tuple[ResourceCondition, ...] = ()
    phase: str = ""
    containers: tuple[ContainerState, ...] = ()

    @property
    def display_name(self) -> str:
        if self.namespace:
            return f"{self.kind}/{self.namespace}/{self.name}"
        return f"{self.kind}/{self.name}"
