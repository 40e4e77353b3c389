"""Core data structures for the health checker."""

from healthchecker.models.config import (
    APIConfig,
    CheckerConfig,
    HealthCheckerConfig,
    LogConfig,
    NamespaceRule,
)
from healthchecker.models.metrics import METRIC_HELP, HealthMetric
from healthchecker.models.resources import (
    CheckableResource,
    ConditionStatus,
    ContainerState,
    PodPhase,
    ResourceCondition,
    ResourceKind,
)

__all__ = [
    "APIConfig",
    "CheckableResource",
    "CheckerConfig",
    "ConditionStatus",
    "ContainerState",
    "HealthCheckerConfig",
    "HealthMetric",
    "LogConfig",
    "METRIC_HELP",
    "NamespaceRule",
    "PodPhase",
    "ResourceCondition",
    "ResourceKind",
]
