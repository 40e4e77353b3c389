"""Conversion of raw API objects (camelCase dicts) into resource snapshots.

Both the custom-objects API and ``ApiClient.sanitize_for_serialization``
produce the same JSON-shaped dicts, so one set of converters serves every
kind.  Missing fields are tolerated: a resource with no status simply has
no conditions.
"""

from __future__ import annotations

from typing import Any

from healthchecker.models.resources import (
    CheckableResource,
    ConditionStatus,
    ContainerState,
    ResourceCondition,
    ResourceKind,
)


def _status_of(value: Any) -> ConditionStatus:
    try:
        return ConditionStatus(str(value))
    except ValueError:
        return ConditionStatus.UNKNOWN


def condition_from_dict(raw: dict[str, Any]) -> ResourceCondition:
    return ResourceCondition(
        type=str(raw.get("type", "")),
        status=_status_of(raw.get("status")),
        message=str(raw.get("message") or ""),
    )


def _metadata(raw: dict[str, Any]) -> tuple[str, str]:
    metadata = raw.get("metadata") or {}
    return str(metadata.get("name", "")), str(metadata.get("namespace") or "")


def _conditions(status: dict[str, Any]) -> tuple[ResourceCondition, ...]:
    return tuple(condition_from_dict(c) for c in status.get("conditions") or [] if isinstance(c, dict))


def resource_from_dict(kind: ResourceKind, raw: dict[str, Any]) -> CheckableResource:
    """Build a snapshot of a condition-bearing resource (operator, version, node)."""
    name, namespace = _metadata(raw)
    status = raw.get("status") or {}
    return CheckableResource(kind=kind, name=name, namespace=namespace, conditions=_conditions(status))


def _container_state(raw: dict[str, Any], init: bool) -> ContainerState:
    state = raw.get("state") or {}
    waiting = state.get("waiting") or {}
    terminated = state.get("terminated") or {}
    return ContainerState(
        name=str(raw.get("name", "")),
        init=init,
        waiting_reason=str(waiting.get("reason") or ""),
        terminated_reason=str(terminated.get("reason") or ""),
    )


def pod_from_dict(raw: dict[str, Any]) -> CheckableResource:
    name, namespace = _metadata(raw)
    status = raw.get("status") or {}
    containers = [_container_state(c, init=False) for c in status.get("containerStatuses") or []]
    containers += [_container_state(c, init=True) for c in status.get("initContainerStatuses") or []]
    return CheckableResource(
        kind=ResourceKind.POD,
        name=name,
        namespace=namespace,
        conditions=_conditions(status),
        phase=str(status.get("phase") or ""),
        containers=tuple(containers),
    )


def items_of(raw: dict[str, Any]) -> list[dict[str, Any]]:
    return [item for item in raw.get("items") or [] if isinstance(item, dict)]
