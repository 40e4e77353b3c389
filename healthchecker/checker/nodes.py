"""Node readiness check."""

from __future__ import annotations

from healthchecker.checker.base import CheckUnit
from healthchecker.checker.conditions import READY, find_condition, is_node_ready
from healthchecker.models.metrics import HealthMetric


class NodeReadinessCheck(CheckUnit):
    name = "nodes"
    owned_metrics = (HealthMetric.NODES_NOT_READY,)

    async def evaluate(self) -> dict[HealthMetric, bool]:
        nodes = await self._cluster.list_nodes()

        not_ready = False
        for node in nodes:
            if is_node_ready(node.conditions):
                continue
            not_ready = True
            ready = find_condition(node.conditions, READY)
            self._log.warning(
                "node_not_ready",
                node=node.name,
                resource=node.display_name,
                status=str(ready.status) if ready else "<missing>",
                message=ready.message if ready else "",
            )

        return {HealthMetric.NODES_NOT_READY: not_ready}
