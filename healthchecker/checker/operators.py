"""ClusterOperator check.

The etcd operator is reported on its own gauge; every other operator feeds
the aggregate operators gauge.
"""

from __future__ import annotations

from healthchecker.checker.base import CheckUnit
from healthchecker.checker.conditions import degraded_reason
from healthchecker.models.metrics import HealthMetric

ETCD_OPERATOR = "etcd"


class ClusterOperatorCheck(CheckUnit):
    name = "cluster_operators"
    owned_metrics = (HealthMetric.CLUSTER_OPERATORS_DEGRADED, HealthMetric.ETCD_DEGRADED)

    async def evaluate(self) -> dict[HealthMetric, bool]:
        operators = await self._cluster.list_operators()

        operators_degraded = False
        etcd_degraded = False
        for operator in operators:
            reason = degraded_reason(operator.conditions)
            if reason is None:
                continue
            self._log.warning(
                "cluster_operator_degraded",
                operator=operator.name,
                resource=operator.display_name,
                condition=reason.type,
                status=str(reason.status),
                message=reason.message,
            )
            if operator.name == ETCD_OPERATOR:
                etcd_degraded = True
            else:
                operators_degraded = True

        return {
            HealthMetric.CLUSTER_OPERATORS_DEGRADED: operators_degraded,
            HealthMetric.ETCD_DEGRADED: etcd_degraded,
        }
