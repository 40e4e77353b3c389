"""ClusterVersion check.  A missing version resource is a fetch error."""

from __future__ import annotations

from healthchecker.checker.base import CheckUnit
from healthchecker.checker.conditions import degraded_reason
from healthchecker.cluster.base import ClusterAPI
from healthchecker.models.metrics import HealthMetric
from healthchecker.observability.metrics import GaugeRegistry

CLUSTER_VERSION_NAME = "version"


class ClusterVersionCheck(CheckUnit):
    name = "cluster_version"
    owned_metrics = (HealthMetric.CLUSTERVERSION_DEGRADED,)

    def __init__(
        self,
        cluster: ClusterAPI,
        registry: GaugeRegistry,
        version_name: str = CLUSTER_VERSION_NAME,
    ) -> None:
        super().__init__(cluster, registry)
        self._version_name = version_name

    async def evaluate(self) -> dict[HealthMetric, bool]:
        version = await self._cluster.get_version(self._version_name)
        reason = degraded_reason(version.conditions)
        if reason is not None:
            self._log.warning(
                "cluster_version_degraded",
                name=version.name,
                resource=version.display_name,
                condition=reason.type,
                status=str(reason.status),
                message=reason.message,
            )
        return {HealthMetric.CLUSTERVERSION_DEGRADED: reason is not None}
