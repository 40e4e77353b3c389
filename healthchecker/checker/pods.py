"""System pod check.

Namespaces are listed and classified every cycle; pods are then listed per
qualifying namespace rather than cluster-wide, which bounds the size of each
query.  A failure listing any namespace's pods aborts the rest of the unit
for this cycle and reports the fail-closed value.
"""

from __future__ import annotations

from healthchecker.checker.base import CheckUnit
from healthchecker.checker.conditions import failing_container, is_pod_failing
from healthchecker.checker.namespaces import is_system_namespace
from healthchecker.cluster.base import ClusterAPI
from healthchecker.models.config import NamespaceRule
from healthchecker.models.metrics import HealthMetric
from healthchecker.observability.metrics import GaugeRegistry


class SystemPodCheck(CheckUnit):
    name = "system_pods"
    owned_metrics = (HealthMetric.SYSTEM_PODS_FAILING,)

    def __init__(self, cluster: ClusterAPI, registry: GaugeRegistry, rule: NamespaceRule) -> None:
        super().__init__(cluster, registry)
        self._rule = rule

    async def evaluate(self) -> dict[HealthMetric, bool]:
        namespaces = await self._cluster.list_namespaces()
        system_namespaces = [ns for ns in namespaces if is_system_namespace(ns, self._rule)]
        self._log.debug("system_namespaces_selected", total=len(namespaces), selected=len(system_namespaces))

        failing = False
        for namespace in system_namespaces:
            for pod in await self._cluster.list_pods(namespace):
                if not is_pod_failing(pod):
                    continue
                failing = True
                container = failing_container(pod)
                self._log.warning(
                    "system_pod_failing",
                    pod=pod.name,
                    namespace=namespace,
                    resource=pod.display_name,
                    phase=pod.phase,
                    container=container.name if container else None,
                    init_container=container.init if container else None,
                    reason=(container.waiting_reason or container.terminated_reason) if container else None,
                )

        return {HealthMetric.SYSTEM_PODS_FAILING: failing}
