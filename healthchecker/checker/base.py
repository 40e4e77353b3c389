"""Template shared by every check unit.

A unit fetches one resource collection, evaluates it, and overwrites the
metrics it owns.  A FetchError is recovered here: every owned metric is set
to 1 (fail-closed) and the error is logged, never raised to the scheduler.
There is no retry within a cycle; the next cycle is the retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from healthchecker.cluster.base import ClusterAPI
from healthchecker.errors import FetchError
from healthchecker.models.metrics import HealthMetric
from healthchecker.observability.logging import get_logger
from healthchecker.observability.metrics import GaugeRegistry


class CheckUnit(ABC):
    """Base class for the independent health check units."""

    name: str = ""
    owned_metrics: tuple[HealthMetric, ...] = ()

    def __init__(self, cluster: ClusterAPI, registry: GaugeRegistry) -> None:
        self._cluster = cluster
        self._registry = registry
        self._log = get_logger(f"checker.{self.name}")

    @abstractmethod
    async def evaluate(self) -> dict[HealthMetric, bool]:
        """Fetch and evaluate; return an unhealthy flag for every owned metric.

        Raises:
            FetchError: a cluster API call failed.
        """

    async def run(self) -> dict[HealthMetric, int]:
        """Run one evaluation and write the owned metrics.  Returns what was written."""
        try:
            verdicts = await self.evaluate()
        except FetchError as exc:
            self._log.warning(
                "check_fetch_failed",
                check=self.name,
                operation=exc.operation,
                error=str(exc.cause),
                action="fail_closed",
            )
            return self.fail_closed()

        written = {metric: int(verdicts[metric]) for metric in self.owned_metrics}
        for metric, value in written.items():
            self._registry.set(metric, value)
        return written

    def fail_closed(self) -> dict[HealthMetric, int]:
        """Report every owned metric as unhealthy."""
        for metric in self.owned_metrics:
            self._registry.set(metric, 1)
        return dict.fromkeys(self.owned_metrics, 1)
