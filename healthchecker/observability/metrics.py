"""Gauge registry holding the last verdict of every health metric.

The registry is the only mutable state shared between the scheduler (writer)
and the /metrics endpoint (reader).  Each check unit writes only the metrics
it owns, so a single lock guarding individual reads and writes is enough:
readers see an untorn value per metric, not a cross-metric transaction.

A metric has no value until its first write and is not exposed until then.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from healthchecker.models.metrics import METRIC_HELP, HealthMetric


class GaugeRegistry(Collector):
    """Single-writer-per-metric store exposed as a Prometheus collector."""

    def __init__(self, metrics: Iterable[HealthMetric] = tuple(HealthMetric)) -> None:
        self._lock = threading.Lock()
        self._values: dict[HealthMetric, int | None] = dict.fromkeys(metrics)
        self._prometheus = CollectorRegistry(auto_describe=False)
        self._prometheus.register(self)

    def set(self, metric: HealthMetric, value: int) -> None:
        """Overwrite *metric* with 0 (healthy) or 1 (unhealthy)."""
        if metric not in self._values:
            raise KeyError(f"unknown metric: {metric}")
        if value not in (0, 1):
            raise ValueError(f"binary gauge {metric} accepts only 0 or 1, got {value!r}")
        with self._lock:
            self._values[metric] = int(value)

    def get(self, metric: HealthMetric) -> int | None:
        """Return the last written value, or None before the first write."""
        with self._lock:
            return self._values[metric]

    def snapshot(self) -> dict[HealthMetric, int | None]:
        with self._lock:
            return dict(self._values)

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for metric in self._values:
            yield GaugeMetricFamily(metric.value, METRIC_HELP.get(metric, ""))

    def collect(self) -> Iterator[GaugeMetricFamily]:
        for metric, value in self.snapshot().items():
            if value is None:
                continue
            yield GaugeMetricFamily(metric.value, METRIC_HELP.get(metric, ""), value=value)

    def render(self) -> bytes:
        """Serialize all written metrics in the Prometheus text exposition format."""
        return generate_latest(self._prometheus)
