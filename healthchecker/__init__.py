"""In-cluster OpenShift platform health checker.

Periodically polls the cluster API and exposes five binary Prometheus gauges
(0 = healthy, 1 = unhealthy) for scraping.
"""

__version__ = "0.1.0"
