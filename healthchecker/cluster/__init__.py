"""Cluster API access for the health checks.

Submodules:
    base    -- ClusterAPI protocol consumed by the check units.
    convert -- Raw API object -> CheckableResource conversion.
    client  -- kubernetes_asyncio-backed ClusterClient.
"""

from healthchecker.cluster.base import ClusterAPI
from healthchecker.cluster.client import ClusterClient

__all__ = ["ClusterAPI", "ClusterClient"]
