"""Interface the check units use to read the cluster."""

from __future__ import annotations

from typing import Protocol

from healthchecker.models.resources import CheckableResource


class ClusterAPI(Protocol):
    """Read-only cluster access.  Every method raises FetchError on failure."""

    async def list_operators(self) -> list[CheckableResource]: ...

    async def get_version(self, name: str) -> CheckableResource: ...

    async def list_nodes(self) -> list[CheckableResource]: ...

    async def list_namespaces(self) -> list[str]: ...

    async def list_pods(self, namespace: str) -> list[CheckableResource]: ...
