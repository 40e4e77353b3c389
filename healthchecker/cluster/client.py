"""kubernetes_asyncio implementation of the ClusterAPI interface.

ClusterOperators and ClusterVersions are OpenShift ``config.openshift.io/v1``
custom resources read through the custom-objects API; nodes, namespaces and
pods come from the core v1 API.  Every call is read-only, bounded by the
configured timeout, and any failure surfaces as FetchError.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from healthchecker.cluster.convert import items_of, pod_from_dict, resource_from_dict
from healthchecker.errors import FetchError
from healthchecker.models.resources import CheckableResource, ResourceKind

_T = TypeVar("_T")

_CONFIG_GROUP = "config.openshift.io"
_CONFIG_VERSION = "v1"


async def load_kube_configuration() -> str:
    """Configure kubernetes-asyncio from the in-cluster service account, else kubeconfig.

    Returns which source was used: ``"in-cluster"`` or ``"kubeconfig"``.
    """
    # Imported lazily: some versions attempt cluster auto-detection on import.
    import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]

    try:
        # load_incluster_config() is synchronous in kubernetes-asyncio
        k8s_config.load_incluster_config()
        return "in-cluster"
    except k8s_config.ConfigException:
        # load_kube_config() is async in kubernetes-asyncio
        await k8s_config.load_kube_config()
        return "kubeconfig"


class ClusterClient:
    """Reads platform health inputs from the Kubernetes/OpenShift API."""

    def __init__(
        self,
        api_client: Any = None,
        timeout_seconds: float = 10.0,
        core_v1: Any = None,
        custom_objects: Any = None,
    ) -> None:
        self._api_client = api_client if api_client is not None else k8s_client.ApiClient()
        self._timeout = timeout_seconds
        self._core_v1 = core_v1 if core_v1 is not None else k8s_client.CoreV1Api(self._api_client)
        self._custom = (
            custom_objects if custom_objects is not None else k8s_client.CustomObjectsApi(self._api_client)
        )

    async def _call(self, operation: str, call: Awaitable[_T]) -> _T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except ApiException as exc:
            raise FetchError(operation, f"HTTP {exc.status}: {exc.reason}") from exc
        except TimeoutError as exc:
            raise FetchError(operation, f"timed out after {self._timeout}s") from exc
        except Exception as exc:
            raise FetchError(operation, exc) from exc

    def _to_dict(self, obj: Any) -> dict[str, Any]:
        return self._api_client.sanitize_for_serialization(obj) or {}

    async def list_operators(self) -> list[CheckableResource]:
        raw = await self._call(
            "list ClusterOperators",
            self._custom.list_cluster_custom_object(_CONFIG_GROUP, _CONFIG_VERSION, "clusteroperators"),
        )
        return [resource_from_dict(ResourceKind.CLUSTER_OPERATOR, item) for item in items_of(raw)]

    async def get_version(self, name: str) -> CheckableResource:
        raw = await self._call(
            f"get ClusterVersion {name!r}",
            self._custom.get_cluster_custom_object(_CONFIG_GROUP, _CONFIG_VERSION, "clusterversions", name),
        )
        return resource_from_dict(ResourceKind.CLUSTER_VERSION, raw)

    async def list_nodes(self) -> list[CheckableResource]:
        result = await self._call("list Nodes", self._core_v1.list_node())
        return [resource_from_dict(ResourceKind.NODE, item) for item in items_of(self._to_dict(result))]

    async def list_namespaces(self) -> list[str]:
        result = await self._call("list Namespaces", self._core_v1.list_namespace())
        names = (str((item.get("metadata") or {}).get("name", "")) for item in items_of(self._to_dict(result)))
        return [name for name in names if name]

    async def list_pods(self, namespace: str) -> list[CheckableResource]:
        result = await self._call(
            f"list Pods in namespace {namespace!r}",
            self._core_v1.list_namespaced_pod(namespace),
        )
        return [pod_from_dict(item) for item in items_of(self._to_dict(result))]

    async def close(self) -> None:
        await self._api_client.close()
