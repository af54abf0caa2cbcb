"""Kr8s-based implementation of KubernetesController.

Uses the kr8s library for native async Kubernetes operations, falling back
to kubectl where kr8s has no equivalent (apply, kubeconfig namespace, CRDs).
"""

from __future__ import annotations

from typing import Any

import kr8s
from kr8s.asyncio.objects import Deployment, Namespace, Pod, Service
from loguru import logger

from .controller import (
    CapabilityQueryError,
    ClusterQueryError,
    CommandResult,
    KubernetesController,
    PodInfo,
    ResourceStatus,
    missing_resource_status,
    parse_pod,
    parse_resource_status,
)
from .kubectl_controller import KubectlController

_NATIVE_KINDS = {"Deployment": Deployment, "Service": Service}


class Kr8sController(KubernetesController):
    """Kubernetes controller using kr8s library.

    Note: The kr8s API client is NOT cached because it's tied to the event loop
    that was running when created. When using run_sync() which calls asyncio.run(),
    each call creates a new event loop, making the cached API unusable.
    """

    def __init__(self, request_timeout: float = 30.0) -> None:
        """Initialize the kr8s controller.

        Args:
            request_timeout: Seconds before a kubectl fallback call is abandoned
        """
        self._kubectl = KubectlController(request_timeout=request_timeout)

    async def _get_api(self) -> Any:  # Returns kr8s._api.Api
        """Create a kr8s API client bound to the running event loop."""
        return await kr8s.asyncio.api()

    # =========================================================================
    # Cluster Context
    # =========================================================================

    async def get_current_namespace(self) -> str | None:
        """Get the namespace of the active kubeconfig context.

        Note: kr8s substitutes "default" when the context sets no namespace,
        so the raw kubeconfig value is read through kubectl instead.
        """
        return await self._kubectl.get_current_namespace()

    async def query_capability(self, api_group: str, resource: str) -> bool:
        """Check whether an API group serves a resource type.

        Reads only the discovery documents of the requested group, rather
        than walking every group version in the cluster. A 404 on the group
        means the group is not served.
        """
        try:
            api = await self._get_api()
            group = await self._discovery(api, api_group)
            if group is None:
                return False
            group_version = group.get("preferredVersion", {}).get("groupVersion")
            if not group_version:
                return False
            resources = await self._discovery(api, group_version)
        except Exception as e:
            raise CapabilityQueryError(
                f"Cannot list API resources for group {api_group}", details=str(e)
            ) from e

        names = [entry.get("name", "") for entry in (resources or {}).get("resources", [])]
        return resource in names

    @staticmethod
    async def _discovery(api: Any, path: str) -> dict[str, Any] | None:
        """GET /apis/<path>; None when the server answers 404."""
        async with api.call_api(
            "GET", version="", base="/apis", url=path, raise_for_status=False
        ) as response:
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()

    # =========================================================================
    # Namespace Operations
    # =========================================================================

    async def namespace_exists(self, namespace: str) -> bool:
        """Check if a namespace exists."""
        try:
            api = await self._get_api()
            ns = await Namespace.get(namespace, api=api)
            return ns is not None
        except kr8s.NotFoundError:
            return False
        except Exception as e:
            raise ClusterQueryError(
                f"Cannot query namespace {namespace}", details=str(e)
            ) from e

    async def create_namespace(self, namespace: str) -> CommandResult:
        """Create a namespace."""
        try:
            api = await self._get_api()
            ns = Namespace(
                {
                    "apiVersion": "v1",
                    "kind": "Namespace",
                    "metadata": {"name": namespace},
                },
                api=api,
            )
            await ns.create()
            return CommandResult(success=True, stdout=f"namespace/{namespace} created")
        except Exception as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    # =========================================================================
    # Resource Operations
    # =========================================================================

    async def apply_manifest(self, document: dict[str, Any]) -> CommandResult:
        """Create or update a resource from a manifest document.

        Note: kr8s doesn't have a direct 'apply' equivalent, so we use
        kubectl subprocess for this operation.
        """
        return await self._kubectl.apply_manifest(document)

    async def get_resource_status(
        self,
        kind: str,
        name: str,
        namespace: str,
    ) -> ResourceStatus:
        """Get the status of a named resource.

        Note: Routes are a CRD, so they are read through kubectl.
        """
        object_class = _NATIVE_KINDS.get(kind)
        if object_class is None:
            return await self._kubectl.get_resource_status(kind, name, namespace)

        try:
            api = await self._get_api()
            obj = await object_class.get(name, namespace=namespace, api=api)
        except kr8s.NotFoundError:
            return missing_resource_status(kind, name, namespace)
        except Exception as e:
            logger.debug(f"Failed to read {kind}/{name}: {e}")
            return missing_resource_status(kind, name, namespace, str(e))

        return parse_resource_status(kind, name, namespace, obj.raw)

    # =========================================================================
    # Pod Operations
    # =========================================================================

    async def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[PodInfo]:
        """Get pods in a namespace with their status."""
        try:
            api = await self._get_api()
            kwargs: dict[str, Any] = {"namespace": namespace, "api": api}
            if label_selector:
                kwargs["label_selector"] = label_selector
            return [parse_pod(pod.raw) async for pod in Pod.list(**kwargs)]
        except Exception:
            return []
