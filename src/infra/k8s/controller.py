"""Abstract Kubernetes controller interface.

Defines the contract for the cluster operations the deployer needs, which
can be implemented by different backends (kubectl subprocess, kr8s library).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@dataclass
class PodInfo:
    """Information about a Kubernetes pod."""

    name: str
    status: str
    ready: bool = False
    restarts: int = 0
    creation_timestamp: str = ""
    ip: str = ""
    node: str = ""


@dataclass
class ResourceStatus:
    """Structured status of a single namespaced resource.

    ``details`` holds kind-specific fields: replica counts for a Deployment,
    type/clusterIP/ports for a Service, host and URL for a Route.
    """

    kind: str
    name: str
    namespace: str
    exists: bool
    ready: bool = False
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)


class ClusterQueryError(Exception):
    """Raised when a read-only cluster query fails for reasons other than NotFound."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class CapabilityQueryError(ClusterQueryError):
    """Raised when the cluster cannot answer an API discovery query."""


# =============================================================================
# Response Parsing (shared by all backends)
# =============================================================================


def parse_pod(raw: dict[str, Any]) -> PodInfo:
    """Build a PodInfo from a raw Pod object."""
    metadata = raw.get("metadata", {})
    spec = raw.get("spec", {})
    status = raw.get("status", {})

    pod_status = status.get("phase", "Unknown")
    restarts = 0
    ready = bool(status.get("containerStatuses"))

    for cs in status.get("containerStatuses", []):
        restarts += cs.get("restartCount", 0)
        ready = ready and cs.get("ready", False)
        state = cs.get("state", {})
        if "waiting" in state:
            reason = state["waiting"].get("reason", "")
            if reason:
                pod_status = reason
        elif "terminated" in state:
            if state["terminated"].get("reason", "") == "Error":
                pod_status = "Error"

    return PodInfo(
        name=metadata.get("name", ""),
        status=pod_status,
        ready=ready,
        restarts=restarts,
        creation_timestamp=metadata.get("creationTimestamp", ""),
        ip=status.get("podIP", ""),
        node=spec.get("nodeName", ""),
    )


def _deployment_status(status: ResourceStatus, raw: dict[str, Any]) -> None:
    spec = raw.get("spec", {})
    state = raw.get("status", {})
    desired = spec.get("replicas", 0)
    ready_replicas = state.get("readyReplicas", 0)
    containers = spec.get("template", {}).get("spec", {}).get("containers", [])

    status.ready = desired > 0 and ready_replicas >= desired
    status.message = f"{ready_replicas}/{desired} replicas ready"
    status.details = {
        "replicas": desired,
        "ready_replicas": ready_replicas,
        "updated_replicas": state.get("updatedReplicas", 0),
        "available_replicas": state.get("availableReplicas", 0),
        "image": containers[0].get("image", "") if containers else "",
    }


def _service_status(status: ResourceStatus, raw: dict[str, Any]) -> None:
    spec = raw.get("spec", {})

    ports = []
    for port in spec.get("ports", []):
        port_str = f"{port.get('port')}"
        if target := port.get("targetPort"):
            port_str += f":{target}"
        if proto := port.get("protocol"):
            port_str += f"/{proto}"
        if name := port.get("name"):
            port_str += f" ({name})"
        ports.append(port_str)

    status.ready = True
    status.details = {
        "type": spec.get("type", ""),
        "cluster_ip": spec.get("clusterIP", ""),
        "ports": ",".join(ports),
        "selector": spec.get("selector", {}),
    }


def _route_status(status: ResourceStatus, raw: dict[str, Any]) -> None:
    spec = raw.get("spec", {})
    host = spec.get("host", "")
    termination = spec.get("tls", {}).get("termination", "")

    admitted = False
    for ingress in raw.get("status", {}).get("ingress", []):
        for condition in ingress.get("conditions", []):
            if condition.get("type") == "Admitted":
                admitted = condition.get("status") == "True"
                status.message = condition.get("message", "")

    status.ready = admitted
    status.details = {
        "host": host,
        "tls_termination": termination,
        "url": (f"https://{host}" if termination else f"http://{host}") if host else "",
    }


_STATUS_PARSERS = {
    "Deployment": _deployment_status,
    "Service": _service_status,
    "Route": _route_status,
}


def parse_resource_status(
    kind: str, name: str, namespace: str, raw: dict[str, Any]
) -> ResourceStatus:
    """Build a ResourceStatus from a raw object returned by the API server."""
    status = ResourceStatus(kind=kind, name=name, namespace=namespace, exists=True)
    parser = _STATUS_PARSERS.get(kind)
    if parser is not None:
        parser(status, raw)
    return status


def missing_resource_status(
    kind: str, name: str, namespace: str, message: str = ""
) -> ResourceStatus:
    """Status record for a resource that could not be found."""
    return ResourceStatus(
        kind=kind,
        name=name,
        namespace=namespace,
        exists=False,
        message=message or f'{kind.lower()} "{name}" not found',
    )


def normalize_namespace(value: str | None) -> str | None:
    """Normalize a kubeconfig namespace value.

    kubectl prints an empty string, "null" or "<nil>" when the active
    context has no namespace set.
    """
    if value is None:
        return None
    value = value.strip()
    if not value or value in ("null", "<nil>"):
        return None
    return value


def capability_from_resource_names(
    names: list[str], api_group: str, resource: str
) -> bool:
    """Check discovery output for a resource of the given API group.

    Accepts both bare plural names ("routes") and the qualified form
    kubectl prints with ``-o name`` ("routes.route.openshift.io").
    """
    qualified = f"{resource}.{api_group}"
    return any(n.strip() in (resource, qualified) for n in names)


# =============================================================================
# Abstract Controller
# =============================================================================


class KubernetesController(ABC):
    """Abstract base class for Kubernetes operations.

    All methods are async to support both sync (kubectl) and async (kr8s)
    implementations. Use `KubernetesControllerSync` or `run_sync()` to call
    from synchronous code.

    Example:
        from src.infra.k8s import KubectlController, run_sync

        controller = KubectlController()
        exists = run_sync(controller.namespace_exists("my-namespace"))
    """

    # =========================================================================
    # Cluster Context
    # =========================================================================

    @abstractmethod
    async def get_current_namespace(self) -> str | None:
        """Get the namespace of the active kubeconfig context.

        Returns:
            Namespace name, or None when the context sets no namespace
            or the kubeconfig cannot be read
        """
        ...

    @abstractmethod
    async def query_capability(self, api_group: str, resource: str) -> bool:
        """Check whether an API group serves a resource type.

        Args:
            api_group: API group to list (e.g., "route.openshift.io")
            resource: Plural resource name to look for (e.g., "routes")

        Returns:
            True if the resource is served by the cluster

        Raises:
            CapabilityQueryError: If the discovery call itself fails
        """
        ...

    # =========================================================================
    # Namespace Operations
    # =========================================================================

    @abstractmethod
    async def namespace_exists(self, namespace: str) -> bool:
        """Check if a namespace exists.

        Args:
            namespace: Namespace to check

        Returns:
            True if the namespace exists, False if the API reports NotFound

        Raises:
            ClusterQueryError: If the lookup fails for any other reason
                (unreachable API server, timeout, forbidden)
        """
        ...

    @abstractmethod
    async def create_namespace(self, namespace: str) -> CommandResult:
        """Create a namespace.

        Args:
            namespace: Namespace to create

        Returns:
            CommandResult with creation status
        """
        ...

    # =========================================================================
    # Resource Operations
    # =========================================================================

    @abstractmethod
    async def apply_manifest(self, document: dict[str, Any]) -> CommandResult:
        """Create or update a resource from a manifest document.

        Args:
            document: Manifest as a nested mapping

        Returns:
            CommandResult with apply status
        """
        ...

    @abstractmethod
    async def get_resource_status(
        self,
        kind: str,
        name: str,
        namespace: str,
    ) -> ResourceStatus:
        """Get the status of a named resource.

        Args:
            kind: Resource kind ("Deployment", "Service", "Route")
            name: Resource name
            namespace: Kubernetes namespace

        Returns:
            ResourceStatus; ``exists`` is False when the lookup fails
        """
        ...

    # =========================================================================
    # Pod Operations
    # =========================================================================

    @abstractmethod
    async def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[PodInfo]:
        """Get pods in a namespace with their status.

        Args:
            namespace: Kubernetes namespace
            label_selector: Optional label selector (e.g., "app=my-app")

        Returns:
            List of PodInfo objects with pod details
        """
        ...
