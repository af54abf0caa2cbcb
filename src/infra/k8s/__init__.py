"""Kubernetes infrastructure abstraction layer.

This module provides a clean abstraction over Kubernetes operations,
supporting multiple backends (kubectl subprocess, kr8s library).

Example:
    from src.infra.k8s import KubectlController, KubernetesControllerSync

    client = KubernetesControllerSync(KubectlController())
    has_routes = client.query_capability("route.openshift.io", "routes")
"""

from .controller import (
    CapabilityQueryError,
    ClusterQueryError,
    CommandResult,
    KubernetesController,
    PodInfo,
    ResourceStatus,
)
from .helpers import create_k8s_controller, get_k8s_controller_sync
from .kubectl_controller import KubectlController
from .serialization import dump_manifest, dump_manifests
from .sync import KubernetesControllerSync, run_sync

__all__ = [
    # Controller classes
    "KubernetesController",
    "KubectlController",
    "KubernetesControllerSync",
    # Data classes
    "CommandResult",
    "PodInfo",
    "ResourceStatus",
    "CapabilityQueryError",
    "ClusterQueryError",
    # Utilities
    "create_k8s_controller",
    "get_k8s_controller_sync",
    "dump_manifest",
    "dump_manifests",
    "run_sync",
]
