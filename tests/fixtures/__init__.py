"""Shared test fixtures: an in-memory cluster client and a sample spec."""

from __future__ import annotations

import copy
from collections import Counter
from pathlib import Path
from typing import Any

import pytest

from src.cli.deployment.app_deployer.config_collector import DeploymentSpec
from src.infra.k8s.controller import (
    CommandResult,
    PodInfo,
    ResourceStatus,
    missing_resource_status,
)


class FakeClusterClient:
    """In-memory stand-in for KubernetesControllerSync.

    Applies are create-or-update keyed by (kind, name, namespace), like
    ``kubectl apply``. Every call is counted in ``calls``.
    """

    def __init__(
        self,
        *,
        namespaces: set[str] | None = None,
        current_namespace: str | None = None,
        routes_supported: bool | Exception = False,
        fail_kinds: set[str] | None = None,
        namespace_create_fails: bool = False,
    ) -> None:
        self.namespaces = set(namespaces or {"default"})
        self.current_namespace = current_namespace
        self.routes_supported = routes_supported
        self.fail_kinds = set(fail_kinds or ())
        self.namespace_create_fails = namespace_create_fails
        self.resources: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.calls: Counter[str] = Counter()
        self.applied_kinds: list[str] = []

    def get_current_namespace(self) -> str | None:
        self.calls["get_current_namespace"] += 1
        return self.current_namespace

    def query_capability(self, api_group: str, resource: str) -> bool:
        self.calls["query_capability"] += 1
        if isinstance(self.routes_supported, Exception):
            raise self.routes_supported
        return self.routes_supported

    def namespace_exists(self, namespace: str) -> bool:
        self.calls["namespace_exists"] += 1
        return namespace in self.namespaces

    def create_namespace(self, namespace: str) -> CommandResult:
        self.calls["create_namespace"] += 1
        if self.namespace_create_fails:
            return CommandResult(success=False, stderr="forbidden", returncode=1)
        if namespace in self.namespaces:
            return CommandResult(
                success=False, stderr=f"namespaces \"{namespace}\" already exists"
            )
        self.namespaces.add(namespace)
        return CommandResult(success=True, stdout=f"namespace/{namespace} created")

    def apply_manifest(self, document: dict[str, Any]) -> CommandResult:
        self.calls["apply_manifest"] += 1
        kind = document["kind"]
        name = document["metadata"]["name"]
        namespace = document["metadata"]["namespace"]
        self.applied_kinds.append(kind)
        if kind in self.fail_kinds:
            return CommandResult(success=False, stderr=f"{kind} rejected", returncode=1)
        if namespace not in self.namespaces:
            return CommandResult(
                success=False, stderr=f"namespaces \"{namespace}\" not found", returncode=1
            )
        key = (kind, name, namespace)
        verb = "configured" if key in self.resources else "created"
        self.resources[key] = copy.deepcopy(document)
        return CommandResult(success=True, stdout=f"{kind.lower()}/{name} {verb}")

    def get_resource_status(self, kind: str, name: str, namespace: str) -> ResourceStatus:
        self.calls["get_resource_status"] += 1
        document = self.resources.get((kind, name, namespace))
        if document is None:
            return missing_resource_status(kind, name, namespace)
        details: dict[str, Any] = {}
        if kind == "Route":
            details = {"host": f"{name}.apps.example", "url": f"https://{name}.apps.example"}
        return ResourceStatus(
            kind=kind, name=name, namespace=namespace, exists=True, ready=True, details=details
        )

    def get_pods(self, namespace: str, label_selector: str | None = None) -> list[PodInfo]:
        self.calls["get_pods"] += 1
        return []


@pytest.fixture
def fake_client() -> FakeClusterClient:
    """A cluster with only the default namespace and no Route API."""
    return FakeClusterClient()


@pytest.fixture
def openshift_client() -> FakeClusterClient:
    """A cluster that serves the Route API."""
    return FakeClusterClient(routes_supported=True)


@pytest.fixture
def sample_spec() -> DeploymentSpec:
    """A validated DeploymentSpec for a small demo application."""
    return DeploymentSpec(
        app_name="demo",
        image_reference="registry.example/demo:1.0.0",
        namespace="default",
        container_port=80,
        replica_count=2,
        cpu_request="1",
        cpu_limit="2",
        memory_request="128Mi",
        memory_limit="256Mi",
        output_target=Path("./demo-kube-config"),
    )


__all__ = ["FakeClusterClient", "fake_client", "openshift_client", "sample_spec"]
