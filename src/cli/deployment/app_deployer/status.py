"""Structured status of a deployed application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants
from src.infra.k8s.controller import PodInfo, ResourceStatus, missing_resource_status

from .capability_probe import PlatformCapabilities, probe


class StatusClient(Protocol):
    def query_capability(self, api_group: str, resource: str) -> bool: ...

    def get_resource_status(
        self, kind: str, name: str, namespace: str
    ) -> ResourceStatus: ...

    def get_pods(
        self, namespace: str, label_selector: str | None = None
    ) -> list[PodInfo]: ...


@dataclass
class AppStatus:
    """Snapshot of an application's resources in one namespace.

    ``route`` is None when the cluster has no Route API.
    """

    app_name: str
    namespace: str
    deployment: ResourceStatus
    service: ResourceStatus
    pods: list[PodInfo] = field(default_factory=list)
    route: ResourceStatus | None = None

    @property
    def url(self) -> str | None:
        """Public URL of the application, when a Route has a host."""
        if self.route is None or not self.route.exists:
            return None
        return self.route.details.get("url") or None

    @property
    def deployed(self) -> bool:
        return self.deployment.exists and self.service.exists

    @property
    def ready_pods(self) -> int:
        return sum(1 for pod in self.pods if pod.ready)


class StatusReporter:
    """Reads back the resources created for an application.

    Example:
        reporter = StatusReporter(client)
        status = reporter.collect("demo", "default")
        print(status.deployment.message)
    """

    def __init__(
        self,
        client: StatusClient,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.client = client
        self.constants = constants or DEFAULT_CONSTANTS

    def collect(
        self,
        app_name: str,
        namespace: str,
        caps: PlatformCapabilities | None = None,
    ) -> AppStatus:
        """Gather Deployment, pods, Service and (when supported) Route status.

        Args:
            app_name: Name shared by the application's resources
            namespace: Namespace they live in
            caps: Known capabilities; probed when omitted
        """
        if caps is None:
            caps = probe(
                self.client,
                self.constants.ROUTE_API_GROUP,
                self.constants.ROUTE_RESOURCE,
            )

        selector = f"{self.constants.SELECTOR_KEY}={app_name}"
        logger.debug(f"Collecting status for {app_name} in {namespace} ({selector})")

        route = None
        if caps.routes_supported:
            route = self._resource("Route", app_name, namespace)

        return AppStatus(
            app_name=app_name,
            namespace=namespace,
            deployment=self._resource("Deployment", app_name, namespace),
            service=self._resource("Service", app_name, namespace),
            pods=self._pods(namespace, selector),
            route=route,
        )

    def _resource(self, kind: str, name: str, namespace: str) -> ResourceStatus:
        try:
            return self.client.get_resource_status(kind, name, namespace)
        except Exception as e:
            logger.warning(f"Could not read {kind} {name}: {e}")
            return missing_resource_status(kind, name, namespace, message=str(e))

    def _pods(self, namespace: str, selector: str) -> list[PodInfo]:
        try:
            return self.client.get_pods(namespace, selector)
        except Exception as e:
            logger.warning(f"Could not list pods for {selector}: {e}")
            return []
