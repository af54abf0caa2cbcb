"""Manifest synthesis for the Deployment, Service and optional Route.

Manifests are assembled field by field as plain dicts and serialized once
at the boundary (see ``src.infra.k8s.serialization``). Every mapping is
built fresh on each call so callers can never alias shared state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

from .capability_probe import PlatformCapabilities
from .config_collector import DeploymentSpec
from .errors import ApplyStep
from .label_planner import LabelSet

Manifest = dict[str, Any]


@dataclass(frozen=True)
class ManifestSet:
    """The manifests of one run, plus where they go.

    ``external`` is None when the cluster has no Route API; it is never an
    empty placeholder.
    """

    app_name: str
    namespace: str
    workload: Manifest
    internal: Manifest
    external: Manifest | None = None

    def steps(self) -> list[tuple[ApplyStep, Manifest]]:
        """Manifests paired with their apply step, in apply order."""
        ordered = [
            (ApplyStep.WORKLOAD, self.workload),
            (ApplyStep.INTERNAL_EXPOSURE, self.internal),
        ]
        if self.external is not None:
            ordered.append((ApplyStep.EXTERNAL_EXPOSURE, self.external))
        return ordered

    def documents(self) -> list[Manifest]:
        """Manifests in apply order."""
        return [manifest for _, manifest in self.steps()]


class ManifestSynthesizer:
    """Renders a DeploymentSpec into cluster manifests.

    Example:
        synthesizer = ManifestSynthesizer()
        manifests = synthesizer.synthesize(spec, labels, caps)
    """

    def __init__(self, constants: DeploymentConstants | None = None) -> None:
        """Initialize the synthesizer.

        Args:
            constants: Optional deployment constants (uses defaults if not provided)
        """
        self.constants = constants or DEFAULT_CONSTANTS

    def synthesize(
        self,
        spec: DeploymentSpec,
        labels: LabelSet,
        caps: PlatformCapabilities,
    ) -> ManifestSet:
        """Build the ManifestSet for a run.

        Args:
            spec: Validated deployment inputs
            labels: Label vocabulary planned for this deployment
            caps: Platform capabilities; the Route is emitted only when supported

        Returns:
            ManifestSet with two or three manifests
        """
        external = self.route(spec, labels) if caps.routes_supported else None
        if external is None:
            logger.info(
                "Skipping OpenShift Route generation; create an Ingress manually "
                "if external access is needed"
            )

        return ManifestSet(
            app_name=spec.app_name,
            namespace=spec.namespace,
            workload=self.deployment(spec, labels),
            internal=self.service(spec, labels),
            external=external,
        )

    def _metadata(
        self,
        spec: DeploymentSpec,
        labels: LabelSet,
        annotations: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "name": spec.app_name,
            "namespace": spec.namespace,
            "labels": labels.common_labels,
        }
        if annotations:
            metadata["annotations"] = annotations
        return metadata

    def deployment(self, spec: DeploymentSpec, labels: LabelSet) -> Manifest:
        """Build the Deployment (workload) manifest."""
        c = self.constants
        container = {
            "name": spec.app_name,
            "image": spec.image_reference,
            "ports": [{"containerPort": spec.container_port, "protocol": "TCP"}],
            "resources": {
                "requests": {"cpu": spec.cpu_request, "memory": spec.memory_request},
                "limits": {"cpu": spec.cpu_limit, "memory": spec.memory_limit},
            },
            "imagePullPolicy": c.IMAGE_PULL_POLICY,
            "terminationMessagePath": "/dev/termination-log",
            "terminationMessagePolicy": "File",
        }

        return {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": self._metadata(spec, labels),
            "spec": {
                "replicas": spec.replica_count,
                "selector": {"matchLabels": labels.selector},
                "template": {
                    "metadata": {"labels": labels.pod_template_labels},
                    "spec": {
                        "containers": [container],
                        "restartPolicy": "Always",
                        "terminationGracePeriodSeconds": c.TERMINATION_GRACE_PERIOD_SECONDS,
                        "dnsPolicy": "ClusterFirst",
                        "securityContext": {},
                        "schedulerName": "default-scheduler",
                    },
                },
                "strategy": {
                    "type": "RollingUpdate",
                    "rollingUpdate": {
                        "maxUnavailable": c.MAX_UNAVAILABLE,
                        "maxSurge": c.MAX_SURGE,
                    },
                },
                "revisionHistoryLimit": c.REVISION_HISTORY_LIMIT,
                "progressDeadlineSeconds": c.PROGRESS_DEADLINE_SECONDS,
            },
        }

    def service(self, spec: DeploymentSpec, labels: LabelSet) -> Manifest:
        """Build the ClusterIP Service (internal exposure) manifest."""
        return {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": self._metadata(spec, labels),
            "spec": {
                "selector": labels.selector,
                "ports": [
                    {
                        "name": labels.port_name,
                        "protocol": "TCP",
                        "port": spec.container_port,
                        "targetPort": spec.container_port,
                    }
                ],
                "type": "ClusterIP",
            },
        }

    def route(self, spec: DeploymentSpec, labels: LabelSet) -> Manifest:
        """Build the OpenShift Route (external exposure) manifest.

        No host is set, so the platform generates one.
        """
        c = self.constants
        return {
            "apiVersion": c.ROUTE_API_VERSION,
            "kind": "Route",
            "metadata": self._metadata(
                spec, labels, annotations={"openshift.io/host.generated": "true"}
            ),
            "spec": {
                "to": {
                    "kind": "Service",
                    "name": spec.app_name,
                    "weight": c.ROUTE_WEIGHT,
                },
                "port": {"targetPort": labels.port_name},
                "tls": {
                    "termination": c.ROUTE_TLS_TERMINATION,
                    "insecureEdgeTerminationPolicy": c.ROUTE_INSECURE_POLICY,
                },
                "wildcardPolicy": "None",
            },
        }


def synthesize(
    spec: DeploymentSpec,
    labels: LabelSet,
    caps: PlatformCapabilities,
) -> ManifestSet:
    """Synthesize manifests with the default constants."""
    return ManifestSynthesizer().synthesize(spec, labels, caps)
