"""Unit tests for manifest synthesis."""

from __future__ import annotations

import yaml

from src.cli.deployment.app_deployer.capability_probe import (
    NO_CAPABILITIES,
    ROUTE_CAPABILITIES,
    PlatformCapabilities,
)
from src.cli.deployment.app_deployer.config_collector import DeploymentSpec
from src.cli.deployment.app_deployer.errors import ApplyStep
from src.cli.deployment.app_deployer.label_planner import plan
from src.cli.deployment.app_deployer.planning import build_plan
from src.cli.deployment.app_deployer.synthesizer import ManifestSet, synthesize
from src.infra.k8s.serialization import dump_manifest


def _rendered(manifests: ManifestSet) -> dict[str, str]:
    return {m["kind"]: dump_manifest(m) for m in manifests.documents()}


def _manifests(spec: DeploymentSpec, caps: PlatformCapabilities) -> ManifestSet:
    return synthesize(spec, plan(spec, caps), caps)


class TestConditionalEmission:
    """Tests for the optional Route."""

    def test_two_manifests_without_route_api(self, sample_spec: DeploymentSpec) -> None:
        """Plain Kubernetes gets a Deployment and a Service only."""
        manifests = _manifests(sample_spec, NO_CAPABILITIES)

        assert manifests.external is None
        assert [m["kind"] for m in manifests.documents()] == ["Deployment", "Service"]

    def test_three_manifests_with_route_api(self, sample_spec: DeploymentSpec) -> None:
        """OpenShift also gets a Route, applied last."""
        manifests = _manifests(sample_spec, ROUTE_CAPABILITIES)

        assert [m["kind"] for m in manifests.documents()] == [
            "Deployment",
            "Service",
            "Route",
        ]
        assert [step for step, _ in manifests.steps()] == [
            ApplyStep.WORKLOAD,
            ApplyStep.INTERNAL_EXPOSURE,
            ApplyStep.EXTERNAL_EXPOSURE,
        ]


class TestDeploymentManifest:
    """Tests for the workload manifest."""

    def test_replicas_port_and_image(self, sample_spec: DeploymentSpec) -> None:
        """Deployment values reach the container."""
        deployment = _manifests(sample_spec, NO_CAPABILITIES).workload

        assert deployment["apiVersion"] == "apps/v1"
        assert deployment["spec"]["replicas"] == 2
        container = deployment["spec"]["template"]["spec"]["containers"][0]
        assert container["name"] == "demo"
        assert container["image"] == "registry.example/demo:1.0.0"
        assert container["ports"] == [{"containerPort": 80, "protocol": "TCP"}]
        assert container["resources"] == {
            "requests": {"cpu": "1", "memory": "128Mi"},
            "limits": {"cpu": "2", "memory": "256Mi"},
        }

    def test_rollout_settings(self, sample_spec: DeploymentSpec) -> None:
        """Rolling update bounds and history limits are fixed."""
        spec = _manifests(sample_spec, NO_CAPABILITIES).workload["spec"]

        assert spec["strategy"] == {
            "type": "RollingUpdate",
            "rollingUpdate": {"maxUnavailable": "25%", "maxSurge": "25%"},
        }
        assert spec["revisionHistoryLimit"] == 10
        assert spec["progressDeadlineSeconds"] == 600
        assert spec["template"]["spec"]["terminationGracePeriodSeconds"] == 30

    def test_selector_matches_template(self, sample_spec: DeploymentSpec) -> None:
        """The Deployment selects the pods its template creates."""
        spec = _manifests(sample_spec, NO_CAPABILITIES).workload["spec"]

        selector = spec["selector"]["matchLabels"]
        template_labels = spec["template"]["metadata"]["labels"]
        assert selector.items() <= template_labels.items()


class TestLabelConsistency:
    """Tests for labels shared across manifests."""

    def test_all_manifests_share_labels_and_namespace(
        self, sample_spec: DeploymentSpec
    ) -> None:
        """Every manifest carries the same metadata labels and namespace."""
        manifests = _manifests(sample_spec, ROUTE_CAPABILITIES)
        labels = plan(sample_spec, ROUTE_CAPABILITIES).common_labels

        for document in manifests.documents():
            assert document["metadata"]["labels"] == labels
            assert document["metadata"]["namespace"] == "default"
            assert document["metadata"]["name"] == "demo"

    def test_service_selects_workload_pods(self, sample_spec: DeploymentSpec) -> None:
        """The Service selector equals the Deployment selector."""
        manifests = _manifests(sample_spec, NO_CAPABILITIES)

        assert (
            manifests.internal["spec"]["selector"]
            == manifests.workload["spec"]["selector"]["matchLabels"]
        )


class TestPortCrossReference:
    """Tests for the port name shared by Service and Route."""

    def test_service_port(self, sample_spec: DeploymentSpec) -> None:
        """The Service exposes the container port under the planned name."""
        service = _manifests(sample_spec, NO_CAPABILITIES).internal

        assert service["spec"]["type"] == "ClusterIP"
        assert service["spec"]["ports"] == [
            {"name": "http-80", "protocol": "TCP", "port": 80, "targetPort": 80}
        ]

    def test_route_targets_service_port_name(self, sample_spec: DeploymentSpec) -> None:
        """The Route points at the Service port by name."""
        manifests = _manifests(sample_spec, ROUTE_CAPABILITIES)
        route = manifests.external
        assert route is not None

        assert route["spec"]["port"]["targetPort"] == manifests.internal["spec"]["ports"][0]["name"]
        assert route["spec"]["to"] == {"kind": "Service", "name": "demo", "weight": 100}

    def test_route_is_edge_terminated_without_host(self, sample_spec: DeploymentSpec) -> None:
        """The Route redirects HTTP to edge TLS and lets the platform pick a host."""
        route = _manifests(sample_spec, ROUTE_CAPABILITIES).external
        assert route is not None

        assert route["apiVersion"] == "route.openshift.io/v1"
        assert route["spec"]["tls"] == {
            "termination": "edge",
            "insecureEdgeTerminationPolicy": "Redirect",
        }
        assert "host" not in route["spec"]
        assert route["metadata"]["annotations"] == {"openshift.io/host.generated": "true"}


class TestDeterminism:
    """Tests for byte-identical output."""

    def test_identical_inputs_render_identical_yaml(self, sample_spec: DeploymentSpec) -> None:
        """Two syntheses of the same input serialize to the same bytes."""
        first = _rendered(_manifests(sample_spec, ROUTE_CAPABILITIES))
        second = _rendered(_manifests(sample_spec, ROUTE_CAPABILITIES))

        assert first == second
        assert list(first) == ["Deployment", "Service", "Route"]

    def test_rendered_yaml_is_block_style_and_parses(self, sample_spec: DeploymentSpec) -> None:
        """Rendered YAML keeps key order and loads back to the same document."""
        manifests = _manifests(sample_spec, NO_CAPABILITIES)
        text = _rendered(manifests)["Deployment"]

        assert text.startswith("apiVersion: apps/v1\nkind: Deployment\n")
        assert "{" not in text.replace("securityContext: {}", "")
        assert yaml.safe_load(text) == manifests.workload

    def test_manifests_do_not_share_mutable_state(self, sample_spec: DeploymentSpec) -> None:
        """Changing one synthesized manifest leaves another run untouched."""
        first = _manifests(sample_spec, NO_CAPABILITIES)
        first.workload["metadata"]["labels"]["app"] = "mutated"
        first.internal["spec"]["selector"]["app"] = "mutated"

        second = _manifests(sample_spec, NO_CAPABILITIES)

        assert second.workload["metadata"]["labels"]["app"] == "demo"
        assert second.internal["spec"]["selector"]["app"] == "demo"
        assert first.workload["spec"]["selector"]["matchLabels"]["app"] == "demo"


def test_build_plan_combines_labels_and_manifests(sample_spec: DeploymentSpec) -> None:
    """build_plan wires the planner and synthesizer together."""
    result = build_plan(sample_spec, ROUTE_CAPABILITIES)

    assert result.labels.port_name == "http-80"
    assert result.manifests.external is not None
    assert result.manifests.namespace == "default"
