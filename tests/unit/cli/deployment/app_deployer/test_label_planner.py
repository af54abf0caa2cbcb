"""Unit tests for label, selector and port-name planning."""

from __future__ import annotations

from dataclasses import replace

from src.cli.deployment.app_deployer.capability_probe import (
    NO_CAPABILITIES,
    ROUTE_CAPABILITIES,
)
from src.cli.deployment.app_deployer.config_collector import DeploymentSpec
from src.cli.deployment.app_deployer.label_planner import plan, port_name_for


class TestPlan:
    """Tests for plan()."""

    def test_common_labels_on_kubernetes(self, sample_spec: DeploymentSpec) -> None:
        """Without route support no platform-specific label is added."""
        labels = plan(sample_spec, NO_CAPABILITIES)

        assert labels.common_labels == {
            "app": "demo",
            "app.kubernetes.io/component": "demo",
            "app.kubernetes.io/instance": "demo",
            "app.kubernetes.io/name": "demo",
            "app.kubernetes.io/part-of": "demo-app",
        }

    def test_runtime_version_label_on_openshift(self, sample_spec: DeploymentSpec) -> None:
        """Route support adds the runtime version label."""
        labels = plan(sample_spec, ROUTE_CAPABILITIES)

        assert labels.common_labels["app.openshift.io/runtime-version"] == "1.0.0"

    def test_selector_is_subset_of_pod_template_labels(
        self, sample_spec: DeploymentSpec
    ) -> None:
        """Pods created from the template always match the selector."""
        labels = plan(sample_spec, NO_CAPABILITIES)

        assert labels.selector == {"app": "demo"}
        assert labels.pod_template_labels == {"app": "demo", "deployment": "demo"}
        assert labels.selector.items() <= labels.pod_template_labels.items()
        assert labels.selector_string == "app=demo"

    def test_port_name_derived_from_port(self, sample_spec: DeploymentSpec) -> None:
        """The port name is the http- prefix plus the port."""
        assert plan(sample_spec, NO_CAPABILITIES).port_name == "http-80"
        assert plan(replace(sample_spec, container_port=8443), NO_CAPABILITIES).port_name == (
            "http-8443"
        )

    def test_deterministic(self, sample_spec: DeploymentSpec) -> None:
        """Identical inputs give equal label sets."""
        assert plan(sample_spec, ROUTE_CAPABILITIES) == plan(sample_spec, ROUTE_CAPABILITIES)

    def test_returned_dicts_are_copies(self, sample_spec: DeploymentSpec) -> None:
        """Mutating a returned mapping does not change the label set."""
        labels = plan(sample_spec, NO_CAPABILITIES)

        labels.common_labels["app"] = "changed"

        assert labels.common_labels["app"] == "demo"


def test_port_name_for() -> None:
    """port_name_for formats any port."""
    assert port_name_for(1) == "http-1"
    assert port_name_for(65535) == "http-65535"
