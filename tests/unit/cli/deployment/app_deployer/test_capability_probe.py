"""Unit tests for Route API detection."""

from __future__ import annotations

from unittest.mock import MagicMock

from src.cli.deployment.app_deployer.capability_probe import (
    NO_CAPABILITIES,
    PlatformCapabilities,
    probe,
)
from src.cli.deployment.app_deployer.config_collector import DeploymentSpec
from src.cli.deployment.app_deployer.planning import build_plan
from src.infra.k8s.controller import CapabilityQueryError
from src.infra.k8s.serialization import dump_manifests
from tests.fixtures import FakeClusterClient


class TestProbe:
    """Tests for the probe() function."""

    def test_route_api_present(self, openshift_client: FakeClusterClient) -> None:
        """A cluster serving routes reports support."""
        caps = probe(openshift_client)

        assert caps.routes_supported is True
        assert openshift_client.calls["query_capability"] == 1

    def test_route_api_absent(self, fake_client: FakeClusterClient) -> None:
        """A plain Kubernetes cluster reports no support."""
        assert probe(fake_client) == NO_CAPABILITIES

    def test_query_error_degrades_to_absent(self) -> None:
        """A failed discovery query never fails the run."""
        client = FakeClusterClient(routes_supported=CapabilityQueryError("unreachable"))

        assert probe(client).routes_supported is False

    def test_unexpected_error_degrades_to_absent(self) -> None:
        """Any client exception is treated as no support."""
        client = MagicMock()
        client.query_capability.side_effect = OSError("connection refused")

        assert probe(client) == NO_CAPABILITIES

    def test_queries_requested_group(self) -> None:
        """The configured group and resource are passed through."""
        client = MagicMock()
        client.query_capability.return_value = True

        probe(client, "example.io", "things")

        client.query_capability.assert_called_once_with("example.io", "things")

    def test_failed_query_renders_like_unsupported(self, sample_spec: DeploymentSpec) -> None:
        """An unanswerable query yields the same manifests as an explicit "no"."""
        failing = FakeClusterClient(routes_supported=CapabilityQueryError("forbidden"))
        plain = FakeClusterClient(routes_supported=False)

        degraded = build_plan(sample_spec, probe(failing)).manifests
        explicit = build_plan(sample_spec, probe(plain)).manifests

        assert degraded.external is None
        assert degraded == explicit
        assert dump_manifests(degraded.documents()) == dump_manifests(explicit.documents())


class TestPlatformCapabilities:
    """Tests for the PlatformCapabilities record."""

    def test_default_is_no_routes(self) -> None:
        """The default record reports no optional APIs."""
        assert PlatformCapabilities().routes_supported is False

    def test_truthiness_follows_route_support(self) -> None:
        """The record is truthy only with route support."""
        assert bool(PlatformCapabilities(routes_supported=True)) is True
        assert bool(PlatformCapabilities()) is False
