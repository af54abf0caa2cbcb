"""Unit tests for writing manifests to disk."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.cli.deployment.app_deployer.capability_probe import ROUTE_CAPABILITIES
from src.cli.deployment.app_deployer.config_collector import DeploymentSpec
from src.cli.deployment.app_deployer.errors import ManifestWriteError
from src.cli.deployment.app_deployer.manifest_writer import ManifestWriter
from src.cli.deployment.app_deployer.planning import build_plan


class TestManifestWriter:
    """Tests for ManifestWriter."""

    def test_writes_one_file_per_manifest(
        self, tmp_path: Path, sample_spec: DeploymentSpec
    ) -> None:
        """Files are named after the app and kind, in apply order."""
        manifests = build_plan(sample_spec, ROUTE_CAPABILITIES).manifests
        output = tmp_path / "nested" / "demo-kube-config"

        paths = ManifestWriter(output).write(manifests)

        assert [p.name for p in paths] == [
            "demo-deployment.yaml",
            "demo-service.yaml",
            "demo-route.yaml",
        ]
        assert yaml.safe_load(paths[1].read_text()) == manifests.internal

    def test_rewrite_overwrites_identically(
        self, tmp_path: Path, sample_spec: DeploymentSpec
    ) -> None:
        """Writing the same manifests twice gives the same bytes."""
        manifests = build_plan(sample_spec, ROUTE_CAPABILITIES).manifests
        writer = ManifestWriter(tmp_path)

        first = [p.read_bytes() for p in writer.write(manifests)]
        second = [p.read_bytes() for p in writer.write(manifests)]

        assert first == second

    def test_unwritable_directory_raises(
        self, tmp_path: Path, sample_spec: DeploymentSpec
    ) -> None:
        """A file in the way of the output directory is a write error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        manifests = build_plan(sample_spec, ROUTE_CAPABILITIES).manifests

        with pytest.raises(ManifestWriteError):
            ManifestWriter(blocker / "out").write(manifests)
