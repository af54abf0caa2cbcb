"""Unit tests for the blocking controller facade and backend selection."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.infra.config import ClusterConfig
from src.infra.k8s.controller import CommandResult
from src.infra.k8s.helpers import create_k8s_controller, get_k8s_controller_sync
from src.infra.k8s.kr8s_controller import Kr8sController
from src.infra.k8s.kubectl_controller import KubectlController
from src.infra.k8s.sync import KubernetesControllerSync, run_sync


class TestRunSync:
    """Tests for run_sync()."""

    def test_runs_without_loop(self) -> None:
        async def answer() -> int:
            return 42

        assert run_sync(answer()) == 42

    @pytest.mark.asyncio
    async def test_runs_inside_loop(self) -> None:
        """Inside a running loop the coroutine runs on a worker thread."""

        async def answer() -> str:
            await asyncio.sleep(0)
            return "ok"

        assert run_sync(answer()) == "ok"


class TestKubernetesControllerSync:
    """Tests for the synchronous wrapper."""

    def test_methods_delegate(self) -> None:
        controller = MagicMock()
        controller.namespace_exists = AsyncMock(return_value=True)
        controller.apply_manifest = AsyncMock(return_value=CommandResult(success=True))
        controller.query_capability = AsyncMock(return_value=False)
        client = KubernetesControllerSync(controller)

        assert client.namespace_exists("demo") is True
        assert client.apply_manifest({"kind": "Service"}).success is True
        assert client.query_capability("route.openshift.io", "routes") is False
        controller.query_capability.assert_awaited_once_with("route.openshift.io", "routes")
        assert client.controller is controller


class TestBackendSelection:
    """Tests for choosing the controller backend."""

    def test_kubectl_backend(self) -> None:
        controller = create_k8s_controller(ClusterConfig(backend="kubectl", request_timeout=7))

        assert isinstance(controller, KubectlController)
        assert controller.request_timeout == 7

    def test_kr8s_backend(self) -> None:
        assert isinstance(create_k8s_controller(ClusterConfig()), Kr8sController)

    def test_sync_client_cached_per_config(self) -> None:
        cluster = ClusterConfig(backend="kubectl")

        assert get_k8s_controller_sync(cluster) is get_k8s_controller_sync(cluster)
