"""Blocking facade over the async Kubernetes controllers.

The deployment engine runs strictly in sequence, one cluster call at a
time, so it talks to the cluster through this synchronous wrapper.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from collections.abc import Coroutine
from typing import Any, TypeVar

from .controller import CommandResult, KubernetesController, PodInfo, ResourceStatus

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine to completion from synchronous code.

    When called from inside a running event loop, the coroutine is run on
    a fresh loop in a worker thread so the caller's loop is not re-entered.

    Args:
        coro: The coroutine to execute

    Returns:
        The result of the coroutine
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


class KubernetesControllerSync:
    """Synchronous wrapper around a KubernetesController.

    Every method blocks until the underlying async call completes.

    Example:
        from src.infra.k8s import KubectlController, KubernetesControllerSync

        client = KubernetesControllerSync(KubectlController())
        if not client.namespace_exists("demo"):
            client.create_namespace("demo")
    """

    def __init__(self, controller: KubernetesController) -> None:
        self._controller = controller

    @property
    def controller(self) -> KubernetesController:
        """Get the wrapped async controller."""
        return self._controller

    def get_current_namespace(self) -> str | None:
        return run_sync(self._controller.get_current_namespace())

    def query_capability(self, api_group: str, resource: str) -> bool:
        return run_sync(self._controller.query_capability(api_group, resource))

    def namespace_exists(self, namespace: str) -> bool:
        return run_sync(self._controller.namespace_exists(namespace))

    def create_namespace(self, namespace: str) -> CommandResult:
        return run_sync(self._controller.create_namespace(namespace))

    def apply_manifest(self, document: dict[str, Any]) -> CommandResult:
        return run_sync(self._controller.apply_manifest(document))

    def get_resource_status(
        self, kind: str, name: str, namespace: str
    ) -> ResourceStatus:
        return run_sync(self._controller.get_resource_status(kind, name, namespace))

    def get_pods(
        self, namespace: str, label_selector: str | None = None
    ) -> list[PodInfo]:
        return run_sync(self._controller.get_pods(namespace, label_selector))
