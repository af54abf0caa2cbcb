"""Kubectl-based implementation of KubernetesController.

Uses subprocess calls to kubectl for all operations.
"""

from __future__ import annotations

import asyncio
import json
import subprocess
from typing import Any

from loguru import logger

from .controller import (
    CapabilityQueryError,
    ClusterQueryError,
    CommandResult,
    KubernetesController,
    PodInfo,
    ResourceStatus,
    capability_from_resource_names,
    missing_resource_status,
    normalize_namespace,
    parse_pod,
    parse_resource_status,
)
from .serialization import dump_manifest


def _is_not_found(stderr: str) -> bool:
    """Whether kubectl failed because the object does not exist."""
    return "(NotFound)" in stderr or '" not found' in stderr


class KubectlController(KubernetesController):
    """Kubernetes controller using kubectl subprocess calls.

    All methods are async but internally use asyncio.to_thread()
    to run blocking subprocess calls without blocking the event loop.
    """

    def __init__(self, request_timeout: float = 30.0) -> None:
        """Initialize the kubectl controller.

        Args:
            request_timeout: Seconds before a kubectl call is abandoned
        """
        self.request_timeout = request_timeout

    async def _run_kubectl(
        self,
        args: list[str],
        *,
        input_data: str | None = None,
    ) -> CommandResult:
        """Run a kubectl command asynchronously.

        Args:
            args: Command arguments (without 'kubectl' prefix)
            input_data: Optional input to send to stdin

        Returns:
            CommandResult with execution results
        """
        cmd = ["kubectl", *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        def _run() -> CommandResult:
            try:
                # Own session: a terminal Ctrl+C must reach only the CLI process.
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    input=input_data,
                    timeout=self.request_timeout,
                    start_new_session=True,
                )
            except FileNotFoundError:
                return CommandResult(
                    success=False, stderr="kubectl not found in PATH", returncode=127
                )
            except subprocess.TimeoutExpired:
                return CommandResult(
                    success=False,
                    stderr=f"kubectl {args[0]} timed out after {self.request_timeout}s",
                    returncode=124,
                )
            return CommandResult(
                success=result.returncode == 0,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
                returncode=result.returncode,
            )

        return await asyncio.to_thread(_run)

    # =========================================================================
    # Cluster Context
    # =========================================================================

    async def get_current_namespace(self) -> str | None:
        """Get the namespace of the active kubeconfig context."""
        result = await self._run_kubectl(
            ["config", "view", "--minify", "--output", "jsonpath={..namespace}"]
        )
        if not result.success:
            return None
        return normalize_namespace(result.stdout)

    async def query_capability(self, api_group: str, resource: str) -> bool:
        """Check whether an API group serves a resource type."""
        result = await self._run_kubectl(
            ["api-resources", f"--api-group={api_group}", "-o", "name"]
        )
        if not result.success:
            raise CapabilityQueryError(
                f"Cannot list API resources for group {api_group}",
                details=result.stderr.strip() or None,
            )
        return capability_from_resource_names(
            result.stdout.splitlines(), api_group, resource
        )

    # =========================================================================
    # Namespace Operations
    # =========================================================================

    async def namespace_exists(self, namespace: str) -> bool:
        """Check if a namespace exists."""
        result = await self._run_kubectl(
            ["get", "namespace", namespace, "--output=name"]
        )
        if result.success:
            return True
        if _is_not_found(result.stderr):
            return False
        raise ClusterQueryError(
            f"Cannot query namespace {namespace}",
            details=result.stderr.strip() or None,
        )

    async def create_namespace(self, namespace: str) -> CommandResult:
        """Create a namespace."""
        return await self._run_kubectl(["create", "namespace", namespace])

    # =========================================================================
    # Resource Operations
    # =========================================================================

    async def apply_manifest(self, document: dict[str, Any]) -> CommandResult:
        """Create or update a resource from a manifest document."""
        return await self._run_kubectl(
            ["apply", "-f", "-"], input_data=dump_manifest(document)
        )

    async def get_resource_status(
        self,
        kind: str,
        name: str,
        namespace: str,
    ) -> ResourceStatus:
        """Get the status of a named resource."""
        result = await self._run_kubectl(
            ["get", kind.lower(), name, "-n", namespace, "-o", "json"]
        )
        if not result.success:
            return missing_resource_status(kind, name, namespace, result.stderr.strip())

        try:
            raw = json.loads(result.stdout)
        except json.JSONDecodeError:
            return ResourceStatus(
                kind=kind,
                name=name,
                namespace=namespace,
                exists=True,
                message=f"Failed to parse {kind} status",
            )
        return parse_resource_status(kind, name, namespace, raw)

    # =========================================================================
    # Pod Operations
    # =========================================================================

    async def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[PodInfo]:
        """Get pods in a namespace with their status."""
        args = ["get", "pods", "-n", namespace, "-o", "json"]
        if label_selector:
            args.extend(["-l", label_selector])

        result = await self._run_kubectl(args)
        if not result.success:
            return []

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            return []

        return [parse_pod(item) for item in data.get("items", [])]
