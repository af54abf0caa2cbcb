"""Interactive application deployer.

This module provides the AppDeployer class which drives a complete run:
- Collect and validate inputs (ConfigCollector)
- Detect whether the cluster serves OpenShift Routes (CapabilityProbe)
- Plan labels and synthesize manifests
- Write the manifests to the output directory
- Apply them in dependency order (ApplyOrchestrator)
- Report per-step results and follow-up hints

Every step that writes files or touches the cluster is gated behind a
confirmation unless the caller opts out with ``assume_yes``.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from loguru import logger

from src.cli.shared.console import CLIConsole
from src.infra.config import ConfigData
from src.infra.constants import DeploymentConstants
from src.infra.k8s.sync import KubernetesControllerSync
from src.utils.paths import resolve_output_dir

from ..base import BaseDeployer
from ..status_display import StatusDisplay
from .capability_probe import NO_CAPABILITIES, ROUTE_CAPABILITIES, PlatformCapabilities, probe
from .config_collector import ConfigCollector, RawInputs
from .errors import ApplyStep
from .manifest_writer import ManifestWriter
from .orchestrator import ApplyOrchestrator, RunResult
from .planning import DeploymentPlan, build_plan
from .status import AppStatus, StatusReporter


class AppDeployer(BaseDeployer):
    """Deployer for a single containerized application.

    Attributes:
        client: Blocking cluster client
        config: Loaded configuration
        constants: Deployment configuration constants
        collector: Input collector seeded with the configured defaults
        status_display: Rich renderer for summaries and results
    """

    def __init__(
        self,
        console: CLIConsole,
        project_root: Path,
        client: KubernetesControllerSync,
        config: ConfigData | None = None,
        constants: DeploymentConstants | None = None,
    ):
        """Initialize the deployer.

        Args:
            console: CLI console for output and prompts
            project_root: Directory relative output paths are anchored at
            client: Blocking cluster client
            config: Loaded configuration (built-in defaults if omitted)
            constants: Optional deployment constants (uses defaults if not provided)
        """
        super().__init__(console, project_root)
        self.client = client
        self.config = config or ConfigData()
        self.constants = constants or DeploymentConstants()
        self.collector = ConfigCollector(self.config.defaults, self.constants)
        self.status_display = StatusDisplay(console)

    # =========================================================================
    # Planning
    # =========================================================================

    def detect_capabilities(self, openshift: bool | None = None) -> PlatformCapabilities:
        """Probe the cluster, unless the caller already knows the answer."""
        if openshift is not None:
            logger.info(f"Route support forced to {openshift}")
            return ROUTE_CAPABILITIES if openshift else NO_CAPABILITIES
        return probe(
            self.client,
            self.config.cluster.route_api_group,
            self.config.cluster.route_resource,
        )

    def current_namespace(self) -> str | None:
        """Namespace of the active kubeconfig context, if any."""
        return self.client.get_current_namespace()

    def plan(self, raw: RawInputs, openshift: bool | None = None) -> DeploymentPlan:
        """Validate inputs and derive the manifests for a run.

        Raises:
            ValidationError: If any input is rejected
        """
        spec = self.collector.collect(raw, namespace_lookup=self.current_namespace)
        caps = self.detect_capabilities(openshift)
        return build_plan(spec, caps, self.constants)

    def writer_for(self, plan: DeploymentPlan) -> ManifestWriter:
        output_dir = resolve_output_dir(plan.spec.output_target, self.project_root)
        return ManifestWriter(output_dir, self.constants)

    def render(self, plan: DeploymentPlan) -> list[Path]:
        """Write the plan's manifests without touching the cluster."""
        paths = self.writer_for(plan).write(plan.manifests)
        self.status_display.show_written(paths)
        return paths

    # =========================================================================
    # Deployment
    # =========================================================================

    def deploy(
        self,
        raw: RawInputs | None = None,
        *,
        openshift: bool | None = None,
        assume_yes: bool = False,
        **kwargs: Any,
    ) -> RunResult | None:
        """Run the full workflow.

        Args:
            raw: Raw inputs; empty fields take configured defaults
            openshift: Override the Route capability probe
            assume_yes: Answer yes to every confirmation

        Returns:
            RunResult, or None if the user stopped before the apply phase

        Raises:
            ValidationError: If any input is rejected
            ManifestWriteError: If the manifests cannot be written
        """
        plan = self.plan(raw or RawInputs(), openshift)
        spec = plan.spec
        output_dir = self.writer_for(plan).output_dir
        self.status_display.show_summary(plan, output_dir)

        if not self.console.confirm_action(
            "Generate Kubernetes manifests",
            f"Files will be written to {output_dir}",
            force=assume_yes,
        ):
            self.info("Operation cancelled")
            return None

        paths = self.render(plan)

        if not self.console.confirm_action(
            f"Deploy {spec.app_name} to namespace '{spec.namespace}'",
            "\n".join(f"  • {p.name}" for p in paths),
            force=assume_yes,
        ):
            self.info(f"Deployment cancelled. Manifests saved in {paths[0].parent}")
            return None

        orchestrator = ApplyOrchestrator(
            confirm_namespace=lambda ns: self.console.confirm_action(
                f"Namespace '{ns}' does not exist. Create it?",
                force=assume_yes,
            ),
        )
        with self._abort_at_step_boundary() as should_abort:
            orchestrator.should_abort = should_abort
            result = orchestrator.apply(plan.manifests, self.client)

        self.status_display.show_run_result(result)
        if result.aborted:
            self.warning(result.error.message if result.error else "Deployment aborted")
        elif result.succeeded:
            self.success(f"{spec.app_name} deployed to namespace '{spec.namespace}'")
            url = None
            if plan.caps.routes_supported:
                url = self.status(spec.app_name, spec.namespace, plan.caps).url
            self.status_display.show_next_steps(spec.app_name, spec.namespace, url)
        elif result.error is not None:
            self.error(result.error.message)
            if result.error.details:
                self.console.print(f"[dim]{result.error.details}[/dim]")

        return result

    @contextmanager
    def _abort_at_step_boundary(self) -> Iterator[Callable[[ApplyStep], bool]]:
        """Turn the first Ctrl+C during apply into an abort at the next step.

        A second Ctrl+C interrupts immediately.
        """
        requested = threading.Event()

        def should_abort(step: ApplyStep) -> bool:
            return requested.is_set()

        if threading.current_thread() is not threading.main_thread():
            yield should_abort
            return

        def handler(signum: int, frame: Any) -> None:
            if requested.is_set():
                raise KeyboardInterrupt
            requested.set()
            self.warning("Abort requested; stopping after the current step")

        previous = signal.signal(signal.SIGINT, handler)
        try:
            yield should_abort
        finally:
            signal.signal(signal.SIGINT, previous)

    # =========================================================================
    # Status
    # =========================================================================

    def status(
        self,
        app_name: str,
        namespace: str,
        caps: PlatformCapabilities | None = None,
    ) -> AppStatus:
        """Collect structured status for an application."""
        if caps is None:
            caps = self.detect_capabilities()
        return StatusReporter(self.client, self.constants).collect(app_name, namespace, caps)

    def show_status(
        self,
        app_name: str | None = None,
        namespace: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Display the status of an application.

        Args:
            app_name: Application name (configured default if omitted)
            namespace: Namespace (active context, then configured default)
        """
        app_name = app_name or self.config.defaults.app_name
        namespace = namespace or self.current_namespace() or self.config.defaults.namespace
        self.status_display.show_app_status(self.status(app_name, namespace))
