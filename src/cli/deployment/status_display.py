"""Rich rendering of deployment plans, run results and application status."""

from __future__ import annotations

from pathlib import Path

from rich.table import Table

from src.utils.console_like import ConsoleLike

from .app_deployer.orchestrator import ApplyStatus, RunResult
from .app_deployer.planning import DeploymentPlan
from .app_deployer.status import AppStatus

_STATUS_STYLES = {
    ApplyStatus.APPLIED: "[bold green]✓ applied[/bold green]",
    ApplyStatus.FAILED: "[bold red]✗ failed[/bold red]",
    ApplyStatus.SKIPPED: "[dim]- skipped[/dim]",
}


def _format_labels(labels: dict[str, str]) -> str:
    return "\n".join(f"{key}={value}" for key, value in labels.items())


def _yes_no(flag: bool) -> str:
    return "[green]yes[/green]" if flag else "[red]no[/red]"


class StatusDisplay:
    """Renders engine results as rich tables."""

    def __init__(self, console: ConsoleLike):
        self.console = console

    def show_summary(self, plan: DeploymentPlan, output_dir: Path | None = None) -> None:
        """Print the configuration summary shown before generation.

        Args:
            plan: Plan to summarize
            output_dir: Resolved output directory (the raw target if omitted)
        """
        spec, labels = plan.spec, plan.labels

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        table.add_row("Application", spec.app_name)
        table.add_row("Image", spec.image_reference)
        table.add_row("Namespace", spec.namespace)
        table.add_row("Port", f"{spec.container_port} ({labels.port_name})")
        table.add_row("Replicas", str(spec.replica_count))
        table.add_row("CPU", f"{spec.cpu_request} / {spec.cpu_limit}")
        table.add_row("Memory", f"{spec.memory_request} / {spec.memory_limit}")
        table.add_row("Output directory", str(output_dir or spec.output_target))
        table.add_row(
            "Platform",
            "OpenShift (Route)" if plan.caps.routes_supported else "Kubernetes",
        )
        table.add_row("Labels", _format_labels(labels.common_labels))
        table.add_row("Selector", labels.selector_string)
        table.add_row("Pod template labels", _format_labels(labels.pod_template_labels))

        self.console.print_subheader("Configuration Summary")
        self.console.print(table)

    def show_written(self, paths: list[Path]) -> None:
        for path in paths:
            self.console.ok(f"Wrote {path}")

    def show_run_result(self, result: RunResult) -> None:
        """Print one row per apply step."""
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Step", style="cyan")
        table.add_column("Resource")
        table.add_column("Status")
        table.add_column("Details", style="dim")

        if result.namespace_created:
            namespace_status = "[bold green]✓ created[/bold green]"
        elif result.namespace_ready:
            namespace_status = "[green]✓ exists[/green]"
        else:
            namespace_status = _STATUS_STYLES[ApplyStatus.FAILED]
        table.add_row("namespace", f"Namespace/{result.namespace}", namespace_status, "")

        for entry in result.results:
            table.add_row(
                entry.step.value,
                f"{entry.kind}/{entry.name}",
                _STATUS_STYLES[entry.status],
                entry.message,
            )

        self.console.print_subheader("Apply Results")
        self.console.print(table)

        for warning in result.warnings:
            self.console.warn(
                f"{warning.message}; the application is still reachable inside the cluster"
            )

    def show_next_steps(self, app_name: str, namespace: str, url: str | None) -> None:
        """Print follow-up commands after a successful run."""
        self.console.print_subheader("Next Steps")
        self.console.print(f"  kubectl get deployment {app_name} -n {namespace}")
        self.console.print(f"  kubectl get pods -l app={app_name} -n {namespace}")
        self.console.print(f"  kubectl get service {app_name} -n {namespace}")
        if url:
            self.console.print(f"  kubectl get route {app_name} -n {namespace}")
            self.console.ok(f"Application URL: {url}")

    def show_app_status(self, status: AppStatus) -> None:
        """Print Deployment, pod, Service and Route status tables."""
        deployment = status.deployment
        self.console.print_subheader(f"Deployment {status.app_name}")
        if not deployment.exists:
            self.console.warn(
                f"Deployment {status.app_name} not found in namespace {status.namespace}"
            )
        else:
            table = Table(show_header=True, header_style="bold magenta")
            table.add_column("Replicas")
            table.add_column("Ready")
            table.add_column("Updated")
            table.add_column("Available")
            table.add_column("Image", style="dim")
            d = deployment.details
            table.add_row(
                str(d.get("replicas", 0)),
                str(d.get("ready_replicas", 0)),
                str(d.get("updated_replicas", 0)),
                str(d.get("available_replicas", 0)),
                str(d.get("image", "")),
            )
            self.console.print(table)

        self.console.print_subheader("Pods")
        if not status.pods:
            self.console.info(f"No pods found with label app={status.app_name}")
        else:
            pods = Table(show_header=True, header_style="bold magenta")
            pods.add_column("Name", style="cyan")
            pods.add_column("Status")
            pods.add_column("Ready")
            pods.add_column("Restarts", justify="right")
            pods.add_column("Node", style="dim")
            for pod in status.pods:
                pods.add_row(
                    pod.name, pod.status, _yes_no(pod.ready), str(pod.restarts), pod.node
                )
            self.console.print(pods)

        service = status.service
        self.console.print_subheader(f"Service {status.app_name}")
        if not service.exists:
            self.console.warn(f"Service {status.app_name} not found")
        else:
            table = Table(show_header=True, header_style="bold magenta")
            table.add_column("Type")
            table.add_column("Cluster IP")
            table.add_column("Ports")
            s = service.details
            table.add_row(
                str(s.get("type", "")), str(s.get("cluster_ip", "")), str(s.get("ports", ""))
            )
            self.console.print(table)

        if status.route is not None:
            self.console.print_subheader(f"Route {status.app_name}")
            if not status.route.exists:
                self.console.warn(f"Route {status.app_name} not found")
            elif status.url:
                self.console.ok(f"Application URL: {status.url}")
            else:
                self.console.info("Route exists but has no host assigned yet")
