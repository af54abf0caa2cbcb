"""Kubernetes application deployment commands.

This module provides commands for generating, applying and inspecting the
Deployment, Service and (on OpenShift) Route of a single application.
"""

from typing import Annotated

import typer

from src.cli.context import CLIContext, get_cli_context
from src.cli.deployment.app_deployer import AppDeployer, RawInputs
from src.cli.shared.console import with_error_handling
from src.infra.k8s.serialization import dump_manifests

# ---------------------------------------------------------------------------
# Deployer Factory
# ---------------------------------------------------------------------------


def _get_deployer(cli: CLIContext) -> AppDeployer:
    """Get the application deployer for the current CLI context."""
    return AppDeployer(
        cli.console,
        cli.project_root,
        cli.k8s_controller,
        config=cli.config,
        constants=cli.constants,
    )


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------


def _prompt_missing(cli: CLIContext, deployer: AppDeployer, raw: RawInputs) -> RawInputs:
    """Ask for every value not given on the command line.

    Each prompt shows the value used when the answer is left empty.
    """
    defaults = cli.config.defaults
    try:
        namespace_hint = deployer.current_namespace() or defaults.namespace
    except Exception:
        namespace_hint = defaults.namespace

    def ask(value: str | None, label: str, default: object) -> str | None:
        if value is not None:
            return value
        return cli.console.prompt_text(label, str(default))

    app_name = ask(raw.app_name, "Application name", defaults.app_name)
    output_default = defaults.output_dir.replace("{app_name}", str(app_name))

    return RawInputs(
        app_name=app_name,
        image=ask(raw.image, "Container image", defaults.image),
        namespace=ask(raw.namespace, "Namespace", namespace_hint),
        port=ask(raw.port, "Container port", defaults.port),
        replicas=ask(raw.replicas, "Replicas", defaults.replicas),
        cpu_request=ask(raw.cpu_request, "CPU request", defaults.cpu_request),
        cpu_limit=ask(raw.cpu_limit, "CPU limit", defaults.cpu_limit),
        memory_request=ask(raw.memory_request, "Memory request", defaults.memory_request),
        memory_limit=ask(raw.memory_limit, "Memory limit", defaults.memory_limit),
        output_dir=ask(raw.output_dir, "Output directory", output_default),
    )


# ---------------------------------------------------------------------------
# Shared Options
# ---------------------------------------------------------------------------

AppNameOption = Annotated[
    str | None, typer.Option("--name", "-a", help="Application name")
]
ImageOption = Annotated[
    str | None,
    typer.Option("--image", "-i", help="Container image (e.g., docker.io/user/app:1.0.0)"),
]
NamespaceOption = Annotated[
    str | None,
    typer.Option("--namespace", "-n", help="Kubernetes namespace (default: current context)"),
]
PortOption = Annotated[
    str | None, typer.Option("--port", "-p", help="Container port (1-65535)")
]
ReplicasOption = Annotated[
    str | None, typer.Option("--replicas", "-r", help="Number of replicas (>= 1)")
]
CpuRequestOption = Annotated[
    str | None, typer.Option("--cpu-request", help="CPU request (e.g., 500m)")
]
CpuLimitOption = Annotated[
    str | None, typer.Option("--cpu-limit", help="CPU limit (e.g., 1)")
]
MemoryRequestOption = Annotated[
    str | None, typer.Option("--memory-request", help="Memory request (e.g., 128Mi)")
]
MemoryLimitOption = Annotated[
    str | None, typer.Option("--memory-limit", help="Memory limit (e.g., 256Mi)")
]
OutputOption = Annotated[
    str | None,
    typer.Option("--output", "-o", help="Directory for the generated manifests"),
]
OpenShiftOption = Annotated[
    bool | None,
    typer.Option(
        "--openshift/--no-openshift",
        help="Force Route generation on or off instead of probing the cluster",
    ),
]
YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Use defaults for missing values and skip prompts"),
]


# ---------------------------------------------------------------------------
# Typer App
# ---------------------------------------------------------------------------

k8s_app = typer.Typer(
    name="k8s",
    help="Kubernetes application deployment commands.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@k8s_app.command()
@with_error_handling
def up(
    ctx: typer.Context,
    name: AppNameOption = None,
    image: ImageOption = None,
    namespace: NamespaceOption = None,
    port: PortOption = None,
    replicas: ReplicasOption = None,
    cpu_request: CpuRequestOption = None,
    cpu_limit: CpuLimitOption = None,
    memory_request: MemoryRequestOption = None,
    memory_limit: MemoryLimitOption = None,
    output: OutputOption = None,
    openshift: OpenShiftOption = None,
    yes: YesOption = False,
) -> None:
    """Generate manifests and deploy the application.

    This command:
    - Prompts for any value not given as an option (unless --yes)
    - Detects whether the cluster supports OpenShift Routes
    - Writes the Deployment, Service and Route manifests
    - Creates the namespace if it does not exist
    - Applies the manifests in order and reports each step

    Examples:
        kubelaunch k8s up
        kubelaunch k8s up -a demo -i registry.example/demo:1.0.0 -p 80 -r 2
        kubelaunch k8s up -a demo -n staging --yes
    """
    cli = get_cli_context(ctx)
    cli.console.print_header("Deploying to Kubernetes")

    deployer = _get_deployer(cli)
    raw = RawInputs(
        app_name=name,
        image=image,
        namespace=namespace,
        port=port,
        replicas=replicas,
        cpu_request=cpu_request,
        cpu_limit=cpu_limit,
        memory_request=memory_request,
        memory_limit=memory_limit,
        output_dir=output,
    )
    if not yes:
        raw = _prompt_missing(cli, deployer, raw)

    result = deployer.deploy(raw, openshift=openshift, assume_yes=yes)
    if result is not None and result.exit_code:
        raise typer.Exit(result.exit_code)


@k8s_app.command()
@with_error_handling
def render(
    ctx: typer.Context,
    name: AppNameOption = None,
    image: ImageOption = None,
    namespace: NamespaceOption = None,
    port: PortOption = None,
    replicas: ReplicasOption = None,
    cpu_request: CpuRequestOption = None,
    cpu_limit: CpuLimitOption = None,
    memory_request: MemoryRequestOption = None,
    memory_limit: MemoryLimitOption = None,
    output: OutputOption = None,
    openshift: OpenShiftOption = None,
    stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Print a multi-document YAML stream instead of writing files"),
    ] = False,
) -> None:
    """Generate manifests without applying them.

    Missing values take their defaults; nothing is prompted.

    Examples:
        kubelaunch k8s render -a demo -p 80
        kubelaunch k8s render -a demo --no-openshift --stdout > demo.yaml
    """
    cli = get_cli_context(ctx)
    deployer = _get_deployer(cli)
    raw = RawInputs(
        app_name=name,
        image=image,
        namespace=namespace,
        port=port,
        replicas=replicas,
        cpu_request=cpu_request,
        cpu_limit=cpu_limit,
        memory_request=memory_request,
        memory_limit=memory_limit,
        output_dir=output,
    )
    plan = deployer.plan(raw, openshift=openshift)

    if stdout:
        typer.echo(dump_manifests(plan.manifests.documents()), nl=False)
        return

    cli.console.print_header("Rendering Kubernetes Manifests")
    deployer.status_display.show_summary(plan, deployer.writer_for(plan).output_dir)
    deployer.render(plan)


@k8s_app.command()
@with_error_handling
def status(
    ctx: typer.Context,
    name: AppNameOption = None,
    namespace: NamespaceOption = None,
) -> None:
    """Show the status of a deployed application.

    Displays the Deployment, its pods, the Service and, on OpenShift,
    the Route with the application URL.

    Examples:
        kubelaunch k8s status
        kubelaunch k8s status -a demo -n staging
    """
    cli = get_cli_context(ctx)
    cli.console.print_header("Application Status")

    deployer = _get_deployer(cli)
    deployer.show_status(app_name=name, namespace=namespace)


@k8s_app.command()
@with_error_handling
def probe(ctx: typer.Context) -> None:
    """Check whether the cluster supports OpenShift Routes.

    Examples:
        kubelaunch k8s probe
    """
    cli = get_cli_context(ctx)
    caps = _get_deployer(cli).detect_capabilities()

    group = f"{cli.config.cluster.route_resource}.{cli.config.cluster.route_api_group}"
    if caps.routes_supported:
        cli.console.ok(f"OpenShift detected: {group} is available")
    else:
        cli.console.info(f"Standard Kubernetes: {group} is not available")
