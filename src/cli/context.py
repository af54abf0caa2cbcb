"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer
from dotenv import load_dotenv

from src.cli.deployment.app_deployer.errors import DeploymentError
from src.cli.shared.console import CLIConsole, console
from src.infra.config import ConfigData, load_config
from src.infra.constants import DeploymentConstants
from src.infra.k8s import get_k8s_controller_sync
from src.infra.k8s.sync import KubernetesControllerSync
from src.utils.paths import get_project_root


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    k8s_controller: KubernetesControllerSync
    constants: DeploymentConstants
    config: ConfigData


def build_cli_context(config_path: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext.

    A ``.env`` file in the project root is loaded first so its variables
    are available to ``${VAR}`` references in the configuration file.

    Raises:
        DeploymentError: If the configuration file is invalid
    """
    project_root = get_project_root()
    load_dotenv(project_root / ".env", override=False)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise DeploymentError("Invalid configuration", details=str(e)) from e

    return CLIContext(
        console=console,
        project_root=project_root,
        k8s_controller=get_k8s_controller_sync(config.cluster),
        constants=DeploymentConstants(),
        config=config,
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
