"""Main CLI application module.

This module provides the main entry point for the kubelaunch CLI.

Command Groups:
- k8s: Generate, deploy and inspect an application on Kubernetes/OpenShift
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from .commands import k8s_app
from .context import CLIContext, build_cli_context
from .deployment.app_deployer.errors import DeploymentError
from .shared.console import console

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"

# Create the main CLI application
app = typer.Typer(
    help="🚀 kubelaunch - Deploy a container image to Kubernetes or OpenShift",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(k8s_app, name="k8s", help="Kubernetes application deployment commands")


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: $KUBELAUNCH_CONFIG or ./kubelaunch.yaml)",
        ),
    ] = None,
) -> None:
    """Load configuration and set up logging for every command."""
    if not isinstance(ctx.obj, CLIContext):
        try:
            ctx.obj = build_cli_context(config)
        except DeploymentError as e:
            console.handle_error(e.message, e.details)

    configure_logging("DEBUG" if verbose else ctx.obj.config.logging.level)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
