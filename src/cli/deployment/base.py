"""Base deployer class with shared functionality."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from src.cli.shared.console import CLIConsole


class BaseDeployer(ABC):
    """Abstract base class for deployers."""

    def __init__(self, console: CLIConsole, project_root: Path):
        """Initialize the deployer.

        Args:
            console: CLI console for output and prompts
            project_root: Path to the project root directory
        """
        self.console = console
        self.project_root = project_root

    @abstractmethod
    def deploy(self, **kwargs: Any) -> Any:
        """Deploy the application.

        Args:
            **kwargs: Deployer-specific options
        """
        pass

    @abstractmethod
    def show_status(self, **kwargs: Any) -> None:
        """Display the current status of the deployment."""
        pass

    def success(self, message: str) -> None:
        self.console.ok(message)

    def error(self, message: str) -> None:
        self.console.error(message)

    def warning(self, message: str) -> None:
        self.console.warn(message)

    def info(self, message: str) -> None:
        self.console.info(message)
