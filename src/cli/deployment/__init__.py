"""Deployment module for shipping a containerized application to a cluster.

This package provides:
- AppDeployer: interactive workflow from inputs to applied manifests
- StatusDisplay: rich rendering of plans, apply results and status

The engine itself lives in the app_deployer subpackage; it has no
dependency on the CLI beyond the console used for prompts.
"""

from .app_deployer import AppDeployer, DeploymentError
from .status_display import StatusDisplay

__all__ = ["AppDeployer", "DeploymentError", "StatusDisplay"]
