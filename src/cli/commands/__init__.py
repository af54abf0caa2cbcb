"""CLI command modules.

Command Groups:
- k8s: Kubernetes application deployment (up, render, status, probe)
"""

from .k8s import k8s_app

__all__ = ["k8s_app"]
