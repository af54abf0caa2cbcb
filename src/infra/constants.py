"""Deployment constants and configuration.

This module centralizes the magic strings and fixed values baked into the
generated manifests, so they are easy to find, update, and test.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for manifest synthesis and apply.

    Input defaults here are the built-in fallbacks; the ``defaults`` section
    of the configuration file overrides them.

    All attributes are class-level and immutable.
    """

    # Input defaults
    DEFAULT_APP_NAME: str = "hello-react"
    DEFAULT_IMAGE: str = "docker.io/ruslanmv/hello-react:1.0.0"
    DEFAULT_NAMESPACE: str = "default"
    DEFAULT_PORT: int = 8080
    DEFAULT_REPLICAS: int = 1
    DEFAULT_CPU_REQUEST: str = "1"
    DEFAULT_CPU_LIMIT: str = "2"
    DEFAULT_MEMORY_REQUEST: str = "128Mi"
    DEFAULT_MEMORY_LIMIT: str = "256Mi"
    DEFAULT_OUTPUT_DIR: str = "./{app_name}-kube-config"

    # Platform capability discovery
    ROUTE_API_GROUP: str = "route.openshift.io"
    ROUTE_RESOURCE: str = "routes"
    ROUTE_API_VERSION: str = "route.openshift.io/v1"

    # Label vocabulary
    SELECTOR_KEY: str = "app"
    POD_TEMPLATE_EXTRA_KEY: str = "deployment"
    COMPONENT_LABEL: str = "app.kubernetes.io/component"
    INSTANCE_LABEL: str = "app.kubernetes.io/instance"
    NAME_LABEL: str = "app.kubernetes.io/name"
    PART_OF_LABEL: str = "app.kubernetes.io/part-of"
    PART_OF_SUFFIX: str = "-app"
    RUNTIME_VERSION_LABEL: str = "app.openshift.io/runtime-version"
    RUNTIME_VERSION: str = "1.0.0"
    PORT_NAME_PREFIX: str = "http-"

    # Workload rollout policy
    MAX_SURGE: str = "25%"
    MAX_UNAVAILABLE: str = "25%"
    REVISION_HISTORY_LIMIT: int = 10
    PROGRESS_DEADLINE_SECONDS: int = 600
    TERMINATION_GRACE_PERIOD_SECONDS: int = 30
    IMAGE_PULL_POLICY: str = "IfNotPresent"

    # Route policy
    ROUTE_TLS_TERMINATION: str = "edge"
    ROUTE_INSECURE_POLICY: str = "Redirect"
    ROUTE_WEIGHT: int = 100

    # Output file suffixes, keyed by manifest kind
    MANIFEST_FILE_SUFFIXES: tuple[tuple[str, str], ...] = (
        ("Deployment", "deployment"),
        ("Service", "service"),
        ("Route", "route"),
    )

    # Port bounds
    MIN_PORT: int = 1
    MAX_PORT: int = 65535

    # RFC 1123 label, the naming rule for Deployments, Services and Namespaces
    NAME_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
    MAX_NAME_LENGTH: int = 63

    def file_suffix(self, kind: str) -> str:
        """Get the output file suffix for a manifest kind."""
        return dict(self.MANIFEST_FILE_SUFFIXES)[kind]


DEFAULT_CONSTANTS = DeploymentConstants()
