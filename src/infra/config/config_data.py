"""Pydantic models for the kubelaunch configuration file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.infra.constants import DEFAULT_CONSTANTS


class DefaultsConfig(BaseModel):
    """Fallback values substituted for empty deployment inputs.

    Resource quantities are passed through verbatim, the cluster decides
    whether they are well formed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    app_name: str = DEFAULT_CONSTANTS.DEFAULT_APP_NAME
    image: str = DEFAULT_CONSTANTS.DEFAULT_IMAGE
    namespace: str = DEFAULT_CONSTANTS.DEFAULT_NAMESPACE
    port: int = DEFAULT_CONSTANTS.DEFAULT_PORT
    replicas: int = DEFAULT_CONSTANTS.DEFAULT_REPLICAS
    cpu_request: str = DEFAULT_CONSTANTS.DEFAULT_CPU_REQUEST
    cpu_limit: str = DEFAULT_CONSTANTS.DEFAULT_CPU_LIMIT
    memory_request: str = DEFAULT_CONSTANTS.DEFAULT_MEMORY_REQUEST
    memory_limit: str = DEFAULT_CONSTANTS.DEFAULT_MEMORY_LIMIT
    output_dir: str = Field(
        default=DEFAULT_CONSTANTS.DEFAULT_OUTPUT_DIR,
        description="Output directory; '{app_name}' is expanded once the name is known",
    )


class ClusterConfig(BaseModel):
    """Cluster client settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    backend: Literal["kr8s", "kubectl"] = "kr8s"
    route_api_group: str = DEFAULT_CONSTANTS.ROUTE_API_GROUP
    route_resource: str = DEFAULT_CONSTANTS.ROUTE_RESOURCE
    request_timeout: float = Field(default=30.0, gt=0)


class LoggingConfig(BaseModel):
    """Log sink settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"] = "WARNING"


class ConfigData(BaseModel):
    """Root of the ``config:`` section."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
