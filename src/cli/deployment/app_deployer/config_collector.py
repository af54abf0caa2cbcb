"""Deployment input collection and validation.

Turns an already-gathered bag of raw inputs (CLI options, prompt answers)
into a validated, immutable DeploymentSpec. Empty inputs take the
configured defaults; the namespace falls back to the active kubeconfig
namespace before the default constant.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from src.infra.config import DefaultsConfig
from src.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

from .errors import (
    InvalidName,
    InvalidPort,
    InvalidReplicaCount,
    MissingRequiredField,
)

RawValue = str | int | None


@dataclass(frozen=True)
class RawInputs:
    """User-supplied values before defaulting; None or blank means "use default"."""

    app_name: RawValue = None
    image: RawValue = None
    namespace: RawValue = None
    port: RawValue = None
    replicas: RawValue = None
    cpu_request: RawValue = None
    cpu_limit: RawValue = None
    memory_request: RawValue = None
    memory_limit: RawValue = None
    output_dir: RawValue = None


@dataclass(frozen=True)
class DeploymentSpec:
    """Validated record of what to deploy. Never mutated after construction."""

    app_name: str
    image_reference: str
    namespace: str
    container_port: int
    replica_count: int
    cpu_request: str
    cpu_limit: str
    memory_request: str
    memory_limit: str
    output_target: Path


def _blank(value: RawValue) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: RawValue, default: str) -> str:
    return default if _blank(value) else str(value).strip()


class ConfigCollector:
    """Applies defaults to raw inputs and validates the result.

    Example:
        collector = ConfigCollector(config.defaults)
        spec = collector.collect(RawInputs(app_name="demo", port="80"))
    """

    def __init__(
        self,
        defaults: DefaultsConfig | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the collector.

        Args:
            defaults: Default values from configuration (built-ins if omitted)
            constants: Optional deployment constants (uses defaults if not provided)
        """
        self.defaults = defaults or DefaultsConfig()
        self.constants = constants or DEFAULT_CONSTANTS

    def collect(
        self,
        raw: RawInputs,
        namespace_lookup: Callable[[], str | None] | None = None,
    ) -> DeploymentSpec:
        """Build a DeploymentSpec from raw inputs.

        Args:
            raw: Raw input values
            namespace_lookup: Returns the active kubeconfig namespace, or None.
                Only called when no namespace was supplied.

        Returns:
            Validated DeploymentSpec

        Raises:
            MissingRequiredField: app name, image or namespace empty after defaulting
            InvalidName: app name or namespace is not a valid object name
            InvalidPort: port is not an integer in [1, 65535]
            InvalidReplicaCount: replica count is not an integer >= 1
        """
        app_name = _text(raw.app_name, self.defaults.app_name)
        self._require("app_name", app_name)
        self._check_name("app_name", app_name)

        image = _text(raw.image, self.defaults.image)
        self._require("image", image)

        namespace = self._resolve_namespace(raw.namespace, namespace_lookup)
        self._require("namespace", namespace)
        self._check_name("namespace", namespace)

        port = self._parse_port(raw.port)
        replicas = self._parse_replicas(raw.replicas)

        output_dir = _text(raw.output_dir, self.defaults.output_dir)
        output_target = Path(output_dir.replace("{app_name}", app_name))

        spec = DeploymentSpec(
            app_name=app_name,
            image_reference=image,
            namespace=namespace,
            container_port=port,
            replica_count=replicas,
            cpu_request=_text(raw.cpu_request, self.defaults.cpu_request),
            cpu_limit=_text(raw.cpu_limit, self.defaults.cpu_limit),
            memory_request=_text(raw.memory_request, self.defaults.memory_request),
            memory_limit=_text(raw.memory_limit, self.defaults.memory_limit),
            output_target=output_target,
        )
        logger.debug(f"Collected deployment spec: {spec}")
        return spec

    def _resolve_namespace(
        self,
        value: RawValue,
        namespace_lookup: Callable[[], str | None] | None,
    ) -> str:
        if not _blank(value):
            return str(value).strip()

        if namespace_lookup is not None:
            try:
                current = namespace_lookup()
            except Exception as e:
                logger.warning(f"Could not read the active namespace: {e}")
                current = None
            if current:
                logger.info(f"Using current kubectl context namespace: {current}")
                return current

        logger.info(f"Using default namespace: {self.defaults.namespace}")
        return self.defaults.namespace

    def _parse_port(self, value: RawValue) -> int:
        port = self._parse_int(value, self.defaults.port)
        if port is None or not self.constants.MIN_PORT <= port <= self.constants.MAX_PORT:
            raise InvalidPort(
                "port",
                f"Invalid port number: {value!r}",
                details=(
                    "Enter a numeric value between "
                    f"{self.constants.MIN_PORT} and {self.constants.MAX_PORT}."
                ),
            )
        return port

    def _parse_replicas(self, value: RawValue) -> int:
        replicas = self._parse_int(value, self.defaults.replicas)
        if replicas is None or replicas < 1:
            raise InvalidReplicaCount(
                "replicas",
                f"Invalid number of replicas: {value!r}",
                details="Must be a positive integer.",
            )
        return replicas

    @staticmethod
    def _parse_int(value: RawValue, default: int) -> int | None:
        """Parse an integer input; None means the input is not a plain integer."""
        if _blank(value):
            return default
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        text = str(value).strip()
        return int(text) if text.isdecimal() and text.isascii() else None

    @staticmethod
    def _require(field: str, value: str) -> None:
        if not value:
            raise MissingRequiredField(field, f"{field} cannot be empty")

    def _check_name(self, field: str, value: str) -> None:
        if (
            len(value) > self.constants.MAX_NAME_LENGTH
            or not self.constants.NAME_PATTERN.match(value)
        ):
            raise InvalidName(
                field,
                f"Invalid {field}: '{value}'",
                details=(
                    "Use at most 63 lowercase letters, digits and '-', "
                    "starting and ending with a letter or digit."
                ),
            )


def collect(
    raw: RawInputs,
    namespace_lookup: Callable[[], str | None] | None = None,
    defaults: DefaultsConfig | None = None,
) -> DeploymentSpec:
    """Collect a DeploymentSpec with a one-off ConfigCollector."""
    return ConfigCollector(defaults).collect(raw, namespace_lookup)
