"""Label, selector and port-name vocabulary shared by all manifests."""

from __future__ import annotations

from dataclasses import dataclass

from src.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

from .capability_probe import PlatformCapabilities
from .config_collector import DeploymentSpec


@dataclass(frozen=True)
class LabelSet:
    """Derived labels for one application.

    Label mappings are stored as tuples of pairs so the record stays
    hashable and immutable; use the ``*_labels`` properties for dicts.
    """

    common: tuple[tuple[str, str], ...]
    pod_template: tuple[tuple[str, str], ...]
    selector_key: str
    selector_value: str
    port_name: str

    @property
    def common_labels(self) -> dict[str, str]:
        """Labels for every resource's metadata.labels."""
        return dict(self.common)

    @property
    def pod_template_labels(self) -> dict[str, str]:
        """Labels stamped on the pods; always a superset of the selector."""
        return dict(self.pod_template)

    @property
    def selector(self) -> dict[str, str]:
        """Pod selector shared by the Deployment and the Service."""
        return {self.selector_key: self.selector_value}

    @property
    def selector_string(self) -> str:
        """Selector in kubectl ``-l`` form."""
        return f"{self.selector_key}={self.selector_value}"


def port_name_for(port: int, constants: DeploymentConstants = DEFAULT_CONSTANTS) -> str:
    """Name of the Service port the Route points at, e.g. ``http-8080``."""
    return f"{constants.PORT_NAME_PREFIX}{port}"


def plan(
    spec: DeploymentSpec,
    caps: PlatformCapabilities,
    constants: DeploymentConstants = DEFAULT_CONSTANTS,
) -> LabelSet:
    """Derive the LabelSet for a deployment.

    Pure and total: any valid DeploymentSpec yields a LabelSet, and the same
    inputs always yield an equal one.
    """
    name = spec.app_name

    common = [
        (constants.SELECTOR_KEY, name),
        (constants.COMPONENT_LABEL, name),
        (constants.INSTANCE_LABEL, name),
        (constants.NAME_LABEL, name),
        (constants.PART_OF_LABEL, f"{name}{constants.PART_OF_SUFFIX}"),
    ]
    if caps.routes_supported:
        common.append((constants.RUNTIME_VERSION_LABEL, constants.RUNTIME_VERSION))

    return LabelSet(
        common=tuple(common),
        pod_template=(
            (constants.SELECTOR_KEY, name),
            (constants.POD_TEMPLATE_EXTRA_KEY, name),
        ),
        selector_key=constants.SELECTOR_KEY,
        selector_value=name,
        port_name=port_name_for(spec.container_port, constants),
    )
