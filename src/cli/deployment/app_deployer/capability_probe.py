"""Detection of the optional external exposure (Route) API.

The probe never fails a run: a cluster that cannot be asked is treated
exactly like one without the Route API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS


class CapabilityClient(Protocol):
    def query_capability(self, api_group: str, resource: str) -> bool: ...


@dataclass(frozen=True)
class PlatformCapabilities:
    """What the target cluster supports, determined once per run."""

    routes_supported: bool = False

    def __bool__(self) -> bool:
        return self.routes_supported


NO_CAPABILITIES = PlatformCapabilities(routes_supported=False)
ROUTE_CAPABILITIES = PlatformCapabilities(routes_supported=True)


def probe(
    client: CapabilityClient,
    api_group: str = DEFAULT_CONSTANTS.ROUTE_API_GROUP,
    resource: str = DEFAULT_CONSTANTS.ROUTE_RESOURCE,
) -> PlatformCapabilities:
    """Ask the cluster once whether it serves the Route API.

    Args:
        client: Cluster client exposing query_capability()
        api_group: API group holding the route kind
        resource: Plural resource name of the route kind

    Returns:
        PlatformCapabilities; routes_supported is False on any query failure
    """
    logger.info(f"Checking for {resource}.{api_group}")
    try:
        supported = bool(client.query_capability(api_group, resource))
    except Exception as e:
        logger.warning(
            f"Capability query for {api_group} failed, assuming no route support: {e}"
        )
        return NO_CAPABILITIES

    if supported:
        logger.info("OpenShift environment detected (Route API available)")
        return ROUTE_CAPABILITIES

    logger.info("Standard Kubernetes environment detected (Route API not found)")
    return NO_CAPABILITIES
