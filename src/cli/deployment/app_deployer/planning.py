"""Pure pipeline from a validated DeploymentSpec to the manifests of a run."""

from __future__ import annotations

from dataclasses import dataclass

from src.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

from . import label_planner
from .capability_probe import PlatformCapabilities
from .config_collector import DeploymentSpec
from .label_planner import LabelSet
from .synthesizer import ManifestSet, ManifestSynthesizer


@dataclass(frozen=True)
class DeploymentPlan:
    """Everything derived for one run before the cluster is touched."""

    spec: DeploymentSpec
    caps: PlatformCapabilities
    labels: LabelSet
    manifests: ManifestSet


def build_plan(
    spec: DeploymentSpec,
    caps: PlatformCapabilities,
    constants: DeploymentConstants = DEFAULT_CONSTANTS,
) -> DeploymentPlan:
    """Plan labels and synthesize manifests for a spec."""
    labels = label_planner.plan(spec, caps, constants)
    manifests = ManifestSynthesizer(constants).synthesize(spec, labels, caps)
    return DeploymentPlan(spec=spec, caps=caps, labels=labels, manifests=manifests)
