"""Error taxonomy for the deployment engine.

Validation errors stop a run before it starts. Capability query errors are
always downgraded to "capability absent" by the probe. Apply step errors
for mandatory resources halt the run; the external exposure error is only
recorded.
"""

from __future__ import annotations

from enum import Enum

from src.infra.k8s.controller import CapabilityQueryError

__all__ = [
    "DeploymentError",
    "ValidationError",
    "InvalidPort",
    "InvalidReplicaCount",
    "MissingRequiredField",
    "InvalidName",
    "CapabilityQueryError",
    "ManifestWriteError",
    "ApplyStep",
    "ApplyStepError",
    "NamespaceFatalError",
    "WorkloadApplyFatalError",
    "InternalExposureApplyFatalError",
    "ExternalExposureApplyWarning",
    "RunAborted",
]


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


# =============================================================================
# Input validation
# =============================================================================


class ValidationError(DeploymentError):
    """Raised when a deployment input is rejected."""

    def __init__(self, field: str, message: str, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class InvalidPort(ValidationError):
    """Container port is not an integer in [1, 65535]."""


class InvalidReplicaCount(ValidationError):
    """Replica count is not an integer >= 1."""


class MissingRequiredField(ValidationError):
    """A required field is empty after defaults were applied."""


class InvalidName(ValidationError):
    """A name is not usable as a Kubernetes object name."""


class ManifestWriteError(DeploymentError):
    """Rendered manifests could not be written to the output directory."""


# =============================================================================
# Apply steps
# =============================================================================


class ApplyStep(Enum):
    """Apply steps, in the only order they are ever executed."""

    NAMESPACE = "namespace"
    WORKLOAD = "workload"
    INTERNAL_EXPOSURE = "internal-exposure"
    EXTERNAL_EXPOSURE = "external-exposure"

    @property
    def fatal(self) -> bool:
        """Whether a failure at this step halts the run."""
        return self is not ApplyStep.EXTERNAL_EXPOSURE


class ApplyStepError(DeploymentError):
    """A step of the apply phase failed."""

    step: ApplyStep


class NamespaceFatalError(ApplyStepError):
    """The target namespace is missing and could not be created."""

    step = ApplyStep.NAMESPACE


class WorkloadApplyFatalError(ApplyStepError):
    """The Deployment could not be applied."""

    step = ApplyStep.WORKLOAD


class InternalExposureApplyFatalError(ApplyStepError):
    """The Service could not be applied."""

    step = ApplyStep.INTERNAL_EXPOSURE


class ExternalExposureApplyWarning(ApplyStepError):
    """The Route could not be applied; the workload is still usable."""

    step = ApplyStep.EXTERNAL_EXPOSURE


class RunAborted(DeploymentError):
    """The caller asked to stop; honoured between steps only."""

    def __init__(self, before: ApplyStep):
        self.before = before
        super().__init__(
            f"Deployment aborted before the {before.value} step",
            details="Resources applied before this point were left in place.",
        )
