"""Application deployment engine.

Turns a handful of user inputs into a Deployment, a ClusterIP Service and,
on OpenShift, an edge-terminated Route, then applies them in order:

- config_collector: input defaulting and validation
- capability_probe: Route API detection
- label_planner: shared labels, selector and port name
- synthesizer: manifest construction
- manifest_writer: YAML output files
- orchestrator: ordered apply with per-step failure policy
- status: structured read-back of the deployed resources
- deployer: the interactive workflow tying the above together
"""

from .capability_probe import PlatformCapabilities, probe
from .config_collector import ConfigCollector, DeploymentSpec, RawInputs, collect
from .deployer import AppDeployer
from .errors import (
    ApplyStep,
    CapabilityQueryError,
    DeploymentError,
    ExternalExposureApplyWarning,
    InternalExposureApplyFatalError,
    ManifestWriteError,
    NamespaceFatalError,
    RunAborted,
    ValidationError,
    WorkloadApplyFatalError,
)
from .label_planner import LabelSet, plan
from .manifest_writer import ManifestWriter
from .orchestrator import (
    ApplyOrchestrator,
    ApplyResult,
    ApplyStatus,
    RunResult,
    apply,
)
from .planning import DeploymentPlan, build_plan
from .status import AppStatus, StatusReporter
from .synthesizer import ManifestSet, ManifestSynthesizer, synthesize

__all__ = [
    "AppDeployer",
    "AppStatus",
    "ApplyOrchestrator",
    "ApplyResult",
    "ApplyStatus",
    "ApplyStep",
    "CapabilityQueryError",
    "ConfigCollector",
    "DeploymentError",
    "DeploymentPlan",
    "DeploymentSpec",
    "ExternalExposureApplyWarning",
    "InternalExposureApplyFatalError",
    "LabelSet",
    "ManifestSet",
    "ManifestSynthesizer",
    "ManifestWriteError",
    "ManifestWriter",
    "NamespaceFatalError",
    "PlatformCapabilities",
    "RawInputs",
    "RunAborted",
    "RunResult",
    "StatusReporter",
    "ValidationError",
    "WorkloadApplyFatalError",
    "apply",
    "build_plan",
    "collect",
    "plan",
    "probe",
]
