"""Apply orchestration: namespace, Deployment, Service, then Route.

Steps run strictly in sequence, one cluster call at a time. A failed
mandatory step halts the run and leaves already-applied resources in
place so a retry is a plain re-apply. Every apply is a create-or-update,
which makes re-running an unchanged ManifestSet a no-op.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from src.infra.k8s.controller import ClusterQueryError, CommandResult

from .errors import (
    ApplyStep,
    ApplyStepError,
    DeploymentError,
    ExternalExposureApplyWarning,
    InternalExposureApplyFatalError,
    NamespaceFatalError,
    RunAborted,
    WorkloadApplyFatalError,
)
from .manifest_writer import ManifestWriter
from .synthesizer import ManifestSet

_STEP_ERRORS: dict[ApplyStep, type[ApplyStepError]] = {
    ApplyStep.WORKLOAD: WorkloadApplyFatalError,
    ApplyStep.INTERNAL_EXPOSURE: InternalExposureApplyFatalError,
    ApplyStep.EXTERNAL_EXPOSURE: ExternalExposureApplyWarning,
}


class ClusterClient(Protocol):
    """Blocking cluster operations the orchestrator relies on."""

    def namespace_exists(self, namespace: str) -> bool: ...

    def create_namespace(self, namespace: str) -> CommandResult: ...

    def apply_manifest(self, document: dict[str, Any]) -> CommandResult: ...


class ApplyStatus(Enum):
    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of applying one manifest."""

    step: ApplyStep
    kind: str
    name: str
    status: ApplyStatus
    message: str = ""

    @property
    def applied(self) -> bool:
        return self.status is ApplyStatus.APPLIED


@dataclass
class RunResult:
    """Terminal output of one orchestration run.

    ``results`` holds one ApplyResult per manifest, in apply order. The
    namespace step has no manifest; its outcome is ``namespace_ready`` and,
    on failure, ``failed_step`` is ``ApplyStep.NAMESPACE``.
    """

    namespace: str
    results: list[ApplyResult] = field(default_factory=list)
    namespace_ready: bool = False
    namespace_created: bool = False
    failed_step: ApplyStep | None = None
    error: DeploymentError | None = None
    warnings: list[ExternalExposureApplyWarning] = field(default_factory=list)
    written_files: list[Path] = field(default_factory=list)

    @property
    def statuses(self) -> list[ApplyStatus]:
        return [r.status for r in self.results]

    def result_for(self, step: ApplyStep) -> ApplyResult | None:
        for result in self.results:
            if result.step is step:
                return result
        return None

    @property
    def succeeded(self) -> bool:
        """Namespace, Deployment and Service all succeeded."""
        if not self.namespace_ready:
            return False
        for step in (ApplyStep.WORKLOAD, ApplyStep.INTERNAL_EXPOSURE):
            result = self.result_for(step)
            if result is None or not result.applied:
                return False
        return True

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    @property
    def aborted(self) -> bool:
        return isinstance(self.error, RunAborted)

    def raise_for_failure(self) -> None:
        """Re-raise the error that halted the run, if any."""
        if self.error is not None and not self.succeeded:
            raise self.error


class ApplyOrchestrator:
    """Applies a ManifestSet to the cluster in dependency order.

    Example:
        orchestrator = ApplyOrchestrator(confirm_namespace=console.confirm_action)
        result = orchestrator.apply(manifests, client, writer=ManifestWriter(out))
        if result.exit_code:
            ...
    """

    def __init__(
        self,
        confirm_namespace: Callable[[str], bool] | None = None,
        should_abort: Callable[[ApplyStep], bool] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            confirm_namespace: Asked before creating a missing namespace; a
                False answer fails the run. None creates it without asking.
            should_abort: Polled before every step; True stops the run there.
        """
        self.confirm_namespace = confirm_namespace
        self.should_abort = should_abort

    def apply(
        self,
        manifests: ManifestSet,
        client: ClusterClient,
        writer: ManifestWriter | None = None,
    ) -> RunResult:
        """Write (optionally) and apply every manifest.

        Args:
            manifests: Manifests to apply
            client: Blocking cluster client
            writer: When given, manifests are written before any cluster call

        Returns:
            RunResult naming the halting step, if any

        Raises:
            ManifestWriteError: The write failed; nothing was sent to the cluster
        """
        run = RunResult(namespace=manifests.namespace)
        if writer is not None:
            run.written_files = writer.write(manifests)

        steps = manifests.steps()

        if self._aborting(ApplyStep.NAMESPACE, run, steps, 0):
            return run
        if not self._ensure_namespace(manifests.namespace, client, run):
            self._skip_from(steps, 0, run, "namespace unavailable")
            return run

        for index, (step, document) in enumerate(steps):
            if self._aborting(step, run, steps, index):
                return run

            result = self._apply_one(step, document, client)
            run.results.append(result)
            if result.applied:
                continue

            error = _STEP_ERRORS[step](
                f"Failed to apply {result.kind} {result.name}",
                details=result.message or None,
            )
            if not step.fatal:
                logger.warning(
                    f"{result.kind} {result.name} failed to apply; continuing "
                    f"without external exposure: {result.message}"
                )
                run.warnings.append(error)
                continue

            logger.error(f"{step.value} step failed, halting: {result.message}")
            run.failed_step = step
            run.error = error
            self._skip_from(steps, index + 1, run, f"{step.value} step failed")
            return run

        return run

    def _aborting(
        self,
        step: ApplyStep,
        run: RunResult,
        steps: list[tuple[ApplyStep, dict[str, Any]]],
        index: int,
    ) -> bool:
        if self.should_abort is None or not self.should_abort(step):
            return False
        logger.info(f"Abort requested before the {step.value} step")
        run.error = RunAborted(step)
        self._skip_from(steps, index, run, "aborted")
        return True

    def _ensure_namespace(
        self, namespace: str, client: ClusterClient, run: RunResult
    ) -> bool:
        try:
            exists = client.namespace_exists(namespace)
        except ClusterQueryError as e:
            return self._namespace_failed(
                run, f"Cannot query namespace '{namespace}'", e.details or e.message
            )
        except Exception as e:
            return self._namespace_failed(run, f"Cannot query namespace '{namespace}'", str(e))

        if exists:
            logger.debug(f"Namespace {namespace} exists")
            run.namespace_ready = True
            return True

        if self.confirm_namespace is not None and not self.confirm_namespace(namespace):
            return self._namespace_failed(
                run,
                f"Namespace '{namespace}' does not exist and creation was declined",
                "Create the namespace manually or choose an existing one.",
            )

        try:
            result = client.create_namespace(namespace)
        except Exception as e:
            return self._namespace_failed(run, f"Failed to create namespace '{namespace}'", str(e))
        if not result.success:
            return self._namespace_failed(
                run, f"Failed to create namespace '{namespace}'", result.stderr or None
            )

        logger.info(f"Namespace {namespace} created")
        run.namespace_ready = True
        run.namespace_created = True
        return True

    @staticmethod
    def _namespace_failed(run: RunResult, message: str, details: str | None) -> bool:
        logger.error(f"{message}: {details}")
        run.failed_step = ApplyStep.NAMESPACE
        run.error = NamespaceFatalError(message, details=details)
        return False

    @staticmethod
    def _apply_one(
        step: ApplyStep, document: dict[str, Any], client: ClusterClient
    ) -> ApplyResult:
        kind = document["kind"]
        name = document["metadata"]["name"]
        logger.info(f"Applying {kind} {name}")
        try:
            result = client.apply_manifest(document)
        except Exception as e:
            return ApplyResult(step, kind, name, ApplyStatus.FAILED, str(e))

        if result.success:
            logger.info(f"{kind} {name} applied")
            return ApplyResult(step, kind, name, ApplyStatus.APPLIED, result.stdout.strip())
        return ApplyResult(
            step, kind, name, ApplyStatus.FAILED, result.stderr.strip() or result.stdout.strip()
        )

    @staticmethod
    def _skip_from(
        steps: list[tuple[ApplyStep, dict[str, Any]]],
        index: int,
        run: RunResult,
        reason: str,
    ) -> None:
        for step, document in steps[index:]:
            run.results.append(
                ApplyResult(
                    step,
                    document["kind"],
                    document["metadata"]["name"],
                    ApplyStatus.SKIPPED,
                    reason,
                )
            )


def apply(
    manifests: ManifestSet,
    client: ClusterClient,
    writer: ManifestWriter | None = None,
) -> RunResult:
    """Apply manifests without prompts or abort hooks."""
    return ApplyOrchestrator().apply(manifests, client, writer)
