"""Writes rendered manifests to the output directory."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants
from src.infra.k8s.serialization import dump_manifest

from .errors import ManifestWriteError
from .synthesizer import ManifestSet


class ManifestWriter:
    """Persists a ManifestSet as one YAML file per resource.

    Files are named ``<app>-deployment.yaml``, ``<app>-service.yaml`` and
    ``<app>-route.yaml``. Existing files are overwritten.
    """

    def __init__(
        self,
        output_dir: Path,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.constants = constants or DEFAULT_CONSTANTS

    def path_for(self, app_name: str, kind: str) -> Path:
        """Target file for a manifest of the given kind."""
        return self.output_dir / f"{app_name}-{self.constants.file_suffix(kind)}.yaml"

    def write(self, manifests: ManifestSet) -> list[Path]:
        """Write every manifest in apply order.

        Returns:
            Written file paths, in apply order

        Raises:
            ManifestWriteError: If the directory or any file cannot be written
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ManifestWriteError(
                f"Cannot create output directory {self.output_dir}",
                details=str(e),
            ) from e

        written: list[Path] = []
        for document in manifests.documents():
            path = self.path_for(manifests.app_name, document["kind"])
            try:
                path.write_text(dump_manifest(document), encoding="utf-8")
            except OSError as e:
                raise ManifestWriteError(
                    f"Cannot write {path}", details=str(e)
                ) from e
            logger.debug(f"Wrote {document['kind']} manifest to {path}")
            written.append(path)

        logger.info(f"Manifests written to {self.output_dir}")
        return written
