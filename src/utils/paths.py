from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    Walks up from the working directory looking for a ``kubelaunch.yaml``
    or ``pyproject.toml``; falls back to the working directory itself.

    Returns:
        Path to the project root directory
    """
    current = Path.cwd().resolve()

    for parent in [current, *current.parents]:
        if (parent / "kubelaunch.yaml").exists() or (parent / "pyproject.toml").exists():
            return parent

    return current


def resolve_output_dir(output_dir: Path, project_root: Path) -> Path:
    """Anchor a relative output directory at the project root."""
    if output_dir.is_absolute():
        return output_dir
    return project_root / output_dir
