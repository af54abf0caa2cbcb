"""Configuration file loading with environment variable substitution."""

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from src.infra.config.config_data import ConfigData
from src.infra.config.config_utils import substitute_env_vars

CONFIG_PATH = Path("kubelaunch.yaml")
CONFIG_ENV_VAR = "KUBELAUNCH_CONFIG"
BACKEND_ENV_VAR = "KUBELAUNCH_K8S_BACKEND"


def resolve_config_path(file_path: Path | None = None) -> Path:
    """Pick the configuration file: explicit path, then env var, then default."""
    if file_path is not None:
        return file_path
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return CONFIG_PATH


def load_config(file_path: Path | None = None) -> ConfigData:
    """
    Load the kubelaunch configuration file.

    Args:
        file_path: Path to the YAML file. Defaults to $KUBELAUNCH_CONFIG,
                   then ./kubelaunch.yaml.

    Returns:
        Validated ConfigData. Built-in defaults are returned when the file
        does not exist.

    Raises:
        ValueError: If a required environment variable is missing, the YAML
                   cannot be parsed, the 'config' key is missing, or the
                   content fails validation

    YAML Structure Requirements:
        The YAML file must have a top-level 'config:' key containing configuration data.

    Environment Overrides:
        KUBELAUNCH_K8S_BACKEND replaces cluster.backend when set.
    """
    path = resolve_config_path(file_path)

    loaded: dict[str, Any]
    if not path.exists():
        logger.debug(f"No configuration file at {path}, using built-in defaults")
        loaded = {"config": {}}
    else:
        logger.info(f"Loading configuration from {path}")
        content = substitute_env_vars(path.read_text())
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML: {e}") from e
        if not isinstance(parsed, dict) or "config" not in parsed:
            raise ValueError("Invalid YAML structure: missing 'config' key")
        loaded = parsed

    config_data = dict(loaded["config"] or {})

    backend = os.getenv(BACKEND_ENV_VAR)
    if backend:
        cluster = dict(config_data.get("cluster") or {})
        cluster["backend"] = backend
        config_data["cluster"] = cluster
        logger.debug(f"Cluster backend overridden from {BACKEND_ENV_VAR}: {backend}")

    try:
        return ConfigData(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
