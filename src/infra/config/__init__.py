"""Configuration loading for kubelaunch.

Example:
    from src.infra.config import load_config

    config = load_config()
    print(config.defaults.namespace)
"""

from .config_data import ClusterConfig, ConfigData, DefaultsConfig, LoggingConfig
from .config_loader import CONFIG_ENV_VAR, CONFIG_PATH, load_config, resolve_config_path

__all__ = [
    "ConfigData",
    "DefaultsConfig",
    "ClusterConfig",
    "LoggingConfig",
    "CONFIG_ENV_VAR",
    "CONFIG_PATH",
    "load_config",
    "resolve_config_path",
]
