"""Agent configuration, loaded from an optional YAML file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from mlagent.errors import ConfigError

DEFAULT_APP_ROOT = "/opt/usr/globalapps"
# Only globally-installed resources are supported for now.
RESOURCE_SCOPE = "global"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class AgentConfig:
    """Settings for the ingestion path."""

    app_root: str = DEFAULT_APP_ROOT
    package_type: str = "rpk"
    registry_dir: str = ".mlagent_registry"
    log_level: str = "INFO"
    # package id -> {"res_type": ..., "res_version": ...} for the local package manager
    packages: dict[str, dict] = field(default_factory=dict)

    @property
    def resource_scope(self) -> str:
        return RESOURCE_SCOPE

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def load_config(path: str | Path | None = None) -> AgentConfig:
    """Load the agent configuration from a YAML file.

    A missing ``path`` gives the defaults.
    """
    if path is None:
        return AgentConfig()

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping")

    defaults = AgentConfig()
    log_level = str(data.get("log_level", defaults.log_level)).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(f"Invalid log_level '{log_level}'. Must be one of: {sorted(VALID_LOG_LEVELS)}")

    packages = data.get("packages") or {}
    if not isinstance(packages, dict):
        raise ConfigError("'packages' must map package ids to resource metadata")

    return AgentConfig(
        app_root=str(data.get("app_root", defaults.app_root)),
        package_type=str(data.get("package_type", defaults.package_type)),
        registry_dir=str(data.get("registry_dir", defaults.registry_dir)),
        log_level=log_level,
        packages=packages,
    )
