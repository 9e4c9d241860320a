"""
Configuration management with YAML loading and environment variable support.

The resulting AppConfig is built once at startup and handed explicitly to
every service client and action; nothing reads the environment afterwards.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    ASSEMBLY_WORKSPACE,
    DEFAULT_REPOSITORY,
    DOR_WORKSPACE,
    PRODUCTION_ENVIRONMENT,
    STACKS_HOSTS,
    STACKS_ROOT,
)

SECTIONS = ["services", "paths", "stacks", "robots", "logging"]


def _env(*names: str, default: str | None = None) -> str | None:
    """Get the first set environment variable among names."""
    for name in names:
        if value := os.environ.get(name):
            return value
    return default


@dataclass
class ServicesConfig:
    """Service endpoints - URLs can be overridden via environment variables."""

    workflow_url: str | None = field(default_factory=lambda: _env("ASU_WORKFLOW_URL"))
    fedora_url: str | None = field(default_factory=lambda: _env("ASU_FEDORA_URL"))
    solr_url: str | None = field(default_factory=lambda: _env("ASU_SOLR_URL"))
    dor_services_url: str | None = field(default_factory=lambda: _env("ASU_DOR_SERVICES_URL"))

    # Client certificate for the SSL-protected services
    cert_file: Path | None = None
    key_file: Path | None = None

    repository: str = DEFAULT_REPOSITORY


@dataclass
class PathsConfig:
    dor_workspace: Path = Path(DOR_WORKSPACE)
    assembly_workspace: Path = Path(ASSEMBLY_WORKSPACE)


@dataclass
class StacksConfig:
    host: str | None = None  # derived from environment when unset
    user: str = "lyberadmin"
    root: Path = Path(STACKS_ROOT)


@dataclass
class RobotsConfig:
    accession_dir: Path = Path("/home/lyberadmin/common-accessioning/current")
    assembly_dir: Path = Path("/home/lyberadmin/assembly/current")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Path | None = None


_PATH_KEYS = {
    "cert_file",
    "key_file",
    "dor_workspace",
    "assembly_workspace",
    "root",
    "accession_dir",
    "assembly_dir",
    "file",
}


@dataclass
class AppConfig:
    environment: str = field(
        default_factory=lambda: _env("ASU_ENVIRONMENT", "ROBOT_ENVIRONMENT", default="development")
    )
    services: ServicesConfig = field(default_factory=ServicesConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    stacks: StacksConfig = field(default_factory=StacksConfig)
    robots: RobotsConfig = field(default_factory=RobotsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION_ENVIRONMENT

    @property
    def stacks_host(self) -> str | None:
        """Stacks server for this environment, unless set explicitly."""
        return self.stacks.host or STACKS_HOSTS.get(self.environment)

    @classmethod
    def from_yaml(cls, path: Path) -> AppConfig:
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> AppConfig:
        """Create config from dictionary."""
        config = cls()

        if data.get("environment"):
            config.environment = str(data["environment"])

        for attr in SECTIONS:
            if attr not in data or not data[attr]:
                continue
            section = getattr(config, attr)
            for key, value in data[attr].items():
                if hasattr(section, key):
                    if key in _PATH_KEYS and isinstance(value, str):
                        value = Path(value)
                    setattr(section, key, value)

        return config

    def merge_environment_config(self, env_config_path: Path) -> AppConfig:
        """Merge environment-specific config overrides."""
        if not env_config_path.exists():
            return self

        with open(env_config_path) as f:
            overrides = yaml.safe_load(f) or {}

        merged = self._to_dict()
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value

        return AppConfig._from_dict(merged)

    def _to_dict(self) -> dict:
        """Convert config to dictionary."""
        result: dict = {"environment": self.environment}
        for attr in SECTIONS:
            section = getattr(self, attr)
            result[attr] = {
                key: str(value) if isinstance(value, Path) else value for key, value in vars(section).items()
            }
        return result


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    if config_dir := os.environ.get("ASU_CONFIG_DIR"):
        return Path(config_dir)

    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "assembly-utils"

    return Path.home() / ".config" / "assembly-utils"


def load_config(
    global_config_path: Path | None = None, environment: str | None = None, config_dir: Path | None = None
) -> AppConfig:
    """
    Load configuration with optional environment-specific overrides.

    Args:
        global_config_path: Path to config file (default: searches standard locations)
        environment: Environment name, overriding the config file and ASU_ENVIRONMENT
        config_dir: Config directory holding environments/<name>.yaml

    Returns:
        Merged AppConfig
    """
    if config_dir is None:
        config_dir = global_config_path.parent if global_config_path else _get_default_config_dir()

    if global_config_path is None:
        search_paths = [
            config_dir / "config.yaml",
            Path.cwd() / "asu.yaml",
        ]
        for path in search_paths:
            if path.exists():
                global_config_path = path
                break

    config = AppConfig.from_yaml(global_config_path) if global_config_path else AppConfig()

    if environment:
        config.environment = environment

    env_config_path = config_dir / "environments" / f"{config.environment}.yaml"
    config = config.merge_environment_config(env_config_path)

    if environment:
        config.environment = environment

    return config


# Endpoint setting -> environment variable that overrides it
SERVICE_URL_ENV = {
    "workflow_url": "ASU_WORKFLOW_URL",
    "fedora_url": "ASU_FEDORA_URL",
    "solr_url": "ASU_SOLR_URL",
}


def validate_services(config: AppConfig, required: list[str] | None = None) -> list[str]:
    """
    Validate that service endpoints are configured.

    Args:
        config: Loaded config
        required: Endpoint settings to check (default: all of SERVICE_URL_ENV)

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    for name in SERVICE_URL_ENV if required is None else required:
        if not getattr(config.services, name):
            errors.append(f"{name} not configured (set {SERVICE_URL_ENV[name]} or in config file)")
    return errors
