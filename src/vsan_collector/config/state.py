"""
Unified configuration state management.

This module provides a single source of truth for the collector configuration,
combining hierarchical YAML files with environment overrides, type validation,
and sensible defaults.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from vsan_collector.infrastructure.observability import get_infrastructure_logger
from vsan_collector.shared.models.entities import ClusterRef
from vsan_collector.shared.models.enums import VSAN_PERF_ENTITY_GROUPS, EntityGroup


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class VCenterConfig(BaseModel):
    """vCenter endpoint and session configuration."""

    url: str = Field(default="https://vcenter.local")
    vsan_path: str = Field(default="/vsanHealth")
    soap_action: str = Field(default="urn:vsan")
    session_cookie: str = Field(default="", repr=False)
    verify_ssl: bool = Field(default=True)
    timeout: float = Field(default=60.0, gt=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if v.startswith(("https://", "http://")):
            return v.rstrip("/")
        raise ValueError("vCenter URL must start with https:// or http://")

    @field_validator("vsan_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    @property
    def endpoint(self) -> str:
        return f"{self.url}{self.vsan_path}"

    class Config:
        extra = "allow"


class CollectionConfig(BaseModel):
    """What to collect and over which window."""

    window_minutes: int = Field(default=5, ge=1, le=60)
    entity_groups: list[EntityGroup] = Field(
        default_factory=lambda: list(VSAN_PERF_ENTITY_GROUPS)
    )
    deadline_seconds: float = Field(default=120.0, gt=0)
    clusters: list[ClusterRef] = Field(default_factory=list)

    @field_validator("entity_groups")
    @classmethod
    def validate_groups(cls, v: list[EntityGroup]) -> list[EntityGroup]:
        if not v:
            raise ValueError("At least one entity group is required")
        # Keep first occurrence order; a repeated group would be queried twice
        return list(dict.fromkeys(v))

    class Config:
        extra = "allow"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)

    class Config:
        extra = "allow"


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for collector config.
    """

    vcenter: VCenterConfig = Field(default_factory=VCenterConfig)
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    env: str = Field(default="dev")
    config_dir: str = Field(default="/etc/vsan-collector")

    class Config:
        extra = "allow"


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from hierarchical YAML files.

    Merges:
      1. Global defaults (hardcoded)
      2. YAML files from config_dir
      3. Environment-specific YAML (env/<VSAN_ENV>.yaml)
      4. Environment variable overrides
    """

    # Each file holds the keys of one ConfigState section
    CONFIG_FILES = {
        "vcenter": "vcenter.yaml",
        "collection": "collection.yaml",
        "logging": "logging.yaml",
    }

    def __init__(self, config_dir: str | Path = "/etc/vsan-collector"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("VSAN_ENV", "dev")
        self.log = get_infrastructure_logger("config-loader", env=self.env)

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching. Missing files yield an empty mapping."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            self.log.debug("config_file_missing", path=str(path))
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping")

        self._yaml_cache[path] = data
        self.log.debug("config_file_loaded", path=str(path))
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if url := os.getenv("VSAN_VCENTER_URL"):
            config.setdefault("vcenter", {})["url"] = url

        if cookie := os.getenv("VSAN_SESSION_COOKIE"):
            config.setdefault("vcenter", {})["session_cookie"] = cookie

        if window := os.getenv("VSAN_WINDOW_MINUTES"):
            config.setdefault("collection", {})["window_minutes"] = window

        if log_level := os.getenv("LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Returns:
            ConfigState: Validated configuration object

        Raises:
            ConfigError: If a configuration file is unreadable
            pydantic.ValidationError: If configuration is invalid
        """
        self.log.info("config_loading", config_dir=str(self.config_dir), env=self.env)

        config: dict[str, Any] = {}

        for section, config_file in self.CONFIG_FILES.items():
            file_config = self._load_yaml(self.config_dir / config_file)
            if file_config:
                config = self._merge_dicts(config, {section: file_config})

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        try:
            state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        except Exception as e:
            self.log.error("config_validation_failed", error=str(e))
            raise

        self.log.info(
            "config_loaded",
            vcenter=state.vcenter.url,
            clusters=len(state.collection.clusters),
            entity_groups=[g.value for g in state.collection.entity_groups],
        )
        return state


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $VSAN_CONFIG_DIR,
            /etc/vsan-collector or ./config

    Returns:
        ConfigState: Validated configuration object
    """
    if config_dir is None:
        config_dir = os.getenv("VSAN_CONFIG_DIR", "/etc/vsan-collector")
        if not Path(config_dir).exists():
            if Path("./config").exists():
                config_dir = "./config"
            else:
                get_infrastructure_logger("config-loader").warning(
                    "config_dir_missing", config_dir=config_dir
                )

    loader = ConfigLoader(config_dir=config_dir)
    return loader.load()


__all__ = [
    "CollectionConfig",
    "ConfigError",
    "ConfigLoader",
    "ConfigState",
    "LoggingConfig",
    "VCenterConfig",
    "get_config",
]
