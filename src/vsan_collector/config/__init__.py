"""Configuration package for vsan_collector."""

from .state import (
    CollectionConfig,
    ConfigError,
    ConfigLoader,
    ConfigState,
    LoggingConfig,
    VCenterConfig,
    get_config,
)

__all__ = [
    "CollectionConfig",
    "ConfigError",
    "ConfigLoader",
    "ConfigState",
    "LoggingConfig",
    "VCenterConfig",
    "get_config",
]
