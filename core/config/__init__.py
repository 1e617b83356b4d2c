"""
Runtime Configuration Module

Provides configuration loading and management for the segment store.
"""

from .runtime import (
    RuntimeConfig,
    ServerConfig,
    StorageConfig,
    get_default_config,
    get_default_config_template,
    load_runtime_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "ServerConfig",
    "StorageConfig",
    "get_default_config",
    "get_default_config_template",
    "load_runtime_config",
    "set_default_config",
]
