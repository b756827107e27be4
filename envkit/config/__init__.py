"""Configuration module for envkit.

This module provides YAML configuration parsing and validation for envkit.yaml.
"""

from envkit.config.parser import (
    StoreConfig,
    BindgenConfig,
    RustFlagsConfig,
    EnvKitConfig,
    ConfigError,
    parse_config,
    find_config,
    DEFAULT_CONFIG_NAME,
    DEFAULT_DESCRIPTOR,
)

__all__ = [
    "StoreConfig",
    "BindgenConfig",
    "RustFlagsConfig",
    "EnvKitConfig",
    "ConfigError",
    "parse_config",
    "find_config",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_DESCRIPTOR",
]
