"""
Core functionality for envkit.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    ToolchainLocations,
    CARGO_HOME_VAR,
    RUSTUP_HOME_VAR,
)

from .platform import (
    DEFAULT_TRIPLE,
    host_triple,
    triple_for,
    clear_platform_cache,
)

from .exceptions import (
    EnvKitError,
    DescriptorError,
    ParseError,
    MissingFieldError,
    ResolutionError,
    ConfigError,
)

__all__ = [
    "ToolchainLocations",
    "CARGO_HOME_VAR",
    "RUSTUP_HOME_VAR",
    "DEFAULT_TRIPLE",
    "host_triple",
    "triple_for",
    "clear_platform_cache",
    "EnvKitError",
    "DescriptorError",
    "ParseError",
    "MissingFieldError",
    "ResolutionError",
    "ConfigError",
]
