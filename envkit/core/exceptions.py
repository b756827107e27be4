"""
Centralized exception hierarchy for envkit.

Every failure in the resolver pipeline is fatal to the current environment
build. Exceptions propagate unmodified to the caller; only the CLI turns them
into exit codes.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class EnvKitError(Exception):
    """Base exception for all envkit errors."""

    pass


# ============================================================================
# Toolchain Descriptor Exceptions
# ============================================================================


class DescriptorError(EnvKitError):
    """Base exception for toolchain descriptor errors."""

    pass


class ParseError(DescriptorError):
    """Raised when the descriptor file is not well-formed structured data."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid toolchain descriptor {path}: {reason}")


class MissingFieldError(DescriptorError):
    """Raised when a required descriptor field is absent."""

    def __init__(self, path, field_name: str):
        self.path = path
        self.field_name = field_name
        super().__init__(
            f"Toolchain descriptor {path} is missing required field: {field_name}"
        )


# ============================================================================
# Package Store Exceptions
# ============================================================================


class ResolutionError(EnvKitError):
    """Raised when a package name cannot be resolved by the package store."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        self.reason = reason
        msg = f"Cannot resolve package: {name}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(EnvKitError):
    """Configuration parsing or validation error."""

    pass


__all__ = [
    "EnvKitError",
    "DescriptorError",
    "ParseError",
    "MissingFieldError",
    "ResolutionError",
    "ConfigError",
]
