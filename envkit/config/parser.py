"""YAML configuration parser for envkit.

This module provides parsing and validation for envkit.yaml configuration files.

Example envkit.yaml:

    version: 1
    descriptor: rust-toolchain.toml
    store:
      directory: /nix/store
    library_path: [libxkbcommon, libGL, vulkan-loader]
    bindgen:
      include_packages: [glibc.dev, vulkan-headers]
      extra_flags:
        - '-I"{{ pkg("glib.dev").root }}/include/glib-2.0"'
    rustflags:
      link_packages: []
    libclang: clang.lib
    tools: [pkg-config, cmake]
    build_inputs: [openssl.dev]
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from envkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "envkit.yaml"
DEFAULT_DESCRIPTOR = "rust-toolchain.toml"

_ENV_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


@dataclass
class StoreConfig:
    """Package store configuration."""

    directory: Optional[str] = None  # content-addressed store, e.g. /nix/store
    packages: Dict[str, Any] = field(default_factory=dict)  # explicit roots


@dataclass
class BindgenConfig:
    """Include flags handed to bindgen's clang."""

    include_packages: List[str] = field(default_factory=list)
    extra_flags: List[str] = field(default_factory=list)


@dataclass
class RustFlagsConfig:
    """Library search flags handed to rustc (empty by default)."""

    link_packages: List[str] = field(default_factory=list)
    extra_flags: List[str] = field(default_factory=list)


@dataclass
class EnvKitConfig:
    """Complete envkit configuration."""

    version: int
    descriptor: str = DEFAULT_DESCRIPTOR
    platform_triple: Optional[str] = None  # None: detect host triple
    store: StoreConfig = field(default_factory=StoreConfig)
    library_path: List[str] = field(default_factory=list)
    tools: List[str] = field(default_factory=list)  # bin/ appended to PATH
    build_inputs: List[str] = field(default_factory=list)  # lib/pkgconfig
    bindgen: BindgenConfig = field(default_factory=BindgenConfig)
    rustflags: RustFlagsConfig = field(default_factory=RustFlagsConfig)
    libclang: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)


def parse_config(config_path: Path) -> EnvKitConfig:
    """
    Parse envkit.yaml configuration file.

    Args:
        config_path: Path to envkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return _parse_and_validate(data)


def find_config(project_root: Path, config_path: Optional[Path] = None) -> Path:
    """
    Locate the configuration file.

    Args:
        project_root: Project root directory
        config_path: Explicit path (relative paths are taken from project_root)

    Returns:
        Path to the configuration file (may not exist)
    """
    if config_path is None:
        return Path(project_root) / DEFAULT_CONFIG_NAME
    config_path = Path(config_path)
    if not config_path.is_absolute():
        config_path = Path(project_root) / config_path
    return config_path


def _parse_and_validate(data: dict) -> EnvKitConfig:
    """Parse and validate configuration data."""
    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    descriptor = data.get("descriptor", DEFAULT_DESCRIPTOR)
    _require_string(descriptor, "descriptor")

    platform_triple = data.get("platform_triple")
    if platform_triple is not None:
        _require_string(platform_triple, "platform_triple")

    libclang = data.get("libclang")
    if libclang is not None:
        _require_string(libclang, "libclang")

    return EnvKitConfig(
        version=data["version"],
        descriptor=descriptor,
        platform_triple=platform_triple,
        store=_parse_store(data.get("store") or {}),
        library_path=_string_list(data.get("library_path", []), "library_path"),
        tools=_string_list(data.get("tools", []), "tools"),
        build_inputs=_string_list(data.get("build_inputs", []), "build_inputs"),
        bindgen=_parse_bindgen(data.get("bindgen") or {}),
        rustflags=_parse_rustflags(data.get("rustflags") or {}),
        libclang=libclang,
        env=_parse_env(data.get("env") or {}),
    )


def _parse_store(data: dict) -> StoreConfig:
    """Parse package store configuration."""
    if not isinstance(data, dict):
        raise ConfigError("store must be a mapping")

    directory = data.get("directory")
    if directory is not None:
        _require_string(directory, "store.directory")

    packages = data.get("packages") or {}
    if not isinstance(packages, dict):
        raise ConfigError("store.packages must be a mapping of name to path")

    for name, value in packages.items():
        if isinstance(value, dict):
            if "root" not in value:
                raise ConfigError(f"store.packages.{name} is missing 'root'")
            _require_string(value["root"], f"store.packages.{name}.root")
        else:
            _require_string(value, f"store.packages.{name}")

    if directory is None and not packages:
        raise ConfigError("store must declare a directory or packages")

    return StoreConfig(directory=directory, packages=packages)


def _parse_bindgen(data: dict) -> BindgenConfig:
    """Parse bindgen include flag configuration."""
    if not isinstance(data, dict):
        raise ConfigError("bindgen must be a mapping")
    return BindgenConfig(
        include_packages=_string_list(
            data.get("include_packages", []), "bindgen.include_packages"
        ),
        extra_flags=_string_list(data.get("extra_flags", []), "bindgen.extra_flags"),
    )


def _parse_rustflags(data: dict) -> RustFlagsConfig:
    """Parse rustc library search flag configuration."""
    if not isinstance(data, dict):
        raise ConfigError("rustflags must be a mapping")
    return RustFlagsConfig(
        link_packages=_string_list(
            data.get("link_packages", []), "rustflags.link_packages"
        ),
        extra_flags=_string_list(
            data.get("extra_flags", []), "rustflags.extra_flags"
        ),
    )


def _parse_env(data: dict) -> Dict[str, str]:
    """Parse extra environment variables."""
    if not isinstance(data, dict):
        raise ConfigError("env must be a mapping")
    env = {}
    for name, value in data.items():
        if not isinstance(name, str) or not _ENV_NAME_PATTERN.fullmatch(name):
            raise ConfigError(f"env: {name!r} is not a valid variable name")
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ConfigError(f"env.{name} must be a string")
        value = str(value)
        if _CONTROL_CHARS.search(value):
            raise ConfigError(f"env.{name} contains control characters")
        env[name] = value
    return env


def _require_string(value: Any, where: str):
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{where} must be a non-empty string")


def _string_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where} must be a list of strings")
    return list(value)
