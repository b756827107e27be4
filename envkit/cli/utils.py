"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Tuple

from envkit.config.parser import EnvKitConfig, find_config, parse_config
from envkit.env.assembler import EnvironmentSnapshot
from envkit.env.builder import build_environment

logger = logging.getLogger(__name__)


# ============================================================================
# Project Loading
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def load_project(args) -> Tuple[EnvKitConfig, Path]:
    """
    Load configuration for the project selected by the global options.

    Args:
        args: Parsed arguments with config and project_root

    Returns:
        Tuple of (configuration, resolved project root)

    Raises:
        ConfigError: If the configuration is missing or invalid
    """
    project_root = resolve_project_root(getattr(args, "project_root", None))
    config_file = find_config(project_root, getattr(args, "config", None))
    return parse_config(config_file), project_root


def build_snapshot(
    args, environ: Optional[Mapping[str, str]] = None
) -> EnvironmentSnapshot:
    """
    Build the environment snapshot for the CLI invocation.

    The process environment is read here, at the outermost layer, and passed
    down explicitly.
    """
    config, project_root = load_project(args)
    if environ is None:
        environ = dict(os.environ)
    return build_environment(config, project_root, environ)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def write_output(text: str, output: Optional[Path] = None):
    """Write command output to a file or stdout."""
    if output is None:
        sys.stdout.write(text)
        return
    output.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {output}")

