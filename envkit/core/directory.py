"""
Toolchain location resolution for envkit.

The shell hook appends two directories to PATH: the cargo binary directory
and the bin directory of the pinned rustup toolchain. Both live under
well-known homes which the user can relocate with environment variables.

Override precedence (per variable):
    1. Variable present and non-empty in the injected environment -> use it
    2. Otherwise -> fixed default under the injected home directory

Defaults:
    CARGO_HOME  -> <home>/.cargo
    RUSTUP_HOME -> <home>/.rustup

Directory Structure:
    <cargo-home>/bin/                                  : cargo-installed binaries
    <rustup-home>/toolchains/<channel>-<triple>/bin/   : rustc, cargo, rustdoc
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

CARGO_HOME_VAR = "CARGO_HOME"
RUSTUP_HOME_VAR = "RUSTUP_HOME"


def _from_override(
    environ: Mapping[str, str], variable: str, default: Path
) -> Path:
    value = environ.get(variable)
    if value:
        logger.debug(f"Using {variable} override: {value}")
        return Path(value)
    return default


@dataclass(frozen=True)
class ToolchainLocations:
    """
    Resolved cargo and rustup home directories.

    Attributes:
        cargo_home: Cargo home (binary cache root)
        rustup_home: Rustup home (toolchain installation root)
    """

    cargo_home: Path
    rustup_home: Path

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str], home: Optional[Path] = None
    ) -> "ToolchainLocations":
        """
        Resolve locations from an explicit environment mapping.

        Args:
            environ: Environment variables to consult (never read implicitly)
            home: Home directory used for defaults (default: Path.home())

        Returns:
            ToolchainLocations with overrides applied

        Example:
            >>> locs = ToolchainLocations.from_environ({}, Path("/home/u"))
            >>> str(locs.rustup_home)
            '/home/u/.rustup'
        """
        if home is None:
            home = Path.home()
        return cls(
            cargo_home=_from_override(environ, CARGO_HOME_VAR, home / ".cargo"),
            rustup_home=_from_override(environ, RUSTUP_HOME_VAR, home / ".rustup"),
        )

    def cargo_bin_dir(self) -> Path:
        """Directory holding cargo-installed binaries."""
        return self.cargo_home / "bin"

    def toolchain_bin_dir(self, channel: str, triple: str) -> Path:
        """Bin directory of the rustup toolchain ``<channel>-<triple>``."""
        return self.rustup_home / "toolchains" / f"{channel}-{triple}" / "bin"
