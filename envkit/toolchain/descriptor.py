"""
Toolchain descriptor reader.

Parses the rustup toolchain file that pins the compiler channel for a
project. Two layouts are accepted, matching rustup:

    rust-toolchain.toml:
        [toolchain]
        channel = "nightly-2024-01-01"
        components = ["rustfmt", "clippy"]
        targets = ["wasm32-unknown-unknown"]
        profile = "minimal"

    rust-toolchain (legacy):
        nightly-2024-01-01
"""

import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from envkit.core.exceptions import MissingFieldError, ParseError

logger = logging.getLogger(__name__)

# Channels name a directory component and are interpolated into shell text.
_CHANNEL_PATTERN = re.compile(r"[^\s\x00-\x1f\x7f]+")


@dataclass(frozen=True)
class ToolchainDescriptor:
    """
    Pinned compiler toolchain.

    Attributes:
        channel: Release channel or version (e.g., 'stable', '1.79.0',
            'nightly-2024-01-01')
        components: Extra rustup components requested
        targets: Extra compilation targets requested
        profile: Rustup installation profile, if declared
        path: File the descriptor was read from
    """

    channel: str
    components: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()
    profile: Optional[str] = None
    path: Optional[Path] = field(default=None, compare=False)


def read(path: Path) -> ToolchainDescriptor:
    """
    Read a toolchain descriptor file.

    Args:
        path: Path to rust-toolchain.toml or legacy rust-toolchain file

    Returns:
        Parsed ToolchainDescriptor

    Raises:
        ParseError: If the file cannot be read or is not well-formed
        MissingFieldError: If the required ``channel`` field is absent
    """
    path = Path(path)
    logger.debug(f"Reading toolchain descriptor: {path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ParseError(path, f"cannot read file: {e}") from e

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(path, "file is not valid UTF-8") from e

    if path.suffix != ".toml" and _is_legacy_format(text):
        return _parse_legacy(path, text)

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(path, str(e)) from e

    return _parse_document(path, data)


def _is_legacy_format(text: str) -> bool:
    """Legacy files hold a single bare channel name and no TOML syntax."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return len(lines) == 1 and not any(c in lines[0] for c in "=[]\"'")


def _parse_legacy(path: Path, text: str) -> ToolchainDescriptor:
    channel = _validate_channel(path, text.strip())
    logger.debug(f"Legacy toolchain file pins channel {channel}")
    return ToolchainDescriptor(channel=channel, path=path)


def _parse_document(path: Path, data: dict) -> ToolchainDescriptor:
    """Validate the ``[toolchain]`` table and build the descriptor."""
    if "toolchain" not in data:
        raise MissingFieldError(path, "toolchain.channel")

    table = data["toolchain"]
    if not isinstance(table, dict):
        raise ParseError(path, "'toolchain' must be a table")

    if "channel" not in table:
        raise MissingFieldError(path, "toolchain.channel")

    channel = table["channel"]
    if not isinstance(channel, str) or not channel:
        raise ParseError(path, "'toolchain.channel' must be a non-empty string")
    _validate_channel(path, channel)

    profile = table.get("profile")
    if profile is not None and not isinstance(profile, str):
        raise ParseError(path, "'toolchain.profile' must be a string")

    return ToolchainDescriptor(
        channel=channel,
        components=_string_tuple(path, table, "components"),
        targets=_string_tuple(path, table, "targets"),
        profile=profile,
        path=path,
    )


def _validate_channel(path: Path, channel: str) -> str:
    if not _CHANNEL_PATTERN.fullmatch(channel):
        raise ParseError(
            path, f"channel {channel!r} contains whitespace or control characters"
        )
    return channel


def _string_tuple(path: Path, table: dict, key: str) -> Tuple[str, ...]:
    values = table.get(key, [])
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ParseError(path, f"'toolchain.{key}' must be a list of strings")
    return tuple(values)


class DescriptorReader:
    """
    Read-once wrapper around :func:`read`.

    One environment build consults the descriptor in several places (the
    version variable, the shell hook, diagnostics); the reader guarantees the
    file is parsed exactly once and every consumer sees the same result.
    Failures are not cached.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._descriptor: Optional[ToolchainDescriptor] = None

    def get(self) -> ToolchainDescriptor:
        """Return the descriptor, reading the file on first use."""
        if self._descriptor is None:
            self._descriptor = read(self.path)
            logger.info(f"Toolchain channel: {self._descriptor.channel}")
        return self._descriptor
