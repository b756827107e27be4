"""
Host platform detection for envkit.

Rustup installs toolchains into directories named ``<channel>-<triple>``,
so the shell hook needs the Rust target triple of the host. Detection maps
the normalized OS/architecture pair to the triple rustup would pick.

Usage:
    from envkit.core.platform import host_triple

    print(host_triple())  # x86_64-unknown-linux-gnu
"""

import functools
import platform

DEFAULT_TRIPLE = "x86_64-unknown-linux-gnu"

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "i386": "i686",
    "i686": "i686",
    "x86": "i686",
    "riscv64": "riscv64gc",
}

_OS_SUFFIXES = {
    "linux": "unknown-linux-gnu",
    "darwin": "apple-darwin",
    "windows": "pc-windows-msvc",
    "freebsd": "unknown-freebsd",
}


def triple_for(system: str, machine: str) -> str:
    """
    Build a Rust target triple from platform.system()/platform.machine() values.

    Args:
        system: Operating system name (e.g., 'Linux', 'Darwin')
        machine: CPU architecture name (e.g., 'x86_64', 'arm64')

    Returns:
        Target triple, or DEFAULT_TRIPLE if the pair is unknown

    Example:
        >>> triple_for("Darwin", "arm64")
        'aarch64-apple-darwin'
    """
    arch = _ARCH_NAMES.get(machine.lower())
    suffix = _OS_SUFFIXES.get(system.lower())
    if arch is None or suffix is None:
        return DEFAULT_TRIPLE
    return f"{arch}-{suffix}"


@functools.lru_cache(maxsize=1)
def host_triple() -> str:
    """
    Detect the Rust target triple of the running host.

    This function is cached - it only runs detection once per process.
    """
    return triple_for(platform.system(), platform.machine())


def clear_platform_cache():
    """Clear cached host detection (used by tests)."""
    host_triple.cache_clear()
