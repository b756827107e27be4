"""
Environment assembly.

Merges the toolchain channel, the aggregated library path and the composed
flag lists into the final environment snapshot handed to the launcher:

    RUSTC_VERSION             raw channel string from the descriptor
    LD_LIBRARY_PATH           colon-joined library directories
    BINDGEN_EXTRA_CLANG_ARGS  include flags for bindgen's clang
    RUSTFLAGS                 -L flags (empty unless link packages are declared)
    shellHook                 startup script extending PATH

Assembly is pure composition: it reads no files and touches no process
state.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from envkit.core.directory import ToolchainLocations
from envkit.core.exceptions import ConfigError
from envkit.env.flags import FlagList, join_flags
from envkit.env.hook import ShellHookGenerator
from envkit.toolchain.descriptor import ToolchainDescriptor

logger = logging.getLogger(__name__)

RUSTC_VERSION = "RUSTC_VERSION"
LD_LIBRARY_PATH = "LD_LIBRARY_PATH"
BINDGEN_EXTRA_CLANG_ARGS = "BINDGEN_EXTRA_CLANG_ARGS"
RUSTFLAGS = "RUSTFLAGS"
SHELL_HOOK = "shellHook"

RESERVED_VARIABLES = frozenset(
    {RUSTC_VERSION, LD_LIBRARY_PATH, BINDGEN_EXTRA_CLANG_ARGS, RUSTFLAGS, SHELL_HOOK}
)


class EnvironmentSnapshot(Mapping[str, str]):
    """
    Immutable, ordered mapping of environment variable names to values.

    Iteration follows insertion order, so serialisations of equal snapshots
    are byte-identical.
    """

    def __init__(self, variables: Mapping[str, str]):
        self._variables = MappingProxyType(dict(variables))

    def __getitem__(self, key: str) -> str:
        return self._variables[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"EnvironmentSnapshot({dict(self._variables)!r})"

    @property
    def shell_hook(self) -> str:
        return self._variables[SHELL_HOOK]

    def exported(self) -> Dict[str, str]:
        """Variables to export into the process environment (all but the hook)."""
        return {k: v for k, v in self._variables.items() if k != SHELL_HOOK}

    def to_dict(self) -> Dict[str, str]:
        return dict(self._variables)


def assemble(
    descriptor: ToolchainDescriptor,
    lib_path: str,
    include_flags: FlagList,
    extra_rust_flags: FlagList = (),
    *,
    locations: ToolchainLocations,
    platform_triple: str,
    extra_vars: Optional[Mapping[str, str]] = None,
    tool_path: str = "",
    hook_generator: Optional[ShellHookGenerator] = None,
) -> EnvironmentSnapshot:
    """
    Assemble the environment snapshot.

    Args:
        descriptor: Toolchain descriptor providing the channel
        lib_path: Library search path from :func:`envkit.env.paths.aggregate`
        include_flags: Bindgen include flags
        extra_rust_flags: Rustc library search flags (default: none)
        locations: Resolved cargo/rustup homes for the shell hook
        platform_triple: Target triple naming the rustup toolchain directory
        extra_vars: Additional variables (e.g., LIBCLANG_PATH)
        tool_path: Tool bin directories the hook appends to PATH
        hook_generator: Shell hook renderer (default: built-in template)

    Returns:
        EnvironmentSnapshot

    Raises:
        ConfigError: If an extra variable collides with a reserved name
    """
    generator = hook_generator or ShellHookGenerator()

    variables = {
        RUSTC_VERSION: descriptor.channel,
        LD_LIBRARY_PATH: lib_path,
        BINDGEN_EXTRA_CLANG_ARGS: join_flags(include_flags),
        RUSTFLAGS: join_flags(extra_rust_flags),
    }

    for name, value in (extra_vars or {}).items():
        if name in RESERVED_VARIABLES:
            raise ConfigError(f"Variable {name} is managed by envkit and cannot be set")
        variables[name] = value

    variables[SHELL_HOOK] = generator.render(
        descriptor.channel, platform_triple, locations, tool_path=tool_path
    )

    logger.debug(f"Assembled {len(variables)} environment variables")
    return EnvironmentSnapshot(variables)
