"""
Environment resolution for envkit.

Pure transforms from package handles to search paths and flag lists, the
assembler that merges them into an environment snapshot, and the pipeline
that drives a whole build.
"""

from envkit.env.paths import aggregate, PATH_SEPARATOR
from envkit.env.flags import (
    FlagList,
    FlagSpec,
    compose,
    include_flag,
    link_search_flag,
    join_flags,
)
from envkit.env.hook import ShellHookGenerator
from envkit.env.assembler import (
    EnvironmentSnapshot,
    assemble,
    RUSTC_VERSION,
    LD_LIBRARY_PATH,
    BINDGEN_EXTRA_CLANG_ARGS,
    RUSTFLAGS,
    SHELL_HOOK,
)
from envkit.env.builder import (
    ResolvedPackages,
    build_environment,
    create_store,
    resolve_packages,
    LIBCLANG_PATH,
)

__all__ = [
    "aggregate",
    "PATH_SEPARATOR",
    "FlagList",
    "FlagSpec",
    "compose",
    "include_flag",
    "link_search_flag",
    "join_flags",
    "ShellHookGenerator",
    "EnvironmentSnapshot",
    "assemble",
    "RUSTC_VERSION",
    "LD_LIBRARY_PATH",
    "BINDGEN_EXTRA_CLANG_ARGS",
    "RUSTFLAGS",
    "SHELL_HOOK",
    "LIBCLANG_PATH",
    "ResolvedPackages",
    "build_environment",
    "create_store",
    "resolve_packages",
]
