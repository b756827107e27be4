"""
Compiler and linker flag composition.

A flag list is derived from package handles through a template (one flag per
handle, in handle order) followed by literal flags that are not tied to a
single package, in declaration order:

    compose([glibc.dev, vulkan-headers], include_flag, ['-I/extra'])
    -> ('-I"/nix/store/...-glibc-dev/include"',
        '-I"/nix/store/...-vulkan-headers/include"',
        '-I/extra')

Include flags (for bindgen's clang) and library-search flags (for rustc)
are separate flag kinds, each with its own template and handle subset.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence, Tuple

from envkit.packages.base import PackageHandle

FlagList = Tuple[str, ...]
FlagTemplate = Callable[[Path], str]


def include_flag(root: Path) -> str:
    """Clang include flag for ``<root>/include``, quoted for paths with spaces."""
    return f'-I"{root}/include"'


def link_search_flag(root: Path) -> str:
    """Rustc library search flag for ``<root>/lib``."""
    return f"-L{root}/lib"


def compose(
    handles: Sequence[PackageHandle],
    template: FlagTemplate,
    extras: Iterable[str] = (),
) -> FlagList:
    """
    Compose an ordered flag list.

    Args:
        handles: Package handles, one derived flag each
        template: Maps a package root to a flag string
        extras: Literal flags appended after the derived ones

    Returns:
        Tuple of ``len(handles) + len(extras)`` flags, derived flags first
    """
    derived = [template(handle.root) for handle in handles]
    return tuple(derived) + tuple(extras)


def join_flags(flags: FlagList) -> str:
    """Join flags into a single environment variable value."""
    return " ".join(flags)


@dataclass(frozen=True)
class FlagSpec:
    """
    Declared flag kind: which packages feed it, how and what is appended.

    Attributes:
        packages: Handles the template is applied to, in order
        template: Per-package flag template
        extras: Literal flags appended after the derived ones
    """

    packages: Tuple[PackageHandle, ...] = ()
    template: FlagTemplate = include_flag
    extras: Tuple[str, ...] = ()

    def compose(self) -> FlagList:
        return compose(self.packages, self.template, self.extras)
