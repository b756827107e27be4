"""
Package store abstraction for envkit.

The resolver never builds or fetches packages. A package store is an
external collaborator which maps a package name to the installation root of
an already-realised package. This module defines the handle it returns and
the interface every store adapter implements.

Package names may carry an output suffix in the Nix style: ``glib.dev``
selects the ``dev`` output of ``glib``; ``glib`` and ``glib.out`` select the
default output. Longer attribute paths such as
``llvmPackages_19.libclang.lib`` are accepted; the last component before the
output is the package name.

Classes:
    PackageHandle: Immutable reference to an installed package
    PackageStore: Abstract base class for store adapters
    ChainedPackageStore: Try several stores in order
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from envkit.core.exceptions import ResolutionError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "out"

KNOWN_OUTPUTS = frozenset(
    {"out", "dev", "lib", "bin", "man", "doc", "info", "static", "debug"}
)


def split_name(name: str) -> Tuple[str, str]:
    """
    Split a package reference into package name and output.

    Args:
        name: Package reference (e.g., 'glib.dev', 'vulkan-loader')

    Returns:
        Tuple of (package name, output)

    Example:
        >>> split_name("llvmPackages_19.libclang.lib")
        ('libclang', 'lib')
        >>> split_name("vulkan-headers")
        ('vulkan-headers', 'out')
    """
    parts = name.split(".")
    output = DEFAULT_OUTPUT
    if len(parts) > 1 and parts[-1] in KNOWN_OUTPUTS:
        output = parts.pop()
    return parts[-1], output


@dataclass(frozen=True)
class PackageHandle:
    """
    Immutable reference to an installed package.

    Attributes:
        name: Reference the package was resolved from (e.g., 'glib.dev')
        root: Installation root directory
        version: Package version if the store knows it
        output: Store output selected ('out', 'dev', 'lib', ...)
    """

    name: str
    root: Path
    version: Optional[str] = None
    output: str = DEFAULT_OUTPUT

    def __post_init__(self):
        """Validate handle after initialization."""
        if not self.name:
            raise ValueError("Package name cannot be empty")
        if not isinstance(self.root, Path):
            raise TypeError(f"root must be Path, got {type(self.root)}")

    def __str__(self) -> str:
        return str(self.root)


class PackageStore(ABC):
    """
    Abstract base class for package store adapters.

    Example:
        class StaticStore(PackageStore):
            def resolve(self, name: str) -> PackageHandle:
                return PackageHandle(name, Path("/opt") / name)

            def get_name(self) -> str:
                return "static"
    """

    @abstractmethod
    def resolve(self, name: str) -> PackageHandle:
        """
        Resolve a package reference to a handle.

        Raises:
            ResolutionError: If the package is unknown to this store
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Short adapter name used in log messages."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class ChainedPackageStore(PackageStore):
    """Consult several stores in order; the first that resolves a name wins."""

    def __init__(self, stores: Sequence[PackageStore]):
        if not stores:
            raise ValueError("ChainedPackageStore needs at least one store")
        self.stores = list(stores)

    def resolve(self, name: str) -> PackageHandle:
        failures = []
        for store in self.stores:
            try:
                return store.resolve(name)
            except ResolutionError as e:
                failures.append(f"{store.get_name()}: {e.reason or 'not found'}")
        raise ResolutionError(name, "; ".join(failures))

    def get_name(self) -> str:
        return "+".join(store.get_name() for store in self.stores)


def resolve_all(store: PackageStore, names: Iterable[str]) -> List[PackageHandle]:
    """
    Resolve package references in order.

    Args:
        store: Store to resolve against
        names: Package references

    Returns:
        Handles in the same order as ``names``

    Raises:
        ResolutionError: On the first name the store cannot resolve
    """
    handles = []
    for name in names:
        handle = store.resolve(name)
        logger.debug(f"Resolved {name} -> {handle.root} via {store.get_name()}")
        handles.append(handle)
    return handles
