"""
Package store integration for envkit.

Stores map package names to installation roots of already-installed
packages. envkit only reads the resulting handles.
"""

from envkit.packages.base import (
    PackageHandle,
    PackageStore,
    ChainedPackageStore,
    resolve_all,
    split_name,
)
from envkit.packages.stores import (
    MappingPackageStore,
    StoreDirectoryPackageStore,
    parse_store_entry,
)

__all__ = [
    "PackageHandle",
    "PackageStore",
    "ChainedPackageStore",
    "MappingPackageStore",
    "StoreDirectoryPackageStore",
    "resolve_all",
    "split_name",
    "parse_store_entry",
]
