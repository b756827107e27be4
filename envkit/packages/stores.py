"""
Package store adapters.

Two adapters cover the ways a project points envkit at its dependencies:

- MappingPackageStore: explicit ``name -> root`` table from envkit.yaml
- StoreDirectoryPackageStore: a content-addressed store directory laid out
  as ``<hash>-<pname>-<version>[-<output>]`` (``/nix/store`` and friends)
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from packaging.version import InvalidVersion, Version

from envkit.core.exceptions import ResolutionError
from envkit.packages.base import (
    DEFAULT_OUTPUT,
    KNOWN_OUTPUTS,
    PackageHandle,
    PackageStore,
    split_name,
)

logger = logging.getLogger(__name__)

# <32-char nix base32 hash>-<name...>
_STORE_ENTRY = re.compile(r"^(?P<hash>[0-9a-z]{32})-(?P<rest>.+)$")


class MappingPackageStore(PackageStore):
    """
    Resolve packages from an explicit table.

    Values are either a root path or a mapping with ``root`` and optional
    ``version`` keys.

    Example:
        store = MappingPackageStore({
            "vulkan-loader": "/opt/vulkan",
            "libclang.lib": {"root": "/opt/clang", "version": "19"},
        })
    """

    def __init__(self, packages: Mapping[str, Union[str, Path, Mapping]]):
        self.packages: Dict[str, PackageHandle] = {}
        for name, value in packages.items():
            self.packages[name] = self._to_handle(name, value)

    @staticmethod
    def _to_handle(name: str, value) -> PackageHandle:
        _, output = split_name(name)
        if isinstance(value, Mapping):
            if "root" not in value:
                raise ValueError(f"Package entry '{name}' is missing 'root'")
            version = value.get("version")
            return PackageHandle(
                name=name,
                root=Path(value["root"]),
                version=str(version) if version is not None else None,
                output=output,
            )
        return PackageHandle(name=name, root=Path(value), output=output)

    def resolve(self, name: str) -> PackageHandle:
        handle = self.packages.get(name)
        if handle is None:
            raise ResolutionError(name, "not declared in package table")
        return handle

    def get_name(self) -> str:
        return "mapping"


def parse_store_entry(entry: str) -> Optional[Tuple[str, str, str]]:
    """
    Split a store directory entry into (pname, version, output).

    Args:
        entry: Directory name, e.g. 'abc...xyz-glib-2.80.0-dev'

    Returns:
        Tuple of (pname, version, output), or None if the entry does not
        follow the store naming scheme

    Example:
        >>> parse_store_entry("0" * 32 + "-vulkan-loader-1.3.290.0")
        ('vulkan-loader', '1.3.290.0', 'out')
    """
    match = _STORE_ENTRY.match(entry)
    if not match:
        return None

    parts = match.group("rest").split("-")
    output = DEFAULT_OUTPUT
    if len(parts) > 2 and parts[-1] in KNOWN_OUTPUTS:
        output = parts.pop()

    # Version is the first dash-separated component starting with a digit.
    for index in range(1, len(parts)):
        if parts[index][:1].isdigit():
            return "-".join(parts[:index]), "-".join(parts[index:]), output
    return None


def _version_key(version: str):
    try:
        return (1, Version(version), version)
    except InvalidVersion:
        return (0, Version("0"), version)


class StoreDirectoryPackageStore(PackageStore):
    """
    Resolve packages by scanning a content-addressed store directory.

    When several versions of the same package and output are present, the
    highest version wins (PEP 440 ordering, falling back to string order for
    versions PEP 440 cannot parse).
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._index: Optional[Dict[Tuple[str, str], List[Tuple[str, Path]]]] = None

    def _build_index(self) -> Dict[Tuple[str, str], List[Tuple[str, Path]]]:
        index: Dict[Tuple[str, str], List[Tuple[str, Path]]] = {}
        for entry in sorted(self.directory.iterdir()):
            if not entry.is_dir():
                continue
            parsed = parse_store_entry(entry.name)
            if parsed is None:
                continue
            pname, version, output = parsed
            index.setdefault((pname, output), []).append((version, entry))

        logger.debug(f"Indexed {len(index)} packages in {self.directory}")
        return index

    def resolve(self, name: str) -> PackageHandle:
        if self._index is None:
            if not self.directory.is_dir():
                raise ResolutionError(
                    name, f"store directory does not exist: {self.directory}"
                )
            self._index = self._build_index()

        pname, output = split_name(name)
        candidates = self._index.get((pname, output))
        if not candidates:
            raise ResolutionError(name, f"no '{output}' output in {self.directory}")

        version, root = max(candidates, key=lambda c: _version_key(c[0]))
        if len(candidates) > 1:
            logger.debug(
                f"{len(candidates)} versions of {pname} found, using {version}"
            )
        return PackageHandle(name=name, root=root, version=version, output=output)

    def get_name(self) -> str:
        return f"store:{self.directory}"
