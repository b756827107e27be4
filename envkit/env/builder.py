"""
Environment build pipeline.

Runs one environment build end to end:

    descriptor (read once) -> package resolution -> path aggregation
    -> flag composition -> assembly

Any failure aborts the build; no partial snapshot is ever returned.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Tuple

from jinja2 import Environment, StrictUndefined, TemplateError

from envkit.config.parser import EnvKitConfig, StoreConfig
from envkit.core.directory import ToolchainLocations
from envkit.core.exceptions import ConfigError
from envkit.core.platform import host_triple
from envkit.env.assembler import EnvironmentSnapshot, assemble
from envkit.env.flags import FlagSpec, include_flag, link_search_flag
from envkit.env.paths import aggregate
from envkit.packages.base import (
    ChainedPackageStore,
    PackageHandle,
    PackageStore,
    resolve_all,
)
from envkit.packages.stores import MappingPackageStore, StoreDirectoryPackageStore
from envkit.toolchain.descriptor import DescriptorReader

logger = logging.getLogger(__name__)

LIBCLANG_PATH = "LIBCLANG_PATH"
PKG_CONFIG_PATH = "PKG_CONFIG_PATH"


@dataclass(frozen=True)
class ResolvedPackages:
    """Handles for every package list declared in the configuration."""

    library_path: Tuple[PackageHandle, ...]
    include: Tuple[PackageHandle, ...]
    link: Tuple[PackageHandle, ...]
    tools: Tuple[PackageHandle, ...] = ()
    build_inputs: Tuple[PackageHandle, ...] = ()
    libclang: Optional[PackageHandle] = None


def create_store(store_config: StoreConfig, project_root: Path) -> PackageStore:
    """
    Build the package store described by the configuration.

    Explicit package roots take precedence over the store directory. Relative
    roots are taken from the project root.
    """
    stores: List[PackageStore] = []

    if store_config.packages:
        packages = {}
        for name, value in store_config.packages.items():
            if isinstance(value, dict):
                root = project_path(project_root, value["root"])
                value = dict(value, root=str(root))
            else:
                value = project_path(project_root, value)
            packages[name] = value
        stores.append(MappingPackageStore(packages))

    if store_config.directory:
        stores.append(
            StoreDirectoryPackageStore(
                project_path(project_root, store_config.directory)
            )
        )

    if not stores:
        raise ConfigError("No package store configured")
    if len(stores) == 1:
        return stores[0]
    return ChainedPackageStore(stores)


def project_path(project_root: Path, value: str) -> Path:
    """Expand ``~`` and anchor relative paths at the project root."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = Path(project_root) / path
    return path


def resolve_packages(config: EnvKitConfig, store: PackageStore) -> ResolvedPackages:
    """
    Resolve every package referenced by the configuration, in declared order.

    Raises:
        ResolutionError: On the first unresolvable name
    """
    libclang = store.resolve(config.libclang) if config.libclang else None
    return ResolvedPackages(
        library_path=tuple(resolve_all(store, config.library_path)),
        include=tuple(resolve_all(store, config.bindgen.include_packages)),
        link=tuple(resolve_all(store, config.rustflags.link_packages)),
        tools=tuple(resolve_all(store, config.tools)),
        build_inputs=tuple(resolve_all(store, config.build_inputs)),
        libclang=libclang,
    )


def render_literal_flags(
    flags: List[str], resolve: Callable[[str], PackageHandle]
) -> Tuple[str, ...]:
    """
    Expand package references inside literal flags.

    Flags may use ``{{ pkg("name").root }}`` and ``{{ pkg("name").version }}``
    to point at paths inside packages that do not follow the
    ``<root>/include`` layout.

    Raises:
        ConfigError: If a flag is not a valid template
        ResolutionError: If a referenced package cannot be resolved
    """
    jinja_env = Environment(undefined=StrictUndefined, autoescape=False)
    rendered = []
    for flag in flags:
        try:
            rendered.append(jinja_env.from_string(flag).render(pkg=resolve))
        except TemplateError as e:
            raise ConfigError(f"Invalid flag template {flag!r}: {e}") from e
    return tuple(rendered)


def build_environment(
    config: EnvKitConfig,
    project_root: Path,
    environ: Mapping[str, str],
    store: Optional[PackageStore] = None,
    home: Optional[Path] = None,
    reader: Optional[DescriptorReader] = None,
) -> EnvironmentSnapshot:
    """
    Build the environment snapshot for a project.

    Args:
        config: Parsed envkit.yaml
        project_root: Directory relative paths are resolved against
        environ: Environment consulted for CARGO_HOME/RUSTUP_HOME overrides
        store: Package store (default: built from config.store)
        home: Home directory for default locations (default: Path.home())
        reader: Descriptor reader (default: reads config.descriptor)

    Returns:
        EnvironmentSnapshot

    Raises:
        ParseError, MissingFieldError: If the descriptor is invalid
        ResolutionError: If a package cannot be resolved
        ConfigError: If the configuration is inconsistent
    """
    project_root = Path(project_root)
    if reader is None:
        reader = DescriptorReader(project_path(project_root, config.descriptor))
    descriptor = reader.get()

    if store is None:
        store = create_store(config.store, project_root)

    packages = resolve_packages(config, store)

    includes = FlagSpec(
        packages=packages.include,
        template=include_flag,
        extras=render_literal_flags(config.bindgen.extra_flags, store.resolve),
    )
    links = FlagSpec(
        packages=packages.link,
        template=link_search_flag,
        extras=render_literal_flags(config.rustflags.extra_flags, store.resolve),
    )

    extra_vars = {}
    if packages.libclang is not None:
        extra_vars[LIBCLANG_PATH] = aggregate([packages.libclang])
    if packages.build_inputs:
        extra_vars[PKG_CONFIG_PATH] = aggregate(
            packages.build_inputs, subdir="lib/pkgconfig"
        )
    for name in config.env:
        if name in extra_vars:
            raise ConfigError(
                f"env.{name} conflicts with the value computed from the "
                "package configuration"
            )
    extra_vars.update(config.env)

    triple = config.platform_triple or host_triple()
    logger.debug(f"Assembling environment for {descriptor.channel}-{triple}")

    return assemble(
        descriptor,
        aggregate(packages.library_path),
        includes.compose(),
        links.compose(),
        locations=ToolchainLocations.from_environ(environ, home),
        platform_triple=triple,
        extra_vars=extra_vars,
        tool_path=aggregate(packages.tools, subdir="bin"),
    )
