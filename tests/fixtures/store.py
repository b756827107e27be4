"""Reusable package store fixtures for testing.

This module provides pytest fixtures that create content-addressed store
directories and project trees, so resolution can be tested without a real
package manager installation.
"""

import hashlib
import pytest
from pathlib import Path
from typing import Optional

# nix base32 alphabet: digits and lowercase letters without e, o, u, t
_BASE32 = "0123456789abcdfghijklmnpqrsvwxyz"


def fake_hash(seed: str) -> str:
    """Deterministic 32-character store hash for a seed string."""
    digest = hashlib.sha256(seed.encode()).digest()
    return "".join(_BASE32[b % 32] for b in digest[:32])


def make_store_entry(
    store: Path,
    pname: str,
    version: str,
    output: Optional[str] = None,
    subdirs=("lib", "include"),
) -> Path:
    """
    Create ``<store>/<hash>-<pname>-<version>[-<output>]`` with subdirectories.

    Returns:
        Path to the created package root
    """
    name = f"{pname}-{version}"
    if output:
        name += f"-{output}"
    root = store / f"{fake_hash(name)}-{name}"
    root.mkdir(parents=True)
    for subdir in subdirs:
        (root / subdir).mkdir(parents=True)
    return root


@pytest.fixture
def mock_store(tmp_path) -> Path:
    """
    Create a mock store holding the graphics application's dependencies.

    Packages:
        libxkbcommon-1.7.0, libGL-1.7.0, vulkan-loader-1.3.290.0,
        vulkan-headers-1.3.290.0, glibc-2.39-52-dev, glib-2.80.4 (+ -dev),
        clang-19.1.7-lib

    Example:
        def test_lookup(mock_store):
            assert any(p.name.endswith("-vulkan-loader-1.3.290.0")
                       for p in mock_store.iterdir())
    """
    store = tmp_path / "store"
    store.mkdir()

    make_store_entry(store, "libxkbcommon", "1.7.0")
    make_store_entry(store, "libGL", "1.7.0")
    make_store_entry(store, "vulkan-loader", "1.3.290.0")
    make_store_entry(store, "vulkan-headers", "1.3.290.0", subdirs=("include",))
    make_store_entry(store, "glibc", "2.39-52", output="dev", subdirs=("include",))
    make_store_entry(store, "glib", "2.80.4", subdirs=("lib/glib-2.0/include",))
    make_store_entry(
        store, "glib", "2.80.4", output="dev", subdirs=("include/glib-2.0",)
    )
    make_store_entry(
        store, "clang", "19.1.7", output="lib", subdirs=("lib/clang/19/include",)
    )

    return store


@pytest.fixture
def rust_toolchain_file(tmp_path) -> Path:
    """Create a rust-toolchain.toml pinning nightly-2024-01-01."""
    path = tmp_path / "project" / "rust-toolchain.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('[toolchain]\nchannel = "nightly-2024-01-01"\n')
    return path


@pytest.fixture
def mock_project(tmp_path, mock_store, rust_toolchain_file) -> Path:
    """
    Create a project with envkit.yaml pointing at the mock store.

    The configuration mirrors the graphics application's development shell.
    """
    project = rust_toolchain_file.parent
    (project / "envkit.yaml").write_text(
        f"""
version: 1
descriptor: rust-toolchain.toml
platform_triple: x86_64-unknown-linux-gnu
store:
  directory: {mock_store}
library_path:
  - libxkbcommon
  - libGL
  - vulkan-loader
bindgen:
  include_packages:
    - glibc.dev
    - vulkan-headers
  extra_flags:
    - '-I"{{{{ pkg("clang.lib").root }}}}/lib/clang/{{{{ pkg("clang.lib").version.split(".")[0] }}}}/include"'
    - '-I"{{{{ pkg("glib.dev").root }}}}/include/glib-2.0"'
    - '-I{{{{ pkg("glib.out").root }}}}/lib/glib-2.0/include/'
rustflags:
  link_packages: []
libclang: clang.lib
"""
    )
    return project
