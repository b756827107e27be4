"""
Doctor command for diagnosing environment issues.

Checks that the toolchain descriptor parses, that every configured package
resolves to an existing installation root with the subdirectories the
environment points at, and that the pinned rustup toolchain is installed.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from envkit.cli.utils import load_project
from envkit.config.parser import EnvKitConfig
from envkit.core.directory import ToolchainLocations
from envkit.core.exceptions import EnvKitError
from envkit.core.platform import host_triple
from envkit.env.builder import project_path, create_store, resolve_packages
from envkit.packages.base import PackageHandle
from envkit.toolchain.descriptor import ToolchainDescriptor, read

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of a health check."""

    name: str
    passed: bool
    message: str
    warning: bool = False  # failed, but does not block builds
    fix_command: Optional[str] = None


class EnvironmentChecker:
    """Run health checks for one project configuration."""

    def __init__(
        self,
        config: EnvKitConfig,
        project_root: Path,
        environ: Mapping[str, str],
        home: Optional[Path] = None,
    ):
        self.config = config
        self.project_root = Path(project_root)
        self.environ = environ
        self.home = home
        self.descriptor: Optional[ToolchainDescriptor] = None

    def check_descriptor(self) -> CheckResult:
        """Check the toolchain descriptor parses."""
        path = project_path(self.project_root, self.config.descriptor)
        try:
            descriptor = read(path)
        except EnvKitError as e:
            return CheckResult(name="Toolchain descriptor", passed=False, message=str(e))
        self.descriptor = descriptor
        return CheckResult(
            name="Toolchain descriptor",
            passed=True,
            message=f"{path.name} pins {descriptor.channel}",
        )

    def check_packages(self) -> List[CheckResult]:
        """Check every package resolves and provides the directories used."""
        try:
            store = create_store(self.config.store, self.project_root)
            packages = resolve_packages(self.config, store)
        except EnvKitError as e:
            return [CheckResult(name="Packages", passed=False, message=str(e))]

        results = []
        for handle in packages.library_path:
            results.append(self._check_dir(handle, "lib"))
        for handle in packages.include:
            results.append(self._check_dir(handle, "include"))
        for handle in packages.link:
            results.append(self._check_dir(handle, "lib"))
        if packages.libclang is not None:
            results.append(self._check_dir(packages.libclang, "lib"))
        for handle in packages.tools:
            results.append(self._check_dir(handle, "bin"))
        for handle in packages.build_inputs:
            results.append(self._check_dir(handle, "lib/pkgconfig"))
        return results

    def _check_dir(self, handle: PackageHandle, subdir: str) -> CheckResult:
        name = f"Package {handle.name}"
        if not handle.root.is_dir():
            return CheckResult(
                name=name, passed=False, message=f"root not found: {handle.root}"
            )
        if not (handle.root / subdir).is_dir():
            return CheckResult(
                name=name,
                passed=False,
                message=f"{handle.root} has no {subdir}/ directory",
            )
        return CheckResult(name=name, passed=True, message=str(handle.root))

    def check_toolchain(self, descriptor: ToolchainDescriptor) -> CheckResult:
        """Check the pinned toolchain is installed under rustup home."""
        triple = self.config.platform_triple or host_triple()
        locations = ToolchainLocations.from_environ(self.environ, self.home)
        bin_dir = locations.toolchain_bin_dir(descriptor.channel, triple)
        if bin_dir.is_dir():
            return CheckResult(name="Rust toolchain", passed=True, message=str(bin_dir))
        return CheckResult(
            name="Rust toolchain",
            passed=False,
            warning=True,
            message=f"{descriptor.channel}-{triple} not installed ({bin_dir})",
            fix_command=f"rustup toolchain install {descriptor.channel}",
        )

    def run_all_checks(self) -> List[CheckResult]:
        """Run all health checks."""
        results = [self.check_descriptor()]
        if self.descriptor is not None:
            results.append(self.check_toolchain(self.descriptor))
        results.extend(self.check_packages())
        return results


def run(args) -> int:
    """
    Run doctor command.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Exit code (0 if no check failed, 1 otherwise)
    """
    quiet = args.quiet
    strict = getattr(args, "strict", False)

    config, project_root = load_project(args)
    checker = EnvironmentChecker(config, project_root, dict(os.environ))

    if not quiet:
        print("Running envkit diagnostics...\n")

    failed = 0
    warnings = 0
    for result in checker.run_all_checks():
        if result.passed:
            if not quiet:
                print(f"[OK]   {result.name}: {result.message}")
            logger.debug(f"Check passed: {result.name}")
            continue

        if result.warning and not strict:
            warnings += 1
            if not quiet:
                print(f"[WARN] {result.name}: {result.message}")
            logger.warning(f"{result.name}: {result.message}")
        else:
            failed += 1
            print(f"[FAIL] {result.name}: {result.message}")

        if result.fix_command and not quiet:
            print(f"       Fix: {result.fix_command}")

    if not quiet:
        print(f"\n{failed} failed, {warnings} warning(s)")

    return 1 if failed else 0
