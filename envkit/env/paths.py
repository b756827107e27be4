"""
Search path aggregation.

Builds colon-separated search paths (LD_LIBRARY_PATH, LIBCLANG_PATH,
PKG_CONFIG_PATH, tool bin directories) from package handles. Order is
significant: the dynamic loader searches entries left to right, so the
output keeps the input order of the handles.
"""

from typing import Sequence

from envkit.packages.base import PackageHandle

PATH_SEPARATOR = ":"


def aggregate(
    handles: Sequence[PackageHandle],
    subdir: str = "lib",
    separator: str = PATH_SEPARATOR,
) -> str:
    """
    Join ``<root>/<subdir>`` of each handle into one search path.

    Args:
        handles: Package handles in search order
        subdir: Subdirectory of each root to include (default: 'lib')
        separator: Path list separator (default: ':')

    Returns:
        Joined search path; empty string for no handles

    Example:
        >>> aggregate([PackageHandle("a", Path("/pkg/a"))])
        '/pkg/a/lib'
    """
    return separator.join(f"{handle.root}/{subdir}" for handle in handles)
