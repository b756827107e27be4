"""
Env command: print the resolved build environment.

Usage:
    envkit env                 # eval-able shell exports plus hook
    envkit env --format json   # full snapshot as JSON
    eval "$(envkit env)"
"""

import logging

from envkit.cli.utils import build_snapshot, write_output
from envkit.env.export import render

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run env command.

    Args:
        args: Parsed arguments with format and output

    Returns:
        Exit code (0 for success)
    """
    snapshot = build_snapshot(args)
    write_output(render(snapshot, args.format), getattr(args, "output", None))
    return 0
