"""Hook command: print only the shell hook of the resolved environment."""

from envkit.cli.utils import build_snapshot, write_output


def run(args) -> int:
    snapshot = build_snapshot(args)
    write_output(snapshot.shell_hook)
    return 0
