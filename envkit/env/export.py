"""
Snapshot serialisation for external launchers.

Formats:
    sh      POSIX ``export`` lines followed by the shell hook; eval-able
    json    the full snapshot as a JSON object
    dotenv  ``KEY="value"`` lines for tools reading .env files (no hook,
            one line per variable)
"""

import json
import shlex

from envkit.env.assembler import EnvironmentSnapshot

FORMATS = ("sh", "json", "dotenv")


def to_shell(snapshot: EnvironmentSnapshot) -> str:
    """
    Render ``export`` statements, then the hook.

    The hook must run after RUSTC_VERSION is exported, so it always comes
    last.
    """
    lines = [
        f"export {name}={shlex.quote(value)}"
        for name, value in snapshot.exported().items()
    ]
    return "\n".join(lines) + "\n" + snapshot.shell_hook


def to_json(snapshot: EnvironmentSnapshot) -> str:
    return json.dumps(snapshot.to_dict(), indent=2) + "\n"


def to_dotenv(snapshot: EnvironmentSnapshot) -> str:
    lines = []
    for name, value in snapshot.exported().items():
        escaped = (
            value.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\r", "\\r")
        )
        lines.append(f'{name}="{escaped}"')
    return "\n".join(lines) + "\n"


def render(snapshot: EnvironmentSnapshot, fmt: str) -> str:
    """
    Render a snapshot in one of :data:`FORMATS`.

    Raises:
        ValueError: If the format is unknown
    """
    renderers = {"sh": to_shell, "json": to_json, "dotenv": to_dotenv}
    if fmt not in renderers:
        raise ValueError(f"Unknown format: {fmt} (expected one of {list(FORMATS)})")
    return renderers[fmt](snapshot)
