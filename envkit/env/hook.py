"""
Shell hook generator.

Renders the startup script the consuming shell runs before builds. The
script extends PATH with the cargo binary directory and with the bin
directory of the rustup toolchain pinned by the descriptor, so that the
pinned ``rustc`` is found without rustup proxies. Bin directories of
configured tool packages are appended after them.
"""

import logging
import shlex
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from envkit.core.directory import ToolchainLocations

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "shell_hook.sh.j2"


class ShellHookGenerator:
    """
    Render the shell hook from a Jinja2 template.

    Args:
        template_dir: Directory containing templates (default: built-in)
        template_name: Template file to render
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        template_name: str = DEFAULT_TEMPLATE,
    ):
        self.template_dir = (
            Path(template_dir)
            if template_dir
            else Path(__file__).parent / "templates"
        )
        self.template_name = template_name
        self._jinja_env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._jinja_env.filters["shquote"] = lambda value: shlex.quote(str(value))

    def render(
        self,
        channel: str,
        triple: str,
        locations: ToolchainLocations,
        tool_path: str = "",
    ) -> str:
        """
        Render the hook for a toolchain channel.

        Args:
            channel: Toolchain channel from the descriptor
            triple: Host target triple naming the rustup toolchain directory
            locations: Resolved cargo/rustup homes
            tool_path: Colon-joined tool bin directories appended to PATH last

        Returns:
            Shell script text
        """
        template = self._jinja_env.get_template(self.template_name)
        logger.debug(f"Rendering {self.template_name} for {channel}-{triple}")
        return template.render(
            channel=channel,
            triple=triple,
            cargo_bin=locations.cargo_bin_dir(),
            toolchain_bin=locations.toolchain_bin_dir(channel, triple),
            tool_path=tool_path,
        )
