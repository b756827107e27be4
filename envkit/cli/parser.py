"""
envkit CLI argument parser.

This module implements the command-line interface for envkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from envkit import __version__
from envkit.env.export import FORMATS

logger = logging.getLogger(__name__)


class CLI:
    """envkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="envkit",
            description="envkit - resolve build environments from store packages",
            epilog='Use "envkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"envkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./envkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_env_command(subparsers)
        self._add_hook_command(subparsers)
        self._add_doctor_command(subparsers)

        return parser

    def _add_env_command(self, subparsers):
        """Add 'env' subcommand."""
        parser = subparsers.add_parser(
            "env",
            help="Print the resolved build environment",
            description="Resolve packages and print the environment snapshot",
        )
        parser.add_argument(
            "--format",
            choices=list(FORMATS),
            default="sh",
            help="Output format (default: sh)",
        )
        parser.add_argument(
            "--output",
            "-o",
            type=Path,
            metavar="FILE",
            help="Write to FILE instead of stdout",
        )

    def _add_hook_command(self, subparsers):
        """Add 'hook' subcommand."""
        subparsers.add_parser(
            "hook",
            help="Print the shell hook",
            description="Print only the startup script extending PATH",
        )

    def _add_doctor_command(self, subparsers):
        """Add 'doctor' subcommand."""
        parser = subparsers.add_parser(
            "doctor",
            help="Diagnose environment issues",
            description="Check the descriptor and every configured package",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Treat warnings (e.g. toolchain not installed) as failures",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "env": "envkit.cli.commands.env",
            "hook": "envkit.cli.commands.hook",
            "doctor": "envkit.cli.commands.doctor",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
