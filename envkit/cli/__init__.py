"""
Command-line interface for envkit.

Usage: envkit [--config PATH] [--project-root PATH] COMMAND
"""

from envkit.cli.parser import CLI, main

__all__ = ["CLI", "main"]
