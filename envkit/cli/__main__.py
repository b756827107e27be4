"""
Entry point for running envkit CLI as a module.

Usage: python -m envkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
