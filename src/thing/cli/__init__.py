"""
CLI module for Thing.

Provides the command-line interface using Click.
"""

from thing.cli.main import cli, main

__all__ = ["main", "cli"]
