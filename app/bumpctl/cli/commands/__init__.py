"""CLI commands for bumpctl.

This package contains all subcommand implementations.
"""

from bumpctl.cli.commands import config, outdated, run

__all__ = ["config", "outdated", "run"]
