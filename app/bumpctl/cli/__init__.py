"""Command-line interface for bumpctl.

Exposes the Typer application used by the ``bumpctl`` entry point.
"""

from bumpctl.cli.main import app

__all__ = ["app"]
