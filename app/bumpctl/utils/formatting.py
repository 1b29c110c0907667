"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from bumpctl.core.theme import get_theme

if TYPE_CHECKING:
    from bumpctl.models.package import PackageDescriptor


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Outdated Dependencies") -> Table:
    """Create a pre-configured table for displaying dependencies.

    Args:
        title: Table title.

    Returns:
        Rich Table with Package, Current, Latest and Upstream columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Current", style="version.current")
    table.add_column("Latest")
    table.add_column("Upstream", style="muted", overflow="ellipsis")
    return table


def format_package_row(pkg: PackageDescriptor) -> tuple[str, str, str, str]:
    """Format a dependency as a table row.

    The latest version is highlighted only when it differs from the
    current one.
    """
    coordinates = pkg.resolve_upstream_coordinates()
    latest = pkg.latest_version or "?"
    outdated = pkg.latest_version is not None and pkg.is_update_needed()
    latest_style = "version.latest" if outdated else "muted"
    return (
        f"[package.name]{pkg.name}[/]",
        pkg.current_version,
        f"[{latest_style}]{latest}[/]",
        str(coordinates) if coordinates else "-",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
