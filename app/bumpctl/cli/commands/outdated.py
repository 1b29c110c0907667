"""Outdated command implementation.

Lists dependencies whose registry version differs from the declared one,
without touching git or GitHub.
"""

import asyncio
import json
from enum import Enum
from typing import Annotated

import typer

from bumpctl.cli.display import create_packages_table
from bumpctl.cli.types import (
    ConfigPathOption,
    DirectoryOption,
    IgnoreOption,
    WorkspaceOption,
    build_config,
    create_manager,
)
from bumpctl.core.errors import BumpctlError
from bumpctl.core.orchestrator import discover_packages, resolve_packages
from bumpctl.managers.base import PackageManager
from bumpctl.models.package import PackageDescriptor
from bumpctl.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="List outdated dependencies.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


async def collect_packages(manager: PackageManager, ignore: list[str]) -> list[PackageDescriptor]:
    """Discover and resolve the updatable dependencies."""
    discovered = await discover_packages(manager, ignore)
    return await resolve_packages(manager, discovered)


@app.callback(invoke_without_command=True)
def list_outdated(
    config_path: ConfigPathOption = None,
    workspace: WorkspaceOption = None,
    directory: DirectoryOption = None,
    ignore: IgnoreOption = None,
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Include dependencies that are up to date.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show declared dependencies with their latest registry version.

    Examples:
        bumpctl outdated                 # Outdated dependencies as a table
        bumpctl outdated --all           # Every updatable dependency
        bumpctl outdated --format json   # Machine-readable output
    """
    try:
        config = build_config(config_path, workspace=workspace, directory=directory, ignore=ignore)
        packages = asyncio.run(collect_packages(create_manager(config), config.ignore))
    except (BumpctlError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not show_all:
        packages = [p for p in packages if p.is_update_needed()]

    if output_format == OutputFormat.JSON:
        data = [
            {
                "name": p.name,
                "current": p.current_version,
                "latest": p.latest_version,
                "branch": p.branch_name,
            }
            for p in packages
        ]
        console.print_json(json.dumps(data))
        return

    if not packages:
        print_success("All dependencies are up to date.")
        return

    title = "Dependencies" if show_all else "Outdated Dependencies"
    console.print(create_packages_table(packages, title))
