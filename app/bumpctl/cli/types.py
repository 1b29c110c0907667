"""Shared option types and helpers for CLI commands.

Environment variables are only read here, through Typer's ``envvar``
support; everything below the CLI receives an explicit BotConfig.
"""

from pathlib import Path
from typing import Annotated, Any

import typer

from bumpctl.core.config import BotConfig, load_bot_config
from bumpctl.core.errors import CommandError
from bumpctl.core.paths import get_default_config_path
from bumpctl.managers.yarn import YarnManager
from bumpctl.utils.shell import CommandRunner

ConfigPathOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Configuration file (default: ~/.config/bumpctl/config.toml if present).",
        dir_okay=False,
    ),
]
RepositoryOption = Annotated[
    str | None,
    typer.Option(
        "--repository",
        "-r",
        envvar="GITHUB_REPOSITORY",
        help="Target repository as owner/repo.",
    ),
]
TokenOption = Annotated[
    str | None,
    typer.Option(
        "--token",
        envvar="GITHUB_TOKEN",
        help="GitHub API token.",
        show_default=False,
    ),
]
WorkspaceOption = Annotated[
    Path | None,
    typer.Option(
        "--workspace",
        "-w",
        envvar="GITHUB_WORKSPACE",
        help="Root of the git checkout.",
        file_okay=False,
    ),
]
DirectoryOption = Annotated[
    Path | None,
    typer.Option(
        "--directory",
        "-d",
        help="Yarn project directory, relative to the workspace.",
    ),
]
IgnoreOption = Annotated[
    list[str] | None,
    typer.Option(
        "--ignore",
        "-i",
        help="Dependency name pattern to skip (repeatable, comma separated).",
    ),
]
TrunkOption = Annotated[
    str | None,
    typer.Option(
        "--trunk",
        help="Base branch for update branches and pull requests.",
    ),
]


def build_config(
    config_path: Path | None,
    *,
    repository: str | None = None,
    token: str | None = None,
    workspace: Path | None = None,
    directory: Path | None = None,
    ignore: list[str] | None = None,
    trunk: str | None = None,
) -> BotConfig:
    """Merge the config file with command-line options.

    An explicit ``--config`` must exist; the default path is optional.

    Raises:
        ConfigError: If the configuration is missing or invalid.
    """
    overrides: dict[str, Any] = {
        "repository": repository,
        "token": token,
        "workspace": workspace,
        "directory": directory,
        "trunk": trunk,
    }
    if ignore:
        overrides["ignore"] = [p for value in ignore for p in value.split(",")]

    if config_path is not None:
        return load_bot_config(config_path, overrides, required=True)
    return load_bot_config(get_default_config_path(), overrides)


def create_manager(config: BotConfig) -> YarnManager:
    """Create the Yarn adapter for the configured project directory.

    Raises:
        CommandError: If yarn is not on the PATH.
    """
    manager = YarnManager(CommandRunner(config.client_directory), repository_root=config.workspace)
    if not manager.is_available():
        raise CommandError("yarn not found on PATH", args=[manager.name])
    return manager
