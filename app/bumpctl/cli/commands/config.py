"""Config command implementation.

Shows the effective configuration after merging the config file and
command-line options.
"""

import typer

from bumpctl.cli.types import (
    ConfigPathOption,
    DirectoryOption,
    IgnoreOption,
    RepositoryOption,
    TokenOption,
    TrunkOption,
    WorkspaceOption,
    build_config,
)
from bumpctl.core.errors import ConfigError
from bumpctl.core.paths import get_default_config_path
from bumpctl.utils.formatting import console, print_error

app = typer.Typer(
    help="Inspect bumpctl configuration.",
    no_args_is_help=True,
)


@app.command()
def show(
    config_path: ConfigPathOption = None,
    repository: RepositoryOption = None,
    token: TokenOption = None,
    workspace: WorkspaceOption = None,
    directory: DirectoryOption = None,
    ignore: IgnoreOption = None,
    trunk: TrunkOption = None,
) -> None:
    """Print the effective configuration (the token is masked)."""
    try:
        config = build_config(
            config_path,
            repository=repository,
            token=token,
            workspace=workspace,
            directory=directory,
            ignore=ignore,
            trunk=trunk,
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print_json(config.model_dump_json())


@app.command()
def path() -> None:
    """Print the default configuration file path."""
    console.print(str(get_default_config_path()), highlight=False, soft_wrap=True)
