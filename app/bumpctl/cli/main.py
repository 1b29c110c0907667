"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from bumpctl import __version__
from bumpctl.cli.commands import config, outdated, run
from bumpctl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="bumpctl",
    help="Open one pull request per outdated Yarn dependency.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"bumpctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    INFO by default, DEBUG with --verbose, WARNING with --quiet.
    """
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=verbose)],
        force=True,
    )
    # aiohttp and asyncio are chatty at DEBUG
    for noisy in ("asyncio", "aiohttp"):
        logging.getLogger(noisy).setLevel(max(level, logging.INFO))


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """bumpctl - Dependency update pull requests for Yarn projects.

    Finds outdated npm dependencies, upgrades each on its own branch and
    opens a pull request with the upstream changelog.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(run.app, name="run")
app.add_typer(outdated.app, name="outdated")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
