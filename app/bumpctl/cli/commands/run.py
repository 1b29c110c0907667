"""Run command implementation.

Executes the full update pipeline against the configured repository.
"""

import asyncio
from typing import Annotated

import aiohttp
import typer

from bumpctl.cli.display import create_results_table, print_run_summary
from bumpctl.cli.types import (
    ConfigPathOption,
    DirectoryOption,
    IgnoreOption,
    RepositoryOption,
    TokenOption,
    TrunkOption,
    WorkspaceOption,
    build_config,
    create_manager,
)
from bumpctl.core.config import BotConfig
from bumpctl.core.errors import BumpctlError
from bumpctl.core.orchestrator import UpdateOrchestrator
from bumpctl.github.client import GitHubClient
from bumpctl.models.update import RunReport
from bumpctl.utils.formatting import console, print_error, print_info
from bumpctl.vcs.git import GitClient

app = typer.Typer(
    help="Open pull requests for outdated dependencies.",
    invoke_without_command=True,
)


async def run_pipeline(config: BotConfig, *, dry_run: bool = False) -> RunReport:
    """Wire the collaborators together and run the orchestrator.

    The blocking repository checks run in a worker thread.

    Raises:
        BumpctlError: On configuration, repository, discovery or search failures.
        aiohttp.ClientError: If GitHub cannot be reached.
    """
    config.require_repository()
    token = config.require_token()

    git = GitClient(
        config.workspace,
        trunk=config.trunk,
        author_name=config.author_name,
        author_email=config.author_email,
    )
    await asyncio.to_thread(git.open)

    async with GitHubClient(token, api_url=config.api_url) as github:
        orchestrator = UpdateOrchestrator(
            config,
            manager=create_manager(config),
            git=git,
            github=github,
        )
        return await orchestrator.run(dry_run=dry_run)


@app.callback(invoke_without_command=True)
def run_updates(
    config_path: ConfigPathOption = None,
    repository: RepositoryOption = None,
    token: TokenOption = None,
    workspace: WorkspaceOption = None,
    directory: DirectoryOption = None,
    ignore: IgnoreOption = None,
    trunk: TrunkOption = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show which pull requests would be opened without changing anything.",
        ),
    ] = False,
) -> None:
    """Bump every outdated dependency in its own pull request.

    Per-dependency failures are reported but do not change the exit
    status; failures while discovering dependencies or talking to
    GitHub exit with status 1.

    Examples:
        bumpctl run                              # Use GITHUB_* environment
        bumpctl run -r acme/webapp -d frontend   # Explicit repository and directory
        bumpctl run --ignore react --ignore '^@acme/'
        bumpctl run --dry-run                    # Only list planned pull requests
    """
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
        report = asyncio.run(run_pipeline(config, dry_run=dry_run))
    except (BumpctlError, aiohttp.ClientError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if report.results:
        if dry_run:
            print_info(f"Dry run: {len(report.results)} pull request(s) would be opened.")
        console.print(create_results_table(report.results))
    print_run_summary(report)
