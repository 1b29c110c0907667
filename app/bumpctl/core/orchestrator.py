"""Update pipeline: discover → resolve → filter → update.

This module drives a bot run:
1. Discover the declared dependencies and drop ignored or non-registry ones
2. Resolve latest versions with one batched registry lookup
3. Keep outdated dependencies that have no open pull request yet
4. Update them one at a time: branch, upgrade, commit, push, open the PR

Errors in steps 1-3 abort the run. An error while updating one
dependency is logged and the run moves on to the next one.
"""

from __future__ import annotations

import logging

from bumpctl.core.changelog import ChangelogAggregator
from bumpctl.core.config import BotConfig
from bumpctl.core.errors import MalformedDescriptorError
from bumpctl.core.queue import UpdateQueue
from bumpctl.github.client import DuplicatePullRequestError, GitHubClient
from bumpctl.managers.base import PackageManager
from bumpctl.models.package import PackageDescriptor
from bumpctl.models.update import RunReport, UpdateResult, UpdateStatus
from bumpctl.vcs.git import GitClient

logger = logging.getLogger(__name__)


async def discover_packages(manager: PackageManager, ignore: list[str]) -> dict[str, PackageDescriptor]:
    """List declared dependencies and keep the updatable ones.

    Args:
        manager: Package manager to query.
        ignore: Name patterns to skip.

    Returns:
        Descriptors keyed by name, in discovery order. A name reported
        more than once keeps its first descriptor.

    Raises:
        CommandError: If the package manager cannot list dependencies.
    """
    packages: dict[str, PackageDescriptor] = {}
    for token in await manager.list_dependencies():
        try:
            package = PackageDescriptor.parse(token)
        except MalformedDescriptorError as e:
            logger.warning("%s", e)
            continue
        if not package.is_updatable(ignore):
            logger.debug("Not updatable: %s", token)
            continue
        packages.setdefault(package.name, package)
    logger.info("Discovered %d updatable dependencies", len(packages))
    return packages


async def resolve_packages(
    manager: PackageManager,
    packages: dict[str, PackageDescriptor],
) -> list[PackageDescriptor]:
    """Apply one batched registry lookup to the discovered descriptors.

    Returns:
        Descriptors that received a registry record, in discovery order.

    Raises:
        CommandError: If the registry lookup fails.
    """
    for record in await manager.lookup(list(packages)):
        package = packages.get(record.name)
        if package is None:
            logger.debug("Ignoring registry record for unknown package %s", record.name)
            continue
        package.apply_lookup(record)

    resolved: list[PackageDescriptor] = []
    for package in packages.values():
        if package.latest_version is None:
            logger.warning("No registry information for %s, skipping", package.name)
            continue
        resolved.append(package)
    return resolved


class UpdateOrchestrator:
    """Runs the dependency update pipeline for one repository.

    Attributes:
        config: Settings of this run.
    """

    def __init__(
        self,
        config: BotConfig,
        *,
        manager: PackageManager,
        git: GitClient,
        github: GitHubClient,
        changelog: ChangelogAggregator | None = None,
    ) -> None:
        self.config = config
        self._manager = manager
        self._git = git
        self._github = github
        self._changelog = changelog or ChangelogAggregator(github, tag_prefix=config.tag_prefix)

    async def run(self, *, dry_run: bool = False) -> RunReport:
        """Execute the full pipeline.

        Args:
            dry_run: Stop after filtering and report the planned updates.

        Returns:
            RunReport with one result per dependency that was (or would be) updated.

        Raises:
            BumpctlError: If discovery, resolution or the pull request search fails.
            aiohttp.ClientError: If GitHub cannot be reached during the search.
        """
        report = RunReport()

        discovered = await discover_packages(self._manager, self.config.ignore)
        report.discovered = len(discovered)

        resolved = await resolve_packages(self._manager, discovered)
        candidates = await self.select_updates(resolved, report)

        if dry_run:
            report.results = [UpdateResult(package=p, status=UpdateStatus.PLANNED) for p in candidates]
            return report

        queue: UpdateQueue[PackageDescriptor, UpdateResult] = UpdateQueue(self.update_one)
        for package in candidates:
            queue.put(package)
        report.results = await queue.run()
        return report

    async def select_updates(
        self,
        packages: list[PackageDescriptor],
        report: RunReport | None = None,
    ) -> list[PackageDescriptor]:
        """Keep outdated packages that have no open pull request.

        The search runs once per outdated package, sequentially.
        """
        selected: list[PackageDescriptor] = []
        for package in packages:
            if not package.is_update_needed():
                continue
            if report is not None:
                report.outdated += 1
            if await self.pull_request_exists(package):
                logger.info("Pull request already open: %s", package.pull_request_title)
                if report is not None:
                    report.skipped_existing += 1
                continue
            selected.append(package)
        return selected

    async def pull_request_exists(self, package: PackageDescriptor) -> bool:
        """Search the target repository for an open, labelled pull request."""
        query = (
            f'"{package.pull_request_title}" repo:{self.config.require_repository()} '
            f"is:pr is:open label:{self.config.label}"
        )
        return await self._github.search_issues_count(query) > 0

    async def update_one(self, package: PackageDescriptor) -> UpdateResult:
        """Branch, upgrade, commit, push and open the pull request for one package.

        Never raises for ordinary failures: they are logged and returned as
        a FAILED result so the next package can proceed. The branch and
        commit are left as they are.
        """
        title = package.pull_request_title
        branch = package.branch_name
        logger.info("Creating PR: %s", title)
        try:
            await self._git.create_branch_from_trunk(branch)
            await self._manager.upgrade(package.name)
            await self._git.stage_and_commit(self._manager.manifest_paths(), title)
            await self._git.push(branch, force=True)

            body = await self._changelog.build(package)
            pull_request = await self._github.create_pull_request(
                self.config.owner,
                self.config.repo,
                head=branch,
                base=self.config.trunk,
                title=title,
                body=body,
                draft=self.config.draft,
            )
            await self._github.add_labels(
                self.config.owner,
                self.config.repo,
                pull_request.number,
                [self.config.label],
            )
        except DuplicatePullRequestError:
            logger.info("Pull request for %s already exists", branch)
            return UpdateResult(package=package, status=UpdateStatus.ALREADY_EXISTS)
        except Exception as e:
            logger.error("Failed to update %s: %s", package.name, e, exc_info=True)
            return UpdateResult(package=package, status=UpdateStatus.FAILED, error=str(e))

        logger.info("PR #%d created: %s", pull_request.number, pull_request.html_url)
        return UpdateResult(
            package=package,
            status=UpdateStatus.CREATED,
            pull_request_number=pull_request.number,
            pull_request_url=pull_request.html_url,
        )
