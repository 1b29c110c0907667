"""Changelog aggregation for update pull requests.

One pull request may jump across several releases. For every version
between the current and the latest one, this module fetches the upstream
release notes and the commits since the previous version, then renders
them newest first into the pull request body.
"""

from __future__ import annotations

import asyncio
import html
import logging
import re

import aiohttp
import markdown
from pydantic import ValidationError

from bumpctl.core.errors import VersionNotFoundError
from bumpctl.github.client import GitHubAPIError, GitHubClient
from bumpctl.github.models import CommitSummary, Comparison, Release
from bumpctl.models.changelog import ChangelogEntry
from bumpctl.models.package import PackageDescriptor, UpstreamCoordinates

logger = logging.getLogger(__name__)

# Commits listed per version before collapsing into a link to the comparison
MAX_DISPLAYED_COMMITS = 6

# Errors that leave a version without a section instead of failing the update
FETCH_ERRORS = (GitHubAPIError, aiohttp.ClientError, TimeoutError, ValidationError)

_ISSUE_REFERENCE = re.compile(r"#(\d+)")


class ChangelogAggregator:
    """Builds the combined changelog document for one dependency update.

    Attributes:
        tag_prefix: Prefix turning a version into its release tag (``v``).
    """

    def __init__(self, github: GitHubClient, *, tag_prefix: str = "v") -> None:
        self._github = github
        self.tag_prefix = tag_prefix

    async def build(self, package: PackageDescriptor) -> str | None:
        """Render the changelog for every version ``package`` jumps across.

        Returns:
            Markdown document, or None if the package has no GitHub
            upstream or its version walk cannot be computed.
        """
        if not package.has_upstream_repository():
            return None
        coordinates = package.resolve_upstream_coordinates()
        if coordinates is None:
            logger.debug("No GitHub coordinates for %s", package.name)
            return None

        try:
            versions = package.later_versions()
        except VersionNotFoundError as e:
            logger.warning("Skipping changelog: %s", e)
            return None

        entries = await self.collect(coordinates, package.current_version, versions)
        blocks = "\n".join(render_entry(entry) for entry in reversed(entries)).strip()
        return f"# {package.pull_request_title}\n\n{blocks}\n"

    async def collect(
        self,
        coordinates: UpstreamCoordinates,
        current: str,
        versions: list[str],
    ) -> list[ChangelogEntry]:
        """Fetch one entry per version transition, oldest first.

        Transitions are fetched one after another; the release and the
        comparison of a single transition are fetched concurrently.
        """
        entries: list[ChangelogEntry] = []
        previous = current
        for version in versions:
            entries.append(await self._fetch_entry(coordinates, previous, version))
            previous = version
        return entries

    async def _fetch_entry(
        self,
        coordinates: UpstreamCoordinates,
        previous: str,
        version: str,
    ) -> ChangelogEntry:
        """Fetch release and comparison for ``previous`` -> ``version``.

        A failure of either request cancels the other and yields an entry
        without data, which renders as an empty section.
        """
        owner, repo = coordinates.owner, coordinates.repo
        tag = f"{self.tag_prefix}{version}"
        base = f"{self.tag_prefix}{previous}"
        failure: BaseException | None = None
        try:
            async with asyncio.TaskGroup() as group:
                release = group.create_task(self._github.get_release_by_tag(owner, repo, tag))
                comparison = group.create_task(self._github.compare_commits(owner, repo, base, tag))
        except* FETCH_ERRORS as errors:
            failure = errors.exceptions[0]
        if failure is not None:
            logger.info("No changelog for %s/%s %s: %r", owner, repo, tag, failure)
            return ChangelogEntry(version=version, previous=previous)
        return ChangelogEntry(
            version=version,
            previous=previous,
            release=release.result(),
            comparison=comparison.result(),
        )


def render_entry(entry: ChangelogEntry) -> str:
    """Render one version transition, or an empty string if data is missing."""
    if entry.release is None or entry.comparison is None:
        return ""

    release, comparison = entry.release, entry.comparison
    title = release.tag_name.removeprefix("v")
    date = f" ({format_date(release)})" if release.published_at else ""
    notes = markdown.markdown(release.body or "")

    return f"""
## {release.tag_name}

<details>
<summary>Changelog</summary>
<blockquote>
<h2><a href="{comparison.html_url}">{title}</a>{date}</h2>
{notes}
</blockquote>
</details>
<details>
<summary>Commits</summary>
<ul>
{render_commits(comparison)}
</ul>
</details>

"""


def format_date(release: Release) -> str:
    """Format a release's publish date as ``M/D/YYYY``."""
    published = release.published_at
    if published is None:
        return ""
    return f"{published.month}/{published.day}/{published.year}"


def render_commits(comparison: Comparison) -> str:
    """Render the first commits as list items plus an overflow link."""
    commits = comparison.commits
    items = "\n".join(
        f'<li><a href="{commit.html_url}">{commit.sha[:8]}</a> {escape_commit_subject(commit)}</li>'
        for commit in commits[:MAX_DISPLAYED_COMMITS]
    )
    if max(len(commits), comparison.total_commits) > MAX_DISPLAYED_COMMITS:
        items += f'\n<a href="{comparison.html_url}">...</a>'
    return items


def escape_commit_subject(commit: CommitSummary) -> str:
    """HTML-escape a commit subject and link its first ``#123`` reference.

    The link is rooted at the repository's web URL, derived from the
    commit URL (``https://github.com/o/r/commit/<sha>``).
    """
    base_url = commit.html_url.split("/commit", 1)[0]
    subject = html.escape(commit.subject, quote=False)
    return _ISSUE_REFERENCE.sub(
        lambda m: f'<a href="{base_url}/pull/{m.group(1)}">{m.group(0)}</a>',
        subject,
        count=1,
    )
