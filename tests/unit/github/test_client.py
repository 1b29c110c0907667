"""Unit tests for the GitHub REST client.

HTTP traffic is intercepted with aioresponses.
"""

import re

import aiohttp
import pytest
from aioresponses import aioresponses
from bumpctl.github.client import DuplicatePullRequestError, GitHubAPIError, GitHubClient
from yarl import URL

API = "https://api.github.com"


def _sent_json(mock: aioresponses, method: str, url: str) -> object:
    """Return the JSON body of the first request sent to ``url``."""
    return mock.requests[(method, URL(url))][0].kwargs["json"]


class TestReadEndpoints:
    """Tests for releases and comparisons."""

    async def test_get_release_by_tag(self, github_mock: aioresponses) -> None:
        """Releases are parsed into Release models."""
        github_mock.get(
            f"{API}/repos/lodash/lodash/releases/tags/v4.17.21",
            payload={
                "tag_name": "v4.17.21",
                "html_url": "https://github.com/lodash/lodash/releases/tag/v4.17.21",
                "published_at": "2021-02-20T15:42:16Z",
                "body": "Security fix",
                "author": {"login": "jdalton"},
            },
        )

        async with GitHubClient("token") as github:
            release = await github.get_release_by_tag("lodash", "lodash", "v4.17.21")

        assert release.tag_name == "v4.17.21"
        assert release.body == "Security fix"
        assert release.published_at is not None
        assert (release.published_at.month, release.published_at.day) == (2, 20)

    async def test_compare_commits(self, github_mock: aioresponses) -> None:
        """Comparisons flatten nested commit messages."""
        github_mock.get(
            f"{API}/repos/lodash/lodash/compare/v4.17.20...v4.17.21",
            payload={
                "html_url": "https://github.com/lodash/lodash/compare/v4.17.20...v4.17.21",
                "total_commits": 1,
                "commits": [
                    {
                        "sha": "f2e7063",
                        "html_url": "https://github.com/lodash/lodash/commit/f2e7063",
                        "commit": {"message": "Bump to v4.17.21\n\nDetails"},
                    }
                ],
            },
        )

        async with GitHubClient("token") as github:
            comparison = await github.compare_commits("lodash", "lodash", "v4.17.20", "v4.17.21")

        assert comparison.total_commits == 1
        assert comparison.commits[0].subject == "Bump to v4.17.21"

    async def test_not_found(self, github_mock: aioresponses) -> None:
        """Error statuses raise GitHubAPIError with GitHub's message."""
        github_mock.get(
            f"{API}/repos/o/r/releases/tags/v1",
            status=404,
            payload={"message": "Not Found"},
        )

        async with GitHubClient("token") as github:
            with pytest.raises(GitHubAPIError) as exc_info:
                await github.get_release_by_tag("o", "r", "v1")

        assert exc_info.value.status == 404
        assert exc_info.value.message == "Not Found"

    async def test_connection_error(self, github_mock: aioresponses) -> None:
        """Transport failures propagate as aiohttp errors."""
        github_mock.get(f"{API}/repos/o/r/releases/tags/v1", exception=aiohttp.ClientConnectionError("reset"))

        async with GitHubClient("token") as github:
            with pytest.raises(aiohttp.ClientError):
                await github.get_release_by_tag("o", "r", "v1")

    async def test_custom_api_url(self, github_mock: aioresponses) -> None:
        """GitHub Enterprise base URLs are honoured."""
        github_mock.get(
            "https://ghe.example.com/api/v3/repos/o/r/releases/tags/v1",
            payload={"tag_name": "v1"},
        )

        async with GitHubClient("token", api_url="https://ghe.example.com/api/v3/") as github:
            release = await github.get_release_by_tag("o", "r", "v1")

        assert release.tag_name == "v1"


class TestPullRequests:
    """Tests for pull request creation and labelling."""

    async def test_create_pull_request(self, github_mock: aioresponses) -> None:
        """The payload carries head, base, title, body and draft."""
        url = f"{API}/repos/acme/webapp/pulls"
        github_mock.post(url, status=201, payload={"number": 7, "html_url": "https://github.com/acme/webapp/pull/7"})

        async with GitHubClient("token") as github:
            pr = await github.create_pull_request(
                "acme",
                "webapp",
                head="dependabot/bump_lodash_from_1_to_2",
                base="master",
                title="Bump lodash from 1 to 2",
                body="# Bump lodash from 1 to 2\n",
                draft=True,
            )

        assert pr.number == 7
        assert _sent_json(github_mock, "POST", url) == {
            "head": "dependabot/bump_lodash_from_1_to_2",
            "base": "master",
            "title": "Bump lodash from 1 to 2",
            "body": "# Bump lodash from 1 to 2\n",
            "draft": True,
        }

    async def test_duplicate_pull_request(self, github_mock: aioresponses) -> None:
        """GitHub's duplicate validation error has its own type."""
        github_mock.post(
            f"{API}/repos/acme/webapp/pulls",
            status=422,
            payload={
                "message": "Validation Failed",
                "errors": [{"resource": "PullRequest", "message": "A pull request already exists for acme:x."}],
            },
        )

        async with GitHubClient("token") as github:
            with pytest.raises(DuplicatePullRequestError, match="already exists"):
                await github.create_pull_request("acme", "webapp", head="x", base="master", title="t", body=None)

    async def test_other_validation_error(self, github_mock: aioresponses) -> None:
        """Other 422 errors stay generic."""
        github_mock.post(
            f"{API}/repos/acme/webapp/pulls",
            status=422,
            payload={"message": "Validation Failed", "errors": [{"message": "No commits between master and x"}]},
        )

        async with GitHubClient("token") as github:
            with pytest.raises(GitHubAPIError) as exc_info:
                await github.create_pull_request("acme", "webapp", head="x", base="master", title="t", body=None)

        assert not isinstance(exc_info.value, DuplicatePullRequestError)
        assert "No commits" in exc_info.value.message

    async def test_add_labels(self, github_mock: aioresponses) -> None:
        """Labels are posted to the issue endpoint."""
        url = f"{API}/repos/acme/webapp/issues/7/labels"
        github_mock.post(url, payload=[{"name": "dependencies"}])

        async with GitHubClient("token") as github:
            await github.add_labels("acme", "webapp", 7, ["dependencies"])

        assert _sent_json(github_mock, "POST", url) == {"labels": ["dependencies"]}


class TestSearch:
    """Tests for issue search."""

    async def test_search_issues_count(self, github_mock: aioresponses) -> None:
        """The total count of matches is returned."""
        github_mock.get(re.compile(rf"^{re.escape(API)}/search/issues\?.*$"), payload={"total_count": 2, "items": []})

        async with GitHubClient("token") as github:
            count = await github.search_issues_count('"Bump x from 1 to 2" repo:acme/webapp is:pr')

        assert count == 2

    async def test_search_without_session_fails(self) -> None:
        """The client must be entered before use."""
        with pytest.raises(RuntimeError, match="context manager"):
            await GitHubClient("token").search_issues_count("q")
