"""Async GitHub REST API client.

Covers the endpoints the update pipeline needs: releases and commit
comparisons of upstream projects, and pull requests, labels and search on
the target repository.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import aiohttp

from bumpctl.core.errors import BumpctlError
from bumpctl.github.models import Comparison, PullRequest, Release

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"

# GitHub's 422 validation message when the head branch already has an open PR
DUPLICATE_PULL_REQUEST_MESSAGE = "A pull request already exists"


class GitHubAPIError(BumpctlError):
    """Raised when the GitHub API returns a non-success status.

    Attributes:
        status: HTTP status code.
        message: Error message reported by GitHub.
    """

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"GitHub API error {status}: {message}")


class DuplicatePullRequestError(GitHubAPIError):
    """Raised when a pull request for the same head branch is already open."""


class GitHubClient:
    """Minimal GitHub REST client on top of an aiohttp session.

    Use as an async context manager so the session is closed:

    Example:
        >>> async with GitHubClient(token) as github:
        ...     release = await github.get_release_by_tag("lodash", "lodash", "v4.17.21")
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://api.github.com",
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> GitHubClient:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {self._token}",
                    "X-GitHub-Api-Version": API_VERSION,
                },
                timeout=aiohttp.ClientTimeout(total=60),
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        """Fetch the release published for ``tag``."""
        data = await self._request("GET", f"/repos/{owner}/{repo}/releases/tags/{tag}")
        return Release.model_validate(data)

    async def compare_commits(self, owner: str, repo: str, base: str, head: str) -> Comparison:
        """Fetch the commits between two refs."""
        data = await self._request("GET", f"/repos/{owner}/{repo}/compare/{base}...{head}")
        return Comparison.model_validate(data)

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        head: str,
        base: str,
        title: str,
        body: str | None,
        draft: bool = True,
    ) -> PullRequest:
        """Open a pull request.

        Raises:
            DuplicatePullRequestError: If a pull request for ``head`` is already open.
            GitHubAPIError: For any other API failure.
        """
        payload = {"head": head, "base": base, "title": title, "body": body, "draft": draft}
        try:
            data = await self._request("POST", f"/repos/{owner}/{repo}/pulls", json=payload)
        except GitHubAPIError as e:
            if e.status == 422 and DUPLICATE_PULL_REQUEST_MESSAGE in e.message:
                raise DuplicatePullRequestError(e.status, e.message) from e
            raise
        return PullRequest.model_validate(data)

    async def add_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> None:
        """Attach labels to an issue or pull request."""
        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
            json={"labels": labels},
        )

    async def search_issues_count(self, query: str) -> int:
        """Return the number of issues and pull requests matching ``query``."""
        data = await self._request("GET", "/search/issues", params={"q": query, "per_page": "1"})
        return int(data.get("total_count", 0))

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            GitHubAPIError: If the response status is not 2xx.
            aiohttp.ClientError: On connection failures.
        """
        if self._session is None:
            msg = "GitHubClient must be used as an async context manager"
            raise RuntimeError(msg)

        url = f"{self._api_url}{path}"
        logger.debug("%s %s", method, url)
        async with self._session.request(method, url, params=params, json=json) as resp:
            if resp.status >= 400:
                raise GitHubAPIError(resp.status, await _error_message(resp))
            if resp.status == 204:
                return None
            return await resp.json(content_type=None)


async def _error_message(resp: aiohttp.ClientResponse) -> str:
    """Build a readable message from a GitHub error response.

    GitHub reports validation failures as a top-level ``message`` plus an
    ``errors`` list whose entries may carry their own ``message``.
    """
    try:
        data = await resp.json(content_type=None)
    except (aiohttp.ContentTypeError, ValueError):
        return (await resp.text()).strip() or resp.reason or "unknown error"

    if not isinstance(data, dict):
        return str(data)
    parts = [str(data.get("message", ""))]
    for error in data.get("errors", []) or []:
        if isinstance(error, dict) and error.get("message"):
            parts.append(str(error["message"]))
    return "; ".join(p for p in parts if p) or resp.reason or "unknown error"
