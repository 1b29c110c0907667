"""GitHub REST API access.

This module exports the async client, its errors and payload models.
"""

from bumpctl.github.client import DuplicatePullRequestError, GitHubAPIError, GitHubClient
from bumpctl.github.models import CommitSummary, Comparison, PullRequest, Release

__all__ = [
    "CommitSummary",
    "Comparison",
    "DuplicatePullRequestError",
    "GitHubAPIError",
    "GitHubClient",
    "PullRequest",
    "Release",
]
