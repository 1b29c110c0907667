"""Pydantic models for the GitHub REST payloads bumpctl reads.

Only the fields used for rendering changelogs and reporting pull requests
are declared; everything else in the responses is ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Release(BaseModel):
    """A published release (``GET /repos/{owner}/{repo}/releases/tags/{tag}``)."""

    model_config = ConfigDict(extra="ignore")

    tag_name: str
    html_url: str = ""
    published_at: datetime | None = None
    body: str | None = None


class CommitSummary(BaseModel):
    """One commit of a comparison.

    GitHub nests the message under ``commit.message``; it is flattened
    into :attr:`message` on validation.
    """

    model_config = ConfigDict(extra="ignore")

    sha: str
    html_url: str
    message: str = ""

    @model_validator(mode="before")
    @classmethod
    def flatten_message(cls, data: Any) -> Any:
        if isinstance(data, dict) and "message" not in data:
            nested = data.get("commit") or {}
            return {**data, "message": nested.get("message", "")}
        return data

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


class Comparison(BaseModel):
    """Commits between two refs (``GET /repos/{owner}/{repo}/compare/{basehead}``)."""

    model_config = ConfigDict(extra="ignore")

    html_url: str
    total_commits: int = 0
    commits: list[CommitSummary] = Field(default_factory=list)


class PullRequest(BaseModel):
    """The subset of a created pull request bumpctl reports."""

    model_config = ConfigDict(extra="ignore")

    number: int
    html_url: str = ""
