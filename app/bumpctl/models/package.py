"""Package models for dependency discovery and version lookup.

This module defines the descriptor of a single declared dependency, the
registry record used to enrich it, and the upstream repository reference
used to locate release notes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bumpctl.core.errors import MalformedDescriptorError, VersionNotFoundError

# Only registry-hosted packages can be bumped with `yarn up`
SUPPORTED_ADAPTER = "npm"

BRANCH_PREFIX = "dependabot"

_GITHUB_URL = re.compile(r"github\.com[/:](?P<owner>[^/]+)/(?P<repo>[^/#?]+)")
_UNSAFE_REF_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_DOT_RUNS = re.compile(r"\.{2,}")


@dataclass(frozen=True, slots=True)
class UpstreamCoordinates:
    """Owner and repository name of a dependency hosted on GitHub.

    Attributes:
        owner: GitHub user or organisation.
        repo: Repository name without a ``.git`` suffix.
    """

    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


class UpstreamRepository(BaseModel):
    """Source repository reference as published in the package metadata."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = "git"
    url: str


class RegistryRecord(BaseModel):
    """One record of a registry lookup (``yarn npm info --json``).

    Attributes:
        name: Package name.
        version: Latest published version (the ``latest`` dist-tag).
        versions: All published versions in ascending order.
        repository: Upstream repository reference, if the package declares one.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str
    versions: list[str] = Field(default_factory=list)
    repository: UpstreamRepository | None = None

    @field_validator("repository", mode="before")
    @classmethod
    def normalize_repository(cls, v: Any) -> Any:
        """Accept the ``"repository": "owner/repo"`` shorthand."""
        if isinstance(v, str):
            return {"type": "git", "url": v}
        return v


class PackageDescriptor(BaseModel):
    """Parsed representation of one declared dependency.

    Built from a ``name@adapter:version`` token and enriched once with a
    :class:`RegistryRecord`. Identity fields are frozen after parsing.

    Example:
        >>> pkg = PackageDescriptor.parse("@types/node@npm:20.1.0")
        >>> pkg.name, pkg.adapter, pkg.current_version
        ('@types/node', 'npm', '20.1.0')
    """

    name: Annotated[str, Field(frozen=True, min_length=1)]
    adapter: Annotated[str, Field(frozen=True, min_length=1)]
    current_version: Annotated[str, Field(frozen=True, min_length=1)]
    latest_version: str | None = None
    available_versions: list[str] = Field(default_factory=list)
    repository: UpstreamRepository | None = None

    @classmethod
    def parse(cls, token: str) -> PackageDescriptor:
        """Parse a ``name@adapter:version`` token.

        The last ``@`` separates the name from the rest so scoped names
        like ``@babel/core`` survive; the first ``:`` after it separates
        the adapter from the version.

        Raises:
            MalformedDescriptorError: If any of the three parts is missing.
        """
        name, at, rest = token.strip().rpartition("@")
        adapter, colon, version = rest.partition(":")
        if not (at and colon and name and adapter and version):
            raise MalformedDescriptorError(token)
        return cls(name=name, adapter=adapter, current_version=version)

    def is_updatable(self, ignore: list[str]) -> bool:
        """Check whether this dependency may be bumped.

        Args:
            ignore: Name patterns (substrings or regular expressions).

        Returns:
            False if the name matches a pattern or the adapter is not the
            npm registry, True otherwise.
        """
        if any(re.search(pattern, self.name) for pattern in ignore):
            return False
        return self.adapter == SUPPORTED_ADAPTER

    def apply_lookup(self, record: RegistryRecord) -> None:
        """Store the latest version, version list and repository from a lookup."""
        if record.name != self.name:
            msg = f"Registry record for {record.name!r} applied to {self.name!r}"
            raise ValueError(msg)
        self.latest_version = record.version
        self.available_versions = list(record.versions)
        self.repository = record.repository

    def is_update_needed(self) -> bool:
        """Check whether the latest version differs from the current one.

        This is plain string inequality, not a semantic version comparison:
        a registry whose ``latest`` tag points at an older or pre-release
        version is reported as an update as well.
        """
        return self.current_version != self.latest_version

    def has_upstream_repository(self) -> bool:
        """Check if the package declares a git repository."""
        return self.repository is not None and self.repository.type == "git"

    def resolve_upstream_coordinates(self) -> UpstreamCoordinates | None:
        """Extract GitHub owner and repository from the repository URL.

        Returns:
            UpstreamCoordinates, or None if there is no repository or it is
            not hosted on github.com.
        """
        if self.repository is None:
            return None
        match = _GITHUB_URL.search(self.repository.url)
        if match is None:
            return None
        repo = match.group("repo").removesuffix(".git")
        if not repo:
            return None
        return UpstreamCoordinates(owner=match.group("owner"), repo=repo)

    def later_versions(self) -> list[str]:
        """Return every published version after the current one.

        The walk stops at the latest version when it appears in the list,
        so pre-releases published after ``latest`` are not included.

        Raises:
            VersionNotFoundError: If the current version is not in the
                registry's version list.
        """
        try:
            start = self.available_versions.index(self.current_version) + 1
        except ValueError:
            raise VersionNotFoundError(self.name, self.current_version) from None

        later = self.available_versions[start:]
        if self.latest_version in later:
            later = later[: later.index(self.latest_version) + 1]
        return later

    @property
    def pull_request_title(self) -> str:
        """Title used for the commit and the pull request."""
        return f"Bump {self.name} from {self.current_version} to {self.latest_version}"

    @property
    def branch_name(self) -> str:
        """Update branch name, safe to use as a git ref."""
        parts = (self.name, self.current_version, str(self.latest_version))
        name, current, latest = (_sanitize_ref_part(p) for p in parts)
        return f"{BRANCH_PREFIX}/bump_{name}_from_{current}_to_{latest}"


def _sanitize_ref_part(value: str) -> str:
    """Make a single component safe for a git ref name."""
    cleaned = _UNSAFE_REF_CHARS.sub("-", value.removeprefix("@"))
    cleaned = _DOT_RUNS.sub(".", cleaned)
    return cleaned.strip(".") or "-"
