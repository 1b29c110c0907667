"""Changelog entry model.

A changelog entry pairs the release notes of one version with the commits
that separate it from the previous version.
"""

from __future__ import annotations

from dataclasses import dataclass

from bumpctl.github.models import Comparison, Release


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    """Release and commit data for one version transition.

    Attributes:
        version: Version this entry describes.
        previous: Version the transition starts from.
        release: Release metadata, or None if it could not be fetched.
        comparison: Commits between the two tags, or None if unavailable.
    """

    version: str
    previous: str
    release: Release | None = None
    comparison: Comparison | None = None
