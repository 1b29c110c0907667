"""Update result models.

This module defines the outcome of one dependency update and the summary
of a whole run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bumpctl.models.package import PackageDescriptor


class UpdateStatus(Enum):
    """Outcome of a single dependency update.

    Attributes:
        CREATED: A new pull request was opened and labelled.
        ALREADY_EXISTS: GitHub reported an open pull request for the branch.
        FAILED: The update raised an error and was skipped.
        PLANNED: Dry run; the update would have been attempted.
    """

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"
    PLANNED = "planned"


@dataclass(frozen=True, slots=True)
class UpdateResult:
    """Result of processing one outdated dependency.

    Attributes:
        package: The descriptor that was updated.
        status: Outcome of the update.
        pull_request_number: Number of the created pull request, if any.
        pull_request_url: Web URL of the created pull request, if any.
        error: Error message if the update failed.
    """

    package: PackageDescriptor
    status: UpdateStatus
    pull_request_number: int | None = None
    pull_request_url: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the desired end state (an open pull request) holds."""
        return self.status in (UpdateStatus.CREATED, UpdateStatus.ALREADY_EXISTS)

    @property
    def failed(self) -> bool:
        """Check if the update failed."""
        return self.status == UpdateStatus.FAILED


@dataclass(slots=True)
class RunReport:
    """Summary of one bot run.

    Attributes:
        discovered: Number of updatable dependencies found.
        outdated: Number of dependencies whose latest version differs.
        skipped_existing: Number of outdated dependencies with an open pull request.
        results: One result per dependency that went through the update step.
    """

    discovered: int = 0
    outdated: int = 0
    skipped_existing: int = 0
    results: list[UpdateResult] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        """Number of updates that failed."""
        return sum(1 for r in self.results if r.failed)
