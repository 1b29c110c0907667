"""Data models for bumpctl.

This module exports the core data structures used throughout the application.
"""

from bumpctl.models.changelog import ChangelogEntry
from bumpctl.models.package import (
    PackageDescriptor,
    RegistryRecord,
    UpstreamCoordinates,
    UpstreamRepository,
)
from bumpctl.models.update import RunReport, UpdateResult, UpdateStatus

__all__ = [
    "ChangelogEntry",
    "PackageDescriptor",
    "RegistryRecord",
    "RunReport",
    "UpdateResult",
    "UpdateStatus",
    "UpstreamCoordinates",
    "UpstreamRepository",
]
