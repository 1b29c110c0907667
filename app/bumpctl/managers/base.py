"""Abstract base class for package managers.

This module defines the PackageManager interface the update pipeline
uses to discover dependencies, look up their latest versions and apply
an upgrade.
"""

from abc import ABC, abstractmethod

from bumpctl.models.package import RegistryRecord


class PackageManager(ABC):
    """Abstract base class for package manager adapters.

    Implementations wrap a package manager CLI. Every method that runs a
    command is a coroutine so subprocesses never block the event loop.

    Example:
        >>> manager = YarnManager(runner)
        >>> tokens = await manager.list_dependencies()
        >>> records = await manager.lookup(["lodash", "react"])
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the executable name of the package manager."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""

    @abstractmethod
    async def list_dependencies(self) -> list[str]:
        """List every declared dependency as a ``name@adapter:version`` token.

        Raises:
            CommandError: If the package manager command fails.
        """

    @abstractmethod
    async def lookup(self, names: list[str]) -> list[RegistryRecord]:
        """Fetch registry metadata for several packages in one call.

        Raises:
            CommandError: If the command fails or returns unusable records.
        """

    @abstractmethod
    async def upgrade(self, name: str) -> None:
        """Upgrade a single dependency to its latest version.

        Raises:
            CommandError: If the upgrade command fails.
        """

    @abstractmethod
    def manifest_paths(self) -> list[str]:
        """Return the files an upgrade modifies, for staging in git."""
