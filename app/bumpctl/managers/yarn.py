"""Yarn Berry package manager adapter.

Discovers dependencies with ``yarn info``, queries the npm registry
through ``yarn npm info`` and upgrades with ``yarn up``.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from bumpctl.core.errors import CommandError
from bumpctl.managers.base import PackageManager
from bumpctl.models.package import RegistryRecord
from bumpctl.utils.shell import CommandRunner, command_exists

logger = logging.getLogger(__name__)


class YarnManager(PackageManager):
    """Package manager adapter for Yarn 2+ projects.

    Attributes:
        runner: Command runner bound to the Yarn project directory.
        repository_root: Git work tree root; manifest paths are relative to it.
    """

    # Files and directories `yarn up` may touch, relative to the project
    _MANIFEST_FILES = (".yarn", "yarn.lock", "package.json")

    def __init__(self, runner: CommandRunner, repository_root: Path | None = None) -> None:
        self.runner = runner
        self.repository_root = repository_root

    @property
    def name(self) -> str:
        """Return ``yarn``."""
        return "yarn"

    def is_available(self) -> bool:
        """Check if yarn is on the PATH."""
        return command_exists("yarn")

    async def list_dependencies(self) -> list[str]:
        """List dependency locators with ``yarn info --name-only``.

        Yarn prints one JSON string per line, e.g. ``"lodash@npm:4.17.21"``.
        Non-string records are skipped.
        """
        records = await self.runner.run_json(["yarn", "info", "--name-only"])
        tokens: list[str] = []
        for record in records:
            if isinstance(record, str):
                tokens.append(record)
            else:
                logger.debug("Skipping non-string yarn info record: %r", record)
        return tokens

    async def lookup(self, names: list[str]) -> list[RegistryRecord]:
        """Query the registry for all names with a single ``yarn npm info``."""
        if not names:
            return []

        raw_records = await self.runner.run_json(["yarn", "npm", "info", *names])
        records: list[RegistryRecord] = []
        for raw in raw_records:
            try:
                records.append(RegistryRecord.model_validate(raw))
            except ValidationError as e:
                msg = f"Unexpected registry record from yarn npm info: {e}"
                raise CommandError(msg, args=["yarn", "npm", "info"]) from e
        return records

    async def upgrade(self, name: str) -> None:
        """Run ``yarn up <name>``."""
        await self.runner.run(["yarn", "up", name])

    def manifest_paths(self) -> list[str]:
        """Return the existing Yarn files, relative to the repository root."""
        project = self.runner.cwd or Path(".")
        paths: list[str] = []
        for filename in self._MANIFEST_FILES:
            path = project / filename
            if not path.exists():
                continue
            if self.repository_root is not None:
                path = path.resolve().relative_to(self.repository_root.resolve())
            paths.append(str(path))
        return paths
