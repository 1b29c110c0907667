"""Git working tree operations for update branches.

Wraps the git CLI for the handful of operations the update pipeline
needs: branch from trunk, reset, commit the package manager's changes
and push. Authentication is whatever git is configured with, typically
an SSH agent.
"""

import logging
from pathlib import Path

from bumpctl.core.errors import CommandError, VersionControlError
from bumpctl.utils.shell import CommandRunner, run_command

logger = logging.getLogger(__name__)


class GitClient:
    """Git operations on a single working tree.

    All mutating operations act on the shared on-disk checkout, so callers
    must not interleave them.

    Attributes:
        path: Root of the git work tree.
        trunk: Branch update branches start from.
        remote: Remote pushed to.
    """

    def __init__(
        self,
        path: Path,
        *,
        trunk: str,
        author_name: str,
        author_email: str,
        remote: str = "origin",
        runner: CommandRunner | None = None,
    ) -> None:
        self.path = path
        self.trunk = trunk
        self.remote = remote
        self._author_name = author_name
        self._author_email = author_email
        self._runner = runner or CommandRunner(path, strict_stderr=False)

    def open(self) -> None:
        """Verify the work tree and the trunk branch.

        Raises:
            VersionControlError: If ``path`` is not a git work tree or the
                trunk branch does not resolve.
        """
        try:
            inside = run_command(["git", "rev-parse", "--is-inside-work-tree"], cwd=str(self.path))
        except (FileNotFoundError, NotADirectoryError) as e:
            raise VersionControlError(f"Cannot open repository at {self.path}: {e}") from e
        if not inside.success or inside.stdout.strip() != "true":
            msg = f"Not a git work tree: {self.path} ({inside.stderr.strip() or 'unknown error'})"
            raise VersionControlError(msg)

        trunk = run_command(
            ["git", "rev-parse", "--verify", "--quiet", f"{self.trunk}^{{commit}}"],
            cwd=str(self.path),
        )
        if not trunk.success:
            raise VersionControlError(f"Trunk branch {self.trunk!r} not found in {self.path}")
        logger.debug("Opened repository %s (trunk %s at %s)", self.path, self.trunk, trunk.stdout.strip())

    async def create_branch_from_trunk(self, name: str) -> None:
        """Create (or move) ``name`` to trunk, check it out and hard-reset it."""
        await self._git("branch", "--force", name, self.trunk)
        await self.checkout_branch(name)
        await self.hard_reset_to_trunk()

    async def checkout_branch(self, name: str) -> None:
        """Check out ``name``, discarding local modifications."""
        await self._git("checkout", "--quiet", "--force", name)

    async def hard_reset_to_trunk(self) -> None:
        """Reset the current branch, index and work tree to trunk."""
        await self._git("reset", "--quiet", "--hard", self.trunk)

    async def stage_and_commit(self, paths: list[str], message: str) -> str:
        """Stage ``paths`` and commit them.

        Args:
            paths: Paths relative to the work tree root.
            message: Commit message.

        Returns:
            The new commit's SHA.

        Raises:
            VersionControlError: If nothing was staged or a git command fails.
        """
        if not paths:
            raise VersionControlError("No paths to stage")
        await self._git("add", "--all", "--", *paths)

        staged = await self._git("diff", "--cached", "--name-only")
        if not staged.strip():
            raise VersionControlError(f"Nothing to commit for {message!r}")

        await self._git(
            "-c",
            f"user.name={self._author_name}",
            "-c",
            f"user.email={self._author_email}",
            "commit",
            "--quiet",
            "--message",
            message,
        )
        sha = (await self._git("rev-parse", "HEAD")).strip()
        logger.info("Committed %s: %s", sha[:8], message)
        return sha

    async def push(self, branch: str, *, force: bool = False) -> None:
        """Push ``branch`` to the remote branch of the same name."""
        refspec = f"{'+' if force else ''}refs/heads/{branch}:refs/heads/{branch}"
        await self._git("push", "--quiet", self.remote, refspec)
        logger.info("Pushed %s to %s", branch, self.remote)

    async def _git(self, *args: str) -> str:
        """Run a git subcommand in the work tree.

        Raises:
            VersionControlError: If git exits non-zero.
        """
        try:
            return await self._runner.run(["git", *args])
        except CommandError as e:
            raise VersionControlError(str(e)) from e
