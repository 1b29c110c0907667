"""Shell execution utilities.

Provides subprocess execution for the package manager and git, both as a
blocking helper for one-shot checks and as an asyncio runner that parses
newline-delimited JSON output.
"""

import asyncio
import json
import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from bumpctl.core.errors import CommandError

logger = logging.getLogger(__name__)

# Node prints this to stderr when an inspector is attached; it is not an error
BENIGN_STDERR_PREFIX = "Debugger"


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def parse_json_lines(output: str) -> list[Any]:
    """Parse newline-delimited JSON into a list of values.

    Blank lines are skipped.

    Raises:
        json.JSONDecodeError: If a non-blank line is not valid JSON.
    """
    return [json.loads(line) for line in output.splitlines() if line.strip()]


class CommandRunner:
    """Runs external commands without blocking the event loop.

    A command fails if it exits non-zero. In strict mode (the default) it
    also fails if it writes anything to stderr other than the
    debugger-attach notice Node emits; git reports progress on stderr and
    is run with strict mode off.

    Example:
        >>> runner = CommandRunner(Path("client"))
        >>> records = await runner.run_json(["yarn", "info", "--name-only"])
    """

    def __init__(self, cwd: Path | None = None, *, strict_stderr: bool = True) -> None:
        """Initialize the runner.

        Args:
            cwd: Working directory for every command. None uses the current one.
            strict_stderr: Treat unexpected stderr output as a failure.
        """
        self._cwd = cwd
        self._strict_stderr = strict_stderr

    @property
    def cwd(self) -> Path | None:
        """Working directory commands run in."""
        return self._cwd

    async def run(self, args: list[str]) -> str:
        """Run a command and return its standard output.

        Raises:
            CommandError: If the command fails or writes to stderr.
            FileNotFoundError: If the executable is not found.
        """
        logger.debug("Running %s (cwd=%s)", " ".join(args), self._cwd)
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self._cwd,
        )
        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode(errors="replace")
        stderr = stderr_bytes.decode(errors="replace")

        if process.returncode != 0:
            msg = f"{args[0]} exited with {process.returncode}: {stderr.strip() or stdout.strip()}"
            raise CommandError(msg, args=args, returncode=process.returncode, stderr=stderr)
        if self._strict_stderr and stderr and not stderr.startswith(BENIGN_STDERR_PREFIX):
            msg = f"{args[0]} reported an error: {stderr.strip()}"
            raise CommandError(msg, args=args, returncode=process.returncode, stderr=stderr)
        return stdout

    async def run_json(self, args: list[str]) -> list[Any]:
        """Run a command with ``--json`` and parse its NDJSON output.

        Raises:
            CommandError: If the command fails or its output is not NDJSON.
        """
        full_args = [*args, "--json"]
        stdout = await self.run(full_args)
        try:
            return parse_json_lines(stdout)
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON output from {' '.join(full_args)}: {e}"
            raise CommandError(msg, args=full_args) from e
