"""Exception hierarchy for bumpctl.

All errors raised by bumpctl derive from :class:`BumpctlError` so the CLI
can report them uniformly and exit with a non-zero status.
"""


class BumpctlError(Exception):
    """Base exception for all bumpctl errors."""


class MalformedDescriptorError(BumpctlError):
    """Raised when a dependency token is not of the form ``name@adapter:version``."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Malformed dependency descriptor: {token!r}")


class VersionNotFoundError(BumpctlError):
    """Raised when the current version is missing from the registry's version list."""

    def __init__(self, name: str, version: str) -> None:
        self.name = name
        self.version = version
        super().__init__(f"Version {version} of {name} is not in the registry version list")


class CommandError(BumpctlError):
    """Raised when an external command fails or produces unusable output.

    Attributes:
        args: Command and arguments that were executed.
        returncode: Exit code of the process (None if it never ran).
        stderr: Captured standard error.
    """

    def __init__(
        self,
        message: str,
        *,
        args: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = args or []
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class VersionControlError(BumpctlError):
    """Raised when a git operation cannot be completed."""


class ConfigError(BumpctlError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""
