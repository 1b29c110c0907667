"""Bot configuration and settings.

This module provides the configuration model and loader for a bot run.
Settings come from an optional TOML file overlaid with command-line
options; the CLI is the only layer that reads environment variables.

Example config.toml:

    repository = "acme/webapp"
    directory = "frontend"
    ignore = ["^@acme/", "eslint"]
    trunk = "main"
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from bumpctl.core.errors import ConfigError, ConfigNotFoundError, ConfigParseError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class BotConfig(BaseModel):
    """Configuration for one bot run.

    Attributes:
        repository: GitHub repository receiving the pull requests (``owner/repo``).
        token: GitHub token used for API calls.
        workspace: Root of the git checkout.
        directory: Yarn project directory, relative to the workspace.
        ignore: Dependency name patterns that are never bumped.
        trunk: Branch update branches are created from and merged into.
        label: Label attached to every pull request, also used to find existing ones.
        draft: Open pull requests as drafts.
        tag_prefix: Prefix of upstream release tags (``v1.2.3``).
        api_url: GitHub REST API base URL.
        author_name: Commit author and committer name.
        author_email: Commit author and committer email.
    """

    model_config = ConfigDict(extra="forbid")

    repository: Annotated[str | None, Field(description="Target repository (owner/repo)")] = None
    token: Annotated[SecretStr | None, Field(description="GitHub API token")] = None
    workspace: Annotated[Path, Field(description="Git checkout root")] = Path(".")
    directory: Annotated[Path, Field(description="Yarn project directory")] = Path(".")
    ignore: Annotated[list[str], Field(default_factory=list, description="Ignored names")]
    trunk: Annotated[str, Field(min_length=1, description="Base branch")] = "master"
    label: Annotated[str, Field(min_length=1, description="Pull request label")] = "dependencies"
    draft: Annotated[bool, Field(description="Open pull requests as drafts")] = True
    tag_prefix: Annotated[str, Field(description="Release tag prefix")] = "v"
    api_url: Annotated[str, Field(description="GitHub REST API base URL")] = DEFAULT_API_URL
    author_name: Annotated[str, Field(min_length=1)] = "Dependabot with Yarn 3"
    author_email: Annotated[str, Field(min_length=1)] = "bumpctl@users.noreply.github.com"

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        """Validate the ``owner/repo`` form."""
        if v is None:
            return None
        owner, sep, name = v.strip().partition("/")
        if not (sep and owner and name) or "/" in name:
            msg = f"repository must be 'owner/repo', got {v!r}"
            raise ValueError(msg)
        return f"{owner}/{name}"

    @field_validator("ignore", mode="before")
    @classmethod
    def split_ignore(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            return [p.strip() for p in v if isinstance(p, str) and p.strip()]
        return v

    @property
    def owner(self) -> str:
        """Owner part of the target repository."""
        return self.require_repository().split("/", 1)[0]

    @property
    def repo(self) -> str:
        """Name part of the target repository."""
        return self.require_repository().split("/", 1)[1]

    def require_repository(self) -> str:
        """Return the target repository.

        Raises:
            ConfigError: If no repository is configured.
        """
        if self.repository is None:
            raise ConfigError("A target repository is required (--repository or GITHUB_REPOSITORY)")
        return self.repository

    @property
    def client_directory(self) -> Path:
        """Absolute-or-relative path of the Yarn project directory."""
        return self.workspace / self.directory

    def require_token(self) -> str:
        """Return the API token.

        Raises:
            ConfigError: If no token is configured.
        """
        if self.token is None or not self.token.get_secret_value():
            raise ConfigError("A GitHub token is required (--token or GITHUB_TOKEN)")
        return self.token.get_secret_value()


def load_bot_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    *,
    required: bool = False,
) -> BotConfig:
    """Load bot configuration from a TOML file and explicit overrides.

    Overrides whose value is None are ignored so unset command-line
    options do not mask file settings.

    Args:
        path: Path to the config file. If None, only overrides are used.
        overrides: Values taking precedence over the file.
        required: Raise if ``path`` does not exist instead of skipping it.

    Returns:
        Validated BotConfig object.

    Raises:
        ConfigNotFoundError: If ``required`` and the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    data: dict[str, Any] = {}

    if path is not None:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Failed to read config {path}: {e}") from e
            logger.debug("Loaded configuration from %s", path)
        elif required:
            raise ConfigNotFoundError(f"Config file not found: {path}")

    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return BotConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
