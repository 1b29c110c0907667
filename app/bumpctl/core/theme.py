"""Console color theme.

Colors come from the bundled ``data/theme.toml``; any key may be
overridden in ``~/.config/bumpctl/theme.toml``.
"""

import functools
import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from bumpctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)

HexColor = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")]


class ThemeColors(BaseModel):
    """Hex colors (``#RGB`` or ``#RRGGBB``) used by the console output."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    version_current: HexColor = "#b2bec3"
    version_latest: HexColor = "#c1ff62"
    package_name: HexColor = "#69B9A1"

    def to_styles(self) -> dict[str, str]:
        """Map the colors to the Rich style names used across the CLI."""
        return {
            "text": self.text,
            "muted": self.muted,
            "header": self.header,
            "bold_header": f"bold {self.header}",
            "border": self.border,
            "success": self.success,
            "warning": self.warning,
            "error": f"bold {self.error}",
            "info": self.info,
            "version.current": self.version_current,
            "version.latest": f"bold {self.version_latest}",
            "package.name": f"bold {self.package_name}",
        }


def get_user_theme_path() -> Path:
    """Return ``~/.config/bumpctl/theme.toml``."""
    return get_config_dir() / "theme.toml"


def parse_colors(text: str) -> dict[str, Any]:
    """Return the ``[colors]`` table of a theme document.

    Raises:
        tomllib.TOMLDecodeError: If ``text`` is not valid TOML.
    """
    colors = tomllib.loads(text).get("colors", {})
    return colors if isinstance(colors, dict) else {}


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load the bundled colors with the user's overrides applied.

    An unreadable or invalid user theme is logged and ignored.
    """
    bundled = resources.files("bumpctl.data").joinpath("theme.toml").read_text(encoding="utf-8")
    colors = parse_colors(bundled)

    path = user_path or get_user_theme_path()
    if path.is_file():
        try:
            overrides = parse_colors(path.read_text(encoding="utf-8"))
            return ThemeColors.model_validate({**colors, **overrides})
        except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
            logger.warning("Ignoring theme %s: %s", path, e)

    return ThemeColors.model_validate(colors)


@functools.cache
def get_theme() -> Theme:
    """Return the Rich theme, loaded on first use."""
    return Theme(load_theme().to_styles())
