"""XDG-compliant path management for bumpctl.

Only the configuration directory is needed: bumpctl keeps no state
between runs.
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "bumpctl"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/bumpctl/ (or XDG_CONFIG_HOME/bumpctl/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_default_config_path() -> Path:
    """Get the default bot configuration file path.

    Returns:
        Path to ~/.config/bumpctl/config.toml.
    """
    return get_config_dir() / "config.toml"
