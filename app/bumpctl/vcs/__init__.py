"""Version control adapters."""

from bumpctl.vcs.git import GitClient

__all__ = ["GitClient"]
