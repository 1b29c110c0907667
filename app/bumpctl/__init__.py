"""bumpctl - Dependency update bot for Yarn projects hosted on GitHub."""

__version__ = "0.1.0"
