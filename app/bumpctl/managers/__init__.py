"""Package manager adapters.

This module exports the package manager interface and its implementations.
"""

from bumpctl.managers.base import PackageManager
from bumpctl.managers.yarn import YarnManager

__all__ = ["PackageManager", "YarnManager"]
