"""Shared helpers for bumpctl.

Subprocess execution and Rich console output used across the package.
"""

from bumpctl.utils.formatting import (
    console,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from bumpctl.utils.shell import CommandResult, CommandRunner, command_exists, run_command

__all__ = [
    "CommandResult",
    "CommandRunner",
    "command_exists",
    "console",
    "create_package_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
