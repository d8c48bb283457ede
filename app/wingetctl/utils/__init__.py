"""Utility modules for wingetctl.

This module exports commonly used utility functions.
"""

from wingetctl.utils.formatting import (
    console,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from wingetctl.utils.shell import CommandResult, run_command

__all__ = [
    "CommandResult",
    "console",
    "create_package_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
