"""Utility modules for deltree.

This module exports commonly used utility functions.
"""

from deltree.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
