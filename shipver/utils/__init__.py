"""
Utility helpers for shipver.

This package provides reusable utilities used across shipver, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from shipver.utils.filesystem import (
    append_lines,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from shipver.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from shipver.utils.console import (
    colorize_category,
    print_error,
    print_outputs,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_outputs",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "colorize_category",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "level_for_verbosity",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "append_lines",
]
