"""
Executable module for shipver.

Running:
    python -m shipver

is equivalent to:
    shipver

This module simply forwards execution to the CLI entrypoint defined in
`shipver.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    try:
        from shipver.__version__ import __version__

        sys.stderr.write(f"shipver version: {__version__}\n")
    except ImportError:
        sys.stderr.write("shipver version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m shipver`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from shipver.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
