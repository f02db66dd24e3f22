"""
Command-line interface for shipver.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from shipver.config import load_config
from shipver.__version__ import __version__
from shipver.context import ShipverContext
from shipver.exceptions import ConfigurationError, ShipverError
from shipver.utils.logger import get_logger, level_for_verbosity, setup_logging
from shipver.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="SHIPVER_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="SHIPVER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="shipver",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """shipver — semantic versioning and release channels for CI/CD.

    \b
    Available commands:
      shipver resolve              Calculate the next version
      shipver route CATEGORY       Show publish targets for a category

    \b
    Examples:
      shipver resolve --format github --write
      shipver -v resolve --branch develop --run-number 17 --sha a1b2c3d4
      shipver route rc

    Use ``shipver COMMAND --help`` for command-specific options.
    """
    # Respect NO_COLOR for Rich and the log formatter
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigurationError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    shipver_ctx = ShipverContext()
    shipver_ctx.config_path = config or loaded_config.source_path
    shipver_ctx.color = color
    shipver_ctx.verbose = verbose
    shipver_ctx.config = loaded_config
    ctx.obj = shipver_ctx

    logger.debug("shipver v%s", __version__)
    logger.debug("Config path: %s", shipver_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = level_for_verbosity(verbose)
    setup_logging(level=level)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from shipver.commands.resolve import resolve  # noqa: E402
from shipver.commands.route import route  # noqa: E402

cli.add_command(resolve)
cli.add_command(route)


def main() -> int:
    """Main entry point for the shipver CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except ShipverError as exc:
        print_error(str(exc))
        logger.debug(
            "ShipverError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
