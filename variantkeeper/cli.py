"""
Command-line interface for variantkeeper.

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

from variantkeeper.config import load_config
from variantkeeper.__version__ import __version__
from variantkeeper.context import VariantKeeperContext
from variantkeeper.exceptions import ConfigError, VariantKeeperError
from variantkeeper.utils.console import print_error, print_warning, reconfigure_console
from variantkeeper.utils.logger import get_logger, level_for_verbosity, setup_logging

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="VARIANTKEEPER_CONFIG",
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
    envvar="VARIANTKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="variantkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """variantkeeper: pick the right source for Arch packages.

    \b
    Available commands:
      variantkeeper resolve NAME   Show variants, selection and install state
      variantkeeper sources        Show the source priority order
      variantkeeper compare A B    Compare two package versions

    \b
    Examples:
      variantkeeper resolve firefox
      variantkeeper resolve firefox --prefer chaotic
      variantkeeper -v resolve neovim --format json
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    vk_ctx = VariantKeeperContext()
    vk_ctx.config_path = config or loaded_config.source_path
    vk_ctx.color = color
    vk_ctx.verbose = verbose
    vk_ctx.config = loaded_config
    ctx.obj = vk_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("variantkeeper v%s", __version__)
    logger.debug("Config path: %s", vk_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from variantkeeper.commands.resolve import resolve  # noqa: E402
from variantkeeper.commands.sources import compare, sources  # noqa: E402

cli.add_command(resolve)
cli.add_command(sources)
cli.add_command(compare)


def main() -> int:
    """Main entry point for the variantkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except VariantKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "VariantKeeperError details: %s",
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
