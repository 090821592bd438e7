"""Tui command - start the interactive browser."""

import logging
import sys
from pathlib import Path

import click

from ...context import pass_context
from ...screens import build_navigator
from ...tui import FtoolApp
from ..helpers import setup_logging

logger = logging.getLogger(__name__)


@click.command()
@click.argument("path", required=False, type=click.Path(exists=True, path_type=Path))
@pass_context
def tui(ctx, path):
    """Browse files and inspect data interactively.

    Examples:
        ftool                     # Home menu
        ftool tui data/           # Browse a directory
        ftool tui data/sales.csv  # Open a file directly
    """
    setup_logging(ctx, to_file=True)
    try:
        navigator = build_navigator(ctx.services(), path, Path.cwd())
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    logger.info("Starting TUI at %s", path or Path.cwd())
    FtoolApp(navigator).run()
