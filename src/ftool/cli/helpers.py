"""Shared helpers for CLI commands."""

import sys

import click

from ..logs import configure_logging
from ..models import Settings


def setup_logging(ctx, to_file: bool) -> None:
    """Log to the home log file for the TUI, to stderr otherwise."""
    settings = ctx.settings or Settings()
    configure_logging(settings.log_level, ctx.log_path if to_file else None)


def require_one_action(**actions) -> str:
    """Return the name of the single requested action, or exit with an error."""
    chosen = [name for name, value in actions.items() if value not in (None, False)]
    if len(chosen) != 1:
        flags = ", ".join(f"--{name.replace('_', '-')}" for name in actions)
        click.echo(f"Error: Specify exactly one of {flags}", err=True)
        sys.exit(1)
    return chosen[0]
