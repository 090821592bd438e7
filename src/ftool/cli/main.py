"""ftool CLI main entry point with global options."""

import sys

import click

from .. import __version__, config
from ..context import FtoolContext, resolve_home


@click.group(invoke_without_command=True)
@click.option(
    "--home", type=click.Path(), help="ftool home directory (overrides $FTOOL_HOME)"
)
@click.version_option(__version__, prog_name="ftool")
@click.pass_context
def cli(ctx, home):
    """ftool - terminal file browser and data inspector.

    Without a command, starts the interactive browser.
    """
    ctx.ensure_object(FtoolContext)

    paths = resolve_home(home)
    ctx.obj.home = paths.home_dir
    try:
        ctx.obj.settings = config.use(paths.config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    ctx.obj.log_path = ctx.obj.settings.log_file or paths.log_path

    if ctx.invoked_subcommand is None:
        ctx.invoke(tui)


# Register commands at module level so tests can import cli with commands attached
from .commands.file import file
from .commands.inspect import inspect
from .commands.tui import tui

cli.add_command(tui)
cli.add_command(file)
cli.add_command(inspect)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
