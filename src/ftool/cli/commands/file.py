"""File command - basic facts about any file."""

import sys
from pathlib import Path

import click

from ...context import pass_context
from ..helpers import require_one_action, setup_logging


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("-i", "--info", is_flag=True, help="Show size and permissions")
@click.option("-l", "--lines", is_flag=True, help="Count lines")
@click.option("-s", "--size", is_flag=True, help="Show size in bytes")
@click.option("-h", "--head", "head", type=int, help="Print the first N lines")
@pass_context
def file(ctx, path, info, lines, size, head):
    """Show information about PATH. Exactly one option is required.

    Examples:
        ftool file data.csv --info
        ftool file data.csv --head 5
    """
    setup_logging(ctx, to_file=False)
    action = require_one_action(info=info, lines=lines, size=size, head=head)
    fs = ctx.services().fs

    try:
        if action == "info":
            meta = fs.metadata(path)
            click.echo(f"Path: {path}")
            click.echo(f"Size: {meta.size} bytes")
            click.echo(f"Readonly: {str(meta.readonly).lower()}")
        elif action == "lines":
            click.echo(f"File {path} has {fs.line_count(path)} lines")
        elif action == "size":
            click.echo(f"File {path} has {fs.metadata(path).size} bytes")
        else:
            if head < 0:
                click.echo("Error: --head must be >= 0", err=True)
                sys.exit(1)
            for line in fs.read_head(path, head):
                click.echo(line)
    except FileNotFoundError:
        click.echo(f"Error: File not found: {path}", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
