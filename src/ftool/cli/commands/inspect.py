"""Inspect command - one-shot queries against a CSV or Parquet file."""

import sys
from pathlib import Path

import click

from ...context import pass_context
from ...engine.duckdb_ import describe_columns
from ...exceptions import EngineError
from ..helpers import require_one_action, setup_logging


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("-d", "--desc", is_flag=True, help="Describe columns and types")
@click.option("-r", "--row-count", is_flag=True, help="Count rows")
@click.option("-n", "--null-count", metavar="COLUMN", help="Count nulls in COLUMN")
@click.option(
    "-c",
    "--convert",
    type=click.Choice(["csv", "parquet"], case_sensitive=False),
    help="Write a converted copy next to PATH",
)
@pass_context
def inspect(ctx, path, desc, row_count, null_count, convert):
    """Query a .csv or .parquet file. Exactly one option is required.

    Examples:
        ftool inspect sales.parquet --desc
        ftool inspect sales.csv --null-count region
        ftool inspect sales.csv --convert parquet
    """
    setup_logging(ctx, to_file=False)
    action = require_one_action(
        desc=desc, row_count=row_count, null_count=null_count, convert=convert
    )

    try:
        with ctx.services().open_engine(path) as engine:
            if action == "desc":
                for line in describe_columns(engine.columns()):
                    click.echo(line)
            elif action == "row_count":
                click.echo(f"Row count: {engine.row_count()}")
            elif action == "null_count":
                click.echo(
                    f"Null values in column '{null_count}': {engine.null_count(null_count)}"
                )
            else:
                click.echo(f"File converted to {engine.convert(convert)}")
    except EngineError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
