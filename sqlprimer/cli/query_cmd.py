"""CLI subcommand: query."""

import click

from sqlprimer.cli.sources import load_sources
from sqlprimer.data.sample import load_sample_data
from sqlprimer.executor.environment import Environment
from sqlprimer.executor.errors import QueryError
from sqlprimer.executor.runner import execute
from sqlprimer.repl.formatter import format_relation


@click.command("query")
@click.argument("sql")
@click.argument("files", nargs=-1, type=click.Path())
@click.option(
    "--as",
    "aliases",
    multiple=True,
    help="Bind a file with an explicit name: --as name=path.xlsx",
)
@click.option("--sheet", default=None, help="Worksheet to read from Excel files.")
@click.option(
    "--sample",
    is_flag=True,
    default=False,
    help="Load sample data (houses, owners, neighborhoods).",
)
@click.option(
    "--genkey",
    is_flag=True,
    default=False,
    help="Generate synthetic {relation}_id key column for each loaded file.",
)
@click.option(
    "--max-rows", type=click.IntRange(min=0), default=None, help="Print at most N rows."
)
def query_cmd(
    sql: str,
    files: tuple[str, ...],
    aliases: tuple[str, ...],
    sheet: str | None,
    sample: bool,
    genkey: bool,
    max_rows: int | None,
) -> None:
    """Run a single SQL query and print the result.

    Load CSV or Excel files as tables. By default, the file stem (without
    extension) is used as the table name. Use --as name=path for explicit
    naming. Use - to read CSV from stdin (bound as 'stdin').
    """
    env = Environment()
    if sample:
        load_sample_data(env)
    load_sources(env, files, aliases, sheet=sheet, genkey=genkey)

    try:
        result = execute(sql, env.all_bindings())
    except (QueryError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(format_relation(result, max_rows=max_rows))
