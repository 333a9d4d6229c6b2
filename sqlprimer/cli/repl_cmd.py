"""CLI subcommand: repl."""

import os
import sys

import click

from sqlprimer.cli.sources import load_sources
from sqlprimer.data.sample import load_sample_data
from sqlprimer.executor.environment import Environment
from sqlprimer.repl.repl import run_repl


@click.command("repl")
@click.argument("files", nargs=-1, type=click.Path())
@click.option(
    "--as",
    "aliases",
    multiple=True,
    help="Bind a file with an explicit name: --as name=path.xlsx",
)
@click.option("--sheet", default=None, help="Worksheet to read from Excel files.")
@click.option("--sample", is_flag=True, help="Load sample data before starting.")
@click.option("--genkey", "genkey", is_flag=True, help="Generate synthetic key column")
@click.option(
    "--max-rows", type=click.IntRange(min=0), default=50, show_default=True,
    help="Print at most N rows per result.",
)
def repl_cmd(
    files: tuple[str, ...],
    aliases: tuple[str, ...],
    sheet: str | None,
    sample: bool,
    genkey: bool,
    max_rows: int,
) -> None:
    """Start the interactive SQL shell.

    Optionally load CSV or Excel files as tables before entering the REPL.
    Use - or --as name=- to read CSV from stdin.
    """
    env = Environment()

    if sample:
        load_sample_data(env)

    load_sources(env, files, aliases, sheet=sheet, genkey=genkey)

    stdin_consumed = "-" in files or any(a.split("=", 1)[-1].strip() == "-" for a in aliases)

    # If stdin was consumed for data, reopen fd 0 from the terminal
    # so the REPL can still read interactive input with readline history.
    if stdin_consumed:
        try:
            tty_fd = os.open("/dev/tty", os.O_RDONLY)
            os.dup2(tty_fd, 0)
            os.close(tty_fd)
            sys.stdin = open(0, closefd=False)
            sys.stdout.reconfigure(line_buffering=True)
        except OSError:
            raise click.ClickException(
                "Cannot reopen terminal for interactive input after reading stdin"
            )

    if env.names():
        click.echo(f"Loaded: {', '.join(env.names())}")

    run_repl(env, max_rows=max_rows)
