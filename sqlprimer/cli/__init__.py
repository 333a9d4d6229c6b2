"""CLI entry point for sqlprimer."""

import logging

import click

from sqlprimer.cli.lessons_cmd import lessons_cmd
from sqlprimer.cli.query_cmd import query_cmd
from sqlprimer.cli.repl_cmd import repl_cmd

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


@click.group()
@click.option("-v", "--verbose", count=True, help="More logging (-v info, -vv debug).")
def main(verbose: int) -> None:
    """Learn SQL by querying a table of house sales."""
    logging.basicConfig(
        level=_LOG_LEVELS[min(verbose, len(_LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )


main.add_command(query_cmd)
main.add_command(repl_cmd)
main.add_command(lessons_cmd)
