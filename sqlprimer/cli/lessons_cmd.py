"""CLI subcommand: lessons."""

import textwrap

import click

from sqlprimer.data.loader import LoadError, load_table
from sqlprimer.data.sample import DEFAULT_SEED, load_sample_data
from sqlprimer.executor.environment import Environment
from sqlprimer.executor.errors import QueryError
from sqlprimer.executor.runner import QueryRunner
from sqlprimer.repl.formatter import format_relation
from sqlprimer.tutorial.lessons import LESSONS, get_lesson, run_lesson


@click.command("lessons")
@click.argument("keys", nargs=-1)
@click.option(
    "--data",
    "data_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Spreadsheet of house sales to load as 'houses' (default: bundled sample).",
)
@click.option("--sheet", default=None, help="Worksheet to read from an Excel file.")
@click.option(
    "--seed", type=int, default=DEFAULT_SEED, show_default=True,
    help="Seed for the synthetic owners and neighborhoods tables.",
)
@click.option("--list", "list_only", is_flag=True, help="List lessons without running them.")
@click.option(
    "--max-rows", type=click.IntRange(min=0), default=10, show_default=True,
    help="Print at most N rows per result.",
)
def lessons_cmd(
    keys: tuple[str, ...],
    data_path: str | None,
    sheet: str | None,
    seed: int,
    list_only: bool,
    max_rows: int,
) -> None:
    """Walk through the SQL tutorial.

    Runs every lesson in order, or only the lessons named by KEYS.
    """
    try:
        lessons = [get_lesson(k) for k in keys] if keys else LESSONS
    except KeyError as e:
        raise click.ClickException(e.args[0])

    if list_only:
        for lesson in lessons:
            click.echo(f"{lesson.key:<16} [{lesson.section}] {lesson.title}")
        return

    env = Environment()
    houses = None
    if data_path is not None:
        try:
            houses = load_table(data_path, "houses", sheet=sheet)
        except LoadError as e:
            raise click.ClickException(str(e))
    try:
        load_sample_data(env, houses, seed=seed)
    except KeyError as e:
        raise click.ClickException(f"{data_path}: {e.args[0]}")

    with QueryRunner(env.all_bindings()) as runner:
        for lesson in lessons:
            click.echo(f"== {lesson.title} ({lesson.section})")
            click.echo(textwrap.fill(lesson.text, width=78))
            click.echo()
            click.echo(f"    {lesson.query}")
            click.echo()
            try:
                result = run_lesson(lesson, runner, env.all_bindings())
            except QueryError as e:
                raise click.ClickException(f"{lesson.key}: {e}")
            click.echo(format_relation(result, max_rows=max_rows))
            click.echo()
