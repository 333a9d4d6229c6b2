"""Loading the files named on the command line into an Environment."""

from __future__ import annotations

import pathlib
import sys

import click

from sqlprimer.data.loader import EXCEL_SUFFIXES, LoadError, load_csv, load_table
from sqlprimer.executor.environment import Environment


def load_sources(
    env: Environment,
    files: tuple[str, ...],
    aliases: tuple[str, ...],
    *,
    sheet: str | None = None,
    genkey: bool = False,
) -> None:
    """Bind every file (positional or ``--as name=path``) into *env*.

    Positional files are named after their stem. ``-`` reads CSV from stdin,
    bound as ``stdin`` unless an alias names it.
    """
    # Load aliased files (- means stdin)
    for alias in aliases:
        if "=" not in alias:
            raise click.ClickException(f"Invalid --as format: {alias!r} (expected name=path)")
        name, path = alias.split("=", 1)
        _load(env, path.strip(), name.strip(), sheet=sheet, genkey=genkey)

    # Load positional files (stem becomes name, - means stdin)
    for filepath in files:
        name = "stdin" if filepath == "-" else pathlib.Path(filepath).stem
        _load(env, filepath, name, sheet=sheet, genkey=genkey)


def _load(
    env: Environment, path: str, name: str, *, sheet: str | None, genkey: bool
) -> None:
    key = name if genkey else None
    try:
        if path == "-":
            rel = load_csv(sys.stdin, name, genkey=key)
        else:
            if not path.lower().endswith(EXCEL_SUFFIXES):
                sheet = None
            rel = load_table(path, name, sheet=sheet, genkey=key)
    except LoadError as e:
        raise click.ClickException(str(e))
    env.bind(name, rel)
