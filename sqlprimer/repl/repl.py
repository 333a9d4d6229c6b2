"""REPL loop: read SQL, execute, display."""

from __future__ import annotations

import readline  # noqa: F401  enables line editing and history for input()
from pathlib import Path

from sqlprimer.data.loader import LoadError, load_table
from sqlprimer.data.sample import load_sample_data
from sqlprimer.executor.environment import Environment
from sqlprimer.executor.errors import QueryError
from sqlprimer.executor.runner import QueryRunner
from sqlprimer.repl.formatter import format_relation, format_schema

PROMPT = "sql> "
CONTINUATION_PROMPT = "...> "


def run_repl(env: Environment | None = None, max_rows: int | None = 50) -> None:
    """Run the interactive REPL."""
    if env is None:
        env = Environment()

    print("sqlprimer REPL")
    print(
        "End statements with ';'. Commands: \\tables, \\schema <name>, "
        "\\load <file>, \\sample, \\drop <name>, \\quit"
    )
    print()

    buffer: list[str] = []
    with QueryRunner() as runner:
        while True:
            try:
                line = input(CONTINUATION_PROMPT if buffer else PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                break

            stripped = line.strip()
            if not buffer and not stripped:
                continue

            if not buffer and stripped.startswith("\\"):
                _handle_command(stripped, env)
                continue

            buffer.append(line)
            if not stripped.endswith(";"):
                continue

            query = "\n".join(buffer).strip().rstrip(";").strip()
            buffer = []
            run_query(query, env, runner, max_rows=max_rows)
            print()


def run_query(
    query: str,
    env: Environment,
    runner: QueryRunner,
    *,
    max_rows: int | None = None,
) -> None:
    """Execute one query against the environment and print the outcome."""
    try:
        result = runner.execute(query, env.all_bindings())
        print(format_relation(result, max_rows=max_rows))
    except (QueryError, ValueError) as e:
        print(f"Error: {e}")


def _handle_command(line: str, env: Environment) -> None:
    """Handle REPL meta-commands."""
    parts = line.split()
    cmd = parts[0].lower()
    args = parts[1:]

    if cmd in ("\\quit", "\\q"):
        raise SystemExit(0)
    elif cmd == "\\load":
        _cmd_load(args, env)
    elif cmd == "\\sample":
        load_sample_data(env)
        print("Loaded: houses, owners, neighborhoods")
    elif cmd == "\\drop":
        _cmd_drop(args, env)
    elif cmd in ("\\tables", "\\dt"):
        _cmd_tables(env)
    elif cmd == "\\schema":
        _cmd_schema(args, env)
    else:
        print(f"Unknown command: {cmd}")


def _cmd_load(args: list[str], env: Environment) -> None:
    """Handle \\load: load a CSV or Excel file."""
    # Parse options: --as=Name, --sheet=Name, --genkey, --genkey=Name.
    file_arg = None
    alias = None
    sheet = None
    genkey: str | None = None
    genkey_seen = False
    for arg in args:
        if arg.startswith("--as="):
            alias = arg[len("--as="):]
        elif arg.startswith("--sheet="):
            sheet = arg[len("--sheet="):]
        elif arg == "--genkey":
            genkey_seen = True
        elif arg.startswith("--genkey="):
            genkey_seen = True
            genkey = arg[len("--genkey="):]
        elif file_arg is None:
            file_arg = arg
        else:
            print(f"Error: unexpected argument: {arg}")
            return

    if file_arg is None:
        print("Error: \\load requires a filename")
        return

    path = Path(file_arg)
    if not path.exists():
        print(f"Error: file not found: {path}")
        return

    name = alias if alias else path.stem
    if genkey_seen and genkey is None:
        genkey = name
    try:
        rel = load_table(path, name, sheet=sheet, genkey=genkey)
    except LoadError as e:
        print(f"Error: {e}")
        return
    env.bind(name, rel)
    print(f"Loaded {name}: {len(rel)} rows, columns: {', '.join(rel.column_names)}")


def _cmd_drop(args: list[str], env: Environment) -> None:
    """Handle \\drop: remove a relation from the environment."""
    if not args:
        print("Error: \\drop requires a relation name")
        return

    name = args[0]
    try:
        env.unbind(name)
        print(f"Dropped {name}")
    except KeyError:
        print(f"Error: unknown relation: {name!r}")


def _cmd_tables(env: Environment) -> None:
    """Handle \\tables: list loaded relations."""
    names = env.names()
    if not names:
        print("(no relations loaded)")
    else:
        for name in names:
            rel = env.lookup(name)
            print(f"  {name}: {len(rel)} rows, {len(rel.columns)} columns")


def _cmd_schema(args: list[str], env: Environment) -> None:
    """Handle \\schema: show a relation's columns and types."""
    if not args:
        print("Error: \\schema requires a relation name")
        return
    name = args[0]
    if name not in env:
        print(f"Error: unknown relation: {name!r}")
        return
    print(format_schema(env.lookup(name)))
