"""Tests for REPL slash commands and query handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from sqlprimer.executor.environment import Environment
from sqlprimer.executor.runner import QueryRunner
from sqlprimer.model.relation import Relation
from sqlprimer.model.types import Column
from sqlprimer.repl import repl as repl_module
from sqlprimer.repl.repl import _handle_command, run_query


def _owners() -> Relation:
    return Relation([Column("id", "BIGINT"), Column("owner", "VARCHAR")], [(1, "Alice")])


class TestEnvironmentUnbind:
    """Test Environment.unbind()."""

    def test_unbind_existing(self) -> None:
        env = Environment()
        env.bind("R", _owners())
        env.unbind("R")
        assert "R" not in env

    def test_unbind_missing_raises(self) -> None:
        env = Environment()
        with pytest.raises(KeyError, match="Unknown relation"):
            env.unbind("nope")

    def test_unbind_ignores_case(self) -> None:
        env = Environment()
        env.bind("Owners", _owners())
        env.unbind("owners")
        assert env.names() == []

    def test_rebind_in_other_case_replaces(self) -> None:
        env = Environment()
        env.bind("owners", _owners())
        env.bind("Owners", _owners())
        assert env.names() == ["Owners"]
        assert list(env.all_bindings()) == ["Owners"]


class TestLoadCommand:
    """Test \\load with file arguments."""

    def test_load_csv_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        csv_file = tmp_path / "users.csv"
        csv_file.write_text("name,age\nAlice,30\nBob,25\n")

        env = Environment()
        _handle_command(f"\\load {csv_file}", env)

        assert "users" in env
        assert len(env.lookup("users")) == 2
        out = capsys.readouterr().out
        assert "Loaded users: 2 rows, columns: name, age" in out

    def test_load_with_alias_and_genkey(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        csv_file = tmp_path / "data.csv"
        csv_file.write_text("x\n1\n2\n")

        env = Environment()
        _handle_command(f"\\load {csv_file} --as=MyData --genkey", env)

        assert "MyData" in env
        assert "data" not in env
        assert env.lookup("MyData").column_names == ["MyData_id", "x"]

    def test_load_missing_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        env = Environment()
        _handle_command("\\load /no/such/file.csv", env)
        assert "file not found" in capsys.readouterr().out

    def test_load_requires_filename(self, capsys: pytest.CaptureFixture[str]) -> None:
        _handle_command("\\load", Environment())
        assert "requires a filename" in capsys.readouterr().out

    def test_load_bad_file_type(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        env = Environment()
        _handle_command(f"\\load {path}", env)
        assert "Unsupported file type" in capsys.readouterr().out
        assert "notes" not in env


class TestOtherCommands:
    """Test \\sample, \\tables, \\schema, \\drop and unknown commands."""

    def test_sample(self, capsys: pytest.CaptureFixture[str]) -> None:
        env = Environment()
        _handle_command("\\sample", env)
        assert env.names() == ["houses", "neighborhoods", "owners"]
        assert "Loaded: houses" in capsys.readouterr().out

    def test_tables(self, capsys: pytest.CaptureFixture[str]) -> None:
        env = Environment()
        _handle_command("\\tables", env)
        assert "(no relations loaded)" in capsys.readouterr().out

        env.bind("owners", _owners())
        _handle_command("\\tables", env)
        assert "owners: 1 rows, 2 columns" in capsys.readouterr().out

    def test_schema(self, capsys: pytest.CaptureFixture[str]) -> None:
        env = Environment()
        env.bind("owners", _owners())
        _handle_command("\\schema owners", env)
        out = capsys.readouterr().out
        assert "| owner  | VARCHAR |" in out

    def test_schema_unknown(self, capsys: pytest.CaptureFixture[str]) -> None:
        _handle_command("\\schema nope", Environment())
        assert "unknown relation" in capsys.readouterr().out

    def test_drop(self, capsys: pytest.CaptureFixture[str]) -> None:
        env = Environment()
        env.bind("owners", _owners())
        _handle_command("\\drop owners", env)
        assert "owners" not in env
        assert "Dropped owners" in capsys.readouterr().out

    def test_drop_unknown(self, capsys: pytest.CaptureFixture[str]) -> None:
        _handle_command("\\drop nope", Environment())
        assert "unknown relation" in capsys.readouterr().out

    def test_unknown_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        _handle_command("\\frobnicate", Environment())
        assert "Unknown command" in capsys.readouterr().out

    def test_quit(self) -> None:
        with pytest.raises(SystemExit):
            _handle_command("\\q", Environment())


class TestRunQuery:
    """Test printing results and errors."""

    def test_prints_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        env = Environment()
        env.bind("owners", _owners())
        with QueryRunner() as runner:
            run_query("SELECT owner FROM owners", env, runner)
        out = capsys.readouterr().out
        assert "| Alice |" in out
        assert "(1 row)" in out

    def test_prints_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with QueryRunner() as runner:
            run_query("SELECT * FROM owners", Environment(), runner)
        assert capsys.readouterr().out.startswith("Error:")


class TestReplLoop:
    """Drive run_repl with scripted input."""

    def test_multiline_statement(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        lines = iter(["\\sample", "SELECT COUNT(*) AS n", "FROM houses;"])

        def fake_input(prompt: str) -> str:
            try:
                return next(lines)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)
        repl_module.run_repl()
        out = capsys.readouterr().out
        assert "| 20 |" in out
