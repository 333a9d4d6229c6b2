"""Tests for CSV and Excel loading and type inference."""

import datetime
import io
from pathlib import Path

import openpyxl
import pytest

from sqlprimer.data.loader import LoadError, coerce_row, infer_types, load_csv, load_table, load_xlsx
from sqlprimer.model.relation import Relation


class TestInferTypes:
    """Test type inference from cell values."""

    def test_all_ints(self) -> None:
        types = infer_types(["age", "id"], [["30", "1"], ["25", "2"]])
        assert types == {"age": "BIGINT", "id": "BIGINT"}

    def test_mixed_int_float(self) -> None:
        """If some values are int and some are float, the column is DOUBLE."""
        assert infer_types(["val"], [["1"], ["2.5"]]) == {"val": "DOUBLE"}

    def test_all_bool(self) -> None:
        rows = [["true"], ["false"], ["True"]]
        assert infer_types(["active"], rows) == {"active": "BOOLEAN"}

    def test_mixed_types_fallback_to_varchar(self) -> None:
        assert infer_types(["val"], [["42"], ["hello"]]) == {"val": "VARCHAR"}

    def test_nulls_ignored(self) -> None:
        assert infer_types(["age"], [["30"], [None], ["25"]]) == {"age": "BIGINT"}

    def test_all_null_is_varchar(self) -> None:
        assert infer_types(["x"], [[None], [None]]) == {"x": "VARCHAR"}

    def test_nan_is_text(self) -> None:
        assert infer_types(["x"], [["nan"]]) == {"x": "VARCHAR"}

    def test_typed_cells(self) -> None:
        """Spreadsheet cells vote with their own type."""
        rows = [[1, 2.25, datetime.datetime(2014, 10, 13)], [2, 1.0, datetime.datetime(2015, 2, 25)]]
        types = infer_types(["id", "bathrooms", "date"], rows)
        assert types == {"id": "BIGINT", "bathrooms": "DOUBLE", "date": "TIMESTAMP"}

    def test_typed_and_numeric_text(self) -> None:
        assert infer_types(["x"], [[1], ["2.5"]]) == {"x": "DOUBLE"}
        assert infer_types(["x"], [[1], ["n/a"]]) == {"x": "VARCHAR"}

    def test_empty_rows(self) -> None:
        assert infer_types([], []) == {}


class TestCoerceRow:
    """Test row coercion."""

    def test_coercion(self) -> None:
        row = coerce_row(["30", "3.5", "true", "Alice"], ["BIGINT", "DOUBLE", "BOOLEAN", "VARCHAR"])
        assert row == [30, 3.5, True, "Alice"]
        assert isinstance(row[0], int)
        assert isinstance(row[1], float)

    def test_null_preserved(self) -> None:
        assert coerce_row([None], ["BIGINT"]) == [None]

    def test_int_cell_in_varchar_column(self) -> None:
        assert coerce_row([7], ["VARCHAR"]) == ["7"]


class TestLoadCsv:
    """Test full CSV loading pipeline."""

    def test_basic(self) -> None:
        result = load_csv(io.StringIO("name,age\nAlice,30\nBob,25\n"), "people")
        assert isinstance(result, Relation)
        assert len(result) == 2
        assert result.schema == {"name": "VARCHAR", "age": "BIGINT"}
        assert result.column("age") == [30, 25]

    def test_header_whitespace_stripped(self) -> None:
        result = load_csv(io.StringIO(" id , price \n1,2.5\n"), "h")
        assert result.column_names == ["id", "price"]
        assert result.schema["price"] == "DOUBLE"

    def test_empty_cells_become_null(self) -> None:
        result = load_csv(io.StringIO("id,price\n1,\n2,300\n"), "h")
        assert result.column("price") == [None, 300]

    def test_malformed_rows_skipped(self) -> None:
        result = load_csv(io.StringIO("a,b\n1,2\n3\n4,5\n"), "t")
        assert result.column("a") == [1, 4]

    def test_blank_lines_skipped(self) -> None:
        result = load_csv(io.StringIO("a\n1\n\n2\n"), "t")
        assert len(result) == 2

    def test_header_only(self) -> None:
        result = load_csv(io.StringIO("a,b\n"), "t")
        assert result.column_names == ["a", "b"]
        assert len(result) == 0

    def test_no_header(self) -> None:
        with pytest.raises(LoadError, match="no header row"):
            load_csv(io.StringIO(""), "t")

    def test_genkey(self) -> None:
        result = load_csv(io.StringIO("name\nAlice\nAlice\n"), "people", genkey="people")
        assert result.column_names == ["people_id", "name"]
        assert result.column("people_id") == [1, 2]
        assert result.schema["people_id"] == "BIGINT"

    def test_genkey_collision(self) -> None:
        with pytest.raises(LoadError, match="already exists"):
            load_csv(io.StringIO("t_id\n1\n"), "t", genkey="t")

    def test_blank_header_named_by_position(self) -> None:
        result = load_csv(io.StringIO(",id,price\n0,1,2.5\n"), "h")
        assert result.column_names == ["column1", "id", "price"]
        assert result.column("column1") == [0]

    @pytest.mark.parametrize("text", ["a,a\nx,1\n", "id,ID\n1,2\n"])
    def test_duplicate_header(self, text: str) -> None:
        with pytest.raises(LoadError, match="duplicate column"):
            load_csv(io.StringIO(text), "t")


def _write_xlsx(path: Path, rows: list[list[object]], title: str = "Sheet1") -> None:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)
    wb.save(path)


class TestLoadXlsx:
    """Test Excel loading through openpyxl."""

    def test_typed_cells(self, tmp_path: Path) -> None:
        path = tmp_path / "houses.xlsx"
        _write_xlsx(
            path,
            [
                ["id", "price", "bathrooms", "zipcode"],
                [7129300520, 221900, 1, "98178"],
                [6414100192, 538000, 2.25, "98125"],
            ],
        )
        rel = load_xlsx(path, "houses")
        assert rel.schema == {
            "id": "BIGINT",
            "price": "BIGINT",
            "bathrooms": "DOUBLE",
            "zipcode": "BIGINT",
        }
        assert rel.column("bathrooms") == [1.0, 2.25]
        assert rel.column("zipcode") == [98178, 98125]

    def test_empty_rows_skipped_and_missing_cells_null(self, tmp_path: Path) -> None:
        path = tmp_path / "t.xlsx"
        _write_xlsx(path, [["a", "b"], [1, 2], [None, None], [3]])
        rel = load_xlsx(path, "t")
        assert rel.rows == ((1, 2), (3, None))

    def test_named_sheet(self, tmp_path: Path) -> None:
        path = tmp_path / "book.xlsx"
        wb = openpyxl.Workbook()
        wb.active.append(["x"])
        other = wb.create_sheet("sales")
        other.append(["price"])
        other.append([100])
        wb.save(path)

        rel = load_xlsx(path, "sales", sheet="sales")
        assert rel.column("price") == [100]

        with pytest.raises(LoadError, match="no sheet named"):
            load_xlsx(path, "sales", sheet="nope")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LoadError, match="Cannot read"):
            load_xlsx(tmp_path / "missing.xlsx", "missing")


class TestLoadTable:
    """Test suffix dispatch."""

    def test_csv(self, tmp_path: Path) -> None:
        path = tmp_path / "owners.csv"
        path.write_text("id,owner\n1,Alice\n")
        rel = load_table(path)
        assert rel.column("owner") == ["Alice"]

    def test_xlsx(self, tmp_path: Path) -> None:
        path = tmp_path / "owners.xlsx"
        _write_xlsx(path, [["id", "owner"], [1, "Alice"]])
        assert load_table(path).column("id") == [1]

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{}")
        with pytest.raises(LoadError, match="Unsupported file type"):
            load_table(path)

    def test_missing_csv(self, tmp_path: Path) -> None:
        with pytest.raises(LoadError, match="Cannot read"):
            load_table(tmp_path / "missing.csv")

    def test_sheet_with_csv(self, tmp_path: Path) -> None:
        path = tmp_path / "a.csv"
        path.write_text("x\n1\n")
        with pytest.raises(LoadError, match="only applies to Excel"):
            load_table(path, sheet="s")

    def test_csv_byte_order_mark(self, tmp_path: Path) -> None:
        path = tmp_path / "export.csv"
        path.write_text("id,price\n1,2\n", encoding="utf-8-sig")
        assert load_table(path).column_names == ["id", "price"]

    def test_undecodable_csv(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.csv"
        path.write_bytes(b"name\n\xff\xfe\xfa\n")
        with pytest.raises(LoadError, match="Cannot read"):
            load_table(path)
