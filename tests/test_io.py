import pandas as pd
import pytest

from sheetdiff.errors import IngestionError, UsageError
from sheetdiff.io import (
    detect_format,
    excel_sheet_name,
    frame_to_table,
    header_warnings,
    load_table,
    load_workbook,
    write_table,
)
from sheetdiff.table import Table


def test_detect_format():
    assert detect_format("a.CSV") == "csv"
    assert detect_format("a.xlsx") == "excel"
    assert detect_format("a.xls") == "excel"
    assert detect_format("a.pq") == "parquet"
    with pytest.raises(IngestionError, match="Unsupported file format"):
        detect_format("a.txt")


def test_frame_to_table_drops_nulls_and_unwraps_numpy():
    df = pd.DataFrame({"id": [1, 2], "name": ["A", None], "when": pd.to_datetime(["2024-01-02", "2024-01-02 10:30"])})
    table = frame_to_table(df, "s")

    assert table.rows[0] == {"id": 1, "name": "A", "when": "2024-01-02"}
    assert table.rows[1] == {"id": 2, "when": "2024-01-02 10:30:00"}
    assert type(table.rows[0]["id"]) is int


def test_csv_round_trip(tmp_path):
    path = tmp_path / "people.csv"
    write_table(Table("people", [{"id": 1, "name": "A"}, {"id": 2}]), path)

    book = load_workbook(path)
    assert book.name == "people.csv"
    assert [s.name for s in book.sheets] == ["people"]
    assert book.sheets[0].rows == [{"id": "1", "name": "A"}, {"id": "2"}]


def test_excel_workbook_has_one_table_per_sheet(tmp_path):
    path = tmp_path / "book.xlsx"
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame({"id": [1, 2], "v": ["a", "b"]}).to_excel(writer, sheet_name="Old", index=False)
        pd.DataFrame({"id": [2, 3], "v": ["b", "c"]}).to_excel(writer, sheet_name="New", index=False)

    book = load_workbook(path)
    assert book.labels() == ["book.xlsx - Old", "book.xlsx - New"]
    assert book.sheet("New").rows == [{"id": 2, "v": "b"}, {"id": 3, "v": "c"}]
    assert load_table(path).name == "Old"


def test_write_excel_uses_table_columns(tmp_path):
    path = tmp_path / "out.xlsx"
    write_table(Table("Merged/Result", [{"a": 1}, {"b": "x"}]), path)

    df = pd.read_excel(path, sheet_name=None)
    assert list(df) == ["Merged_Result"]
    assert list(df["Merged_Result"].columns) == ["a", "b"]


def test_unknown_sheet_is_a_usage_error(tmp_path):
    path = tmp_path / "a.csv"
    path.write_text("id\n1\n")
    with pytest.raises(UsageError, match="not found"):
        load_workbook(path).sheet("Nope")


def test_missing_file_raises_ingestion_error(tmp_path):
    with pytest.raises(IngestionError, match="File not found"):
        load_workbook(tmp_path / "missing.csv")


def test_empty_csv_raises_ingestion_error(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(IngestionError, match="no columns"):
        load_workbook(path)


def test_corrupt_excel_raises_ingestion_error(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip file")
    with pytest.raises(IngestionError, match="Could not read file"):
        load_workbook(path)


def test_writing_xls_is_refused(tmp_path):
    with pytest.raises(IngestionError, match="xls"):
        write_table(Table("t", [{"a": 1}]), tmp_path / "out.xls")


def test_header_warnings():
    assert header_warnings(["id", "name"]) == []
    assert "likely DATA" in header_warnings(["1", "2.5", "3"])[0]
    assert header_warnings(["id", "Unnamed: 1"]) == ["1 of 2 columns have no header"]


def test_excel_sheet_name_is_sanitized():
    assert excel_sheet_name("a/b:c") == "a_b_c"
    assert len(excel_sheet_name("x" * 40)) == 31
    assert excel_sheet_name("") == "Sheet1"


def test_header_only_csv_round_trips_its_columns(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("id,name\n")
    table = load_table(path)
    assert table.rows == []
    assert table.header == ["id", "name"]

    out = tmp_path / "out.csv"
    write_table(table, out)
    assert out.read_text().splitlines() == ["id,name"]
