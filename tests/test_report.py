from sheetdiff.compare import MatchStatus, compare
from sheetdiff.report import column_change_counts, flatten, generate_report, generate_stdout_summary, verdict
from sheetdiff.table import Table


def _result():
    left = Table("Sheet1", [{"id": 1, "name": "A"}, {"id": 2, "name": "B", "qty": 1}, {"id": 4, "name": "D"}])
    right = Table("Sheet2", [{"id": 2, "name": "B2", "qty": 2}, {"id": 3, "name": "C"}, {"id": 4, "name": "D"}])
    return left, right, compare(left, "id", right, "id")


def test_flatten_one_row_per_entry():
    _, _, result = _result()
    table = flatten(result)

    assert len(table) == len(result)
    assert table.rows[0] == {"Status": "LeftOnly", "Key": 1, "id": 1, "name": "A", "qty": None}
    assert table.rows[1] == {
        "Status": "Changed", "Key": 2, "id": 2, "name": "B", "qty": 1,
        "name (Right)": "B2", "qty (Right)": 2,
    }
    assert table.rows[2]["Status"] == "Unchanged"
    assert table.rows[3] == {"Status": "RightOnly", "Key": 3, "id": 3, "name": "C", "qty": None}
    assert table.columns[:2] == ["Status", "Key"]


def test_flatten_filters_statuses():
    _, _, result = _result()
    table = flatten(result, (MatchStatus.CHANGED,))
    assert [row["Key"] for row in table.rows] == [2]


def test_column_change_counts():
    _, _, result = _result()
    assert column_change_counts(result) == {"name": 1, "qty": 1}


def test_verdicts():
    _, _, result = _result()
    assert verdict(result) == "DIFFERENT"

    same = Table("S", [{"id": 1}])
    assert verdict(compare(same, "id", same.copy(), "id")) == "IDENTICAL"

    added = compare(same, "id", Table("T", [{"id": 1}, {"id": 2}]), "id")
    assert verdict(added) == "DIFFERENT (rows added/removed only)"


def test_stdout_summary_lists_counts():
    _, _, result = _result()
    text = generate_stdout_summary(result)
    assert "Changed:     1" in text
    assert "OVERALL: DIFFERENT" in text
    assert "- name: 1" in text


def test_markdown_report_sections():
    left, right, result = _result()
    text = generate_report(result, left, right)

    assert "# Sheet Comparison Report" in text
    assert "✓ Keys are unique in Left" in text
    assert "| Changed | 1 |" in text
    assert "| `2` | name | `B` | `B2` |" in text
    assert "## 5. Rows Only in Left" in text
    assert "## 6. Rows Only in Right" in text
    assert "## 7. Unchanged Rows" not in text
    assert "Unchanged Rows" in generate_report(result, left, right, show_unchanged=True)


def test_markdown_report_flags_missing_key_column():
    left = Table("L", [{"a": 1}])
    right = Table("R", [{"a": 1}, {"a": 1}])
    text = generate_report(compare(left, "id", right, "id"), left, right)
    assert "Key column `id` not found in Left" in text


def test_flatten_renames_data_columns_named_status_or_key():
    left = Table("L", [{"id": 1, "Status": "open", "Key": "k1"}])
    right = Table("R", [{"id": 2, "Status": "open"}])
    table = flatten(compare(left, "id", right, "id"))

    assert [row["Status"] for row in table.rows] == ["LeftOnly", "RightOnly"]
    assert [row["Key"] for row in table.rows] == [1, 2]
    assert [row["Status (Left)"] for row in table.rows] == ["open", "open"]
    assert table.rows[0]["Key (Left)"] == "k1"
    assert table.output_columns == ["Status", "Key", "id", "Status (Left)", "Key (Left)"]


def test_flatten_right_values_do_not_replace_existing_columns():
    left = Table("L", [{"id": 1, "v": "a", "v (Right)": "keep"}])
    right = Table("R", [{"id": 1, "v": "b", "v (Right)": "keep"}])
    table = flatten(compare(left, "id", right, "id"))

    assert table.rows == [{
        "Status": "Changed", "Key": 1, "id": 1, "v": "a", "v (Right)": "keep",
        "v (Right) (Right)": "b",
    }]


def test_flatten_without_rows_keeps_header():
    same = Table("S", [{"id": 1, "name": "A"}])
    table = flatten(compare(same, "id", same.copy(), "id"), (MatchStatus.CHANGED,))

    assert len(table) == 0
    assert table.output_columns == ["Status", "Key", "id", "name"]
