import pytest

from sheetdiff.compare import MatchStatus
from sheetdiff.errors import UsageError
from sheetdiff.io import Workbook
from sheetdiff.selection import CompareRequest, MergeRequest, SheetRef, run_compare, run_merge
from sheetdiff.table import Table


@pytest.fixture
def files():
    old = Table("Old", [{"id": 1, "code": "a", "v": "x"}, {"id": 2, "code": "b", "v": "y"}])
    new = Table("New", [{"id": 1, "code": "a", "v": "x2"}])
    return [Workbook("book.xlsx", [old, new]), Workbook("other.csv", [Table("other", [{"id": 1, "w": 5}])])]


def test_same_sheet_and_key_is_rejected(files):
    request = CompareRequest(SheetRef(0, "Old"), SheetRef(0, "Old"), left_key="id")
    with pytest.raises(UsageError, match="with itself"):
        run_compare(files, request)


def test_same_sheet_with_different_keys_is_allowed(files):
    request = CompareRequest(SheetRef(0, "Old"), SheetRef(0, "Old"), left_key="id", right_key="code")
    result = run_compare(files, request)
    assert len(result) == 4


def test_sheets_of_one_workbook_can_be_compared(files):
    request = CompareRequest(SheetRef(0, "Old"), SheetRef(0, "New"), left_key="id")
    result = run_compare(files, request)
    assert [e.status for e in result.entries] == [MatchStatus.CHANGED, MatchStatus.LEFT_ONLY]
    assert request.left.label(files) == "book.xlsx - Old"


def test_merge_requires_columns(files):
    request = MergeRequest(SheetRef(0, "Old"), SheetRef(1), left_key="id")
    with pytest.raises(UsageError, match="at least one column"):
        run_merge(files, request)


def test_merge_request(files):
    request = MergeRequest(SheetRef(0, "Old"), SheetRef(1), left_key="id", columns=["w"])
    merged = run_merge(files, request)
    assert merged.name == "Merged_Old_other"
    assert merged.rows[0]["w"] == 5
    assert "w" not in merged.rows[1]


def test_bad_file_index(files):
    request = CompareRequest(SheetRef(5), SheetRef(0), left_key="id")
    with pytest.raises(UsageError, match="No file at position 5"):
        run_compare(files, request)
