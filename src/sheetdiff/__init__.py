"""Key-based comparison and merging of spreadsheet tables."""

from sheetdiff.compare import Cancelled, ComparisonEntry, ComparisonResult, MatchStatus, compare
from sheetdiff.errors import IngestionError, SheetDiffError, UsageError
from sheetdiff.grouping import GroupingIndex, build_index
from sheetdiff.merge import merge
from sheetdiff.table import ABSENT, Row, Table, to_text

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "Cancelled",
    "ComparisonEntry",
    "ComparisonResult",
    "GroupingIndex",
    "IngestionError",
    "MatchStatus",
    "Row",
    "SheetDiffError",
    "Table",
    "UsageError",
    "build_index",
    "compare",
    "merge",
    "to_text",
]
