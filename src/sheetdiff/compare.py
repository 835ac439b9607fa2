"""
Key-based row comparison of two tables.

Rows are grouped per side by their key value. Within a key, rows are paired by
position (first with first, second with second, ...), so duplicate keys never
collapse and every source row shows up in exactly one entry.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from sheetdiff.grouping import build_index
from sheetdiff.table import Row, Table, cell, is_null, ordered_union, to_text


# =============================================================================
# Data Structures for Results
# =============================================================================

class MatchStatus(str, Enum):
    UNCHANGED = "Unchanged"
    CHANGED = "Changed"
    LEFT_ONLY = "LeftOnly"
    RIGHT_ONLY = "RightOnly"


@dataclass
class ComparisonEntry:
    status: MatchStatus
    key: Any
    row_from_left: Row | None
    row_from_right: Row | None
    changed_columns: list[str] = field(default_factory=list)


@dataclass
class ComparisonResult:
    entries: list[ComparisonEntry]
    all_columns: list[str]
    left_name: str = ""
    right_name: str = ""
    left_key: str = ""
    right_key: str = ""

    def __len__(self) -> int:
        return len(self.entries)

    def counts(self) -> dict[MatchStatus, int]:
        """Number of entries per status, every status present."""
        totals = {status: 0 for status in MatchStatus}
        for entry in self.entries:
            totals[entry.status] += 1
        return totals

    def by_status(self, *statuses: MatchStatus) -> list[ComparisonEntry]:
        return [e for e in self.entries if e.status in statuses]

    @property
    def has_differences(self) -> bool:
        return any(e.status != MatchStatus.UNCHANGED for e in self.entries)

    def patch(self, index: int, side: str, column: str, value: Any) -> None:
        """
        Edit one cell of an entry's row in place.

        ``side`` is ``"left"`` or ``"right"``. The entry status is left as
        computed by the comparison run.
        """
        entry = self.entries[index]
        if side == "left":
            row = entry.row_from_left
        elif side == "right":
            row = entry.row_from_right
        else:
            raise ValueError(f"side must be 'left' or 'right', got {side!r}")
        if row is None:
            raise ValueError(f"Entry {index} ({entry.status.value}) has no {side} row")
        row[column] = value


@dataclass
class Cancelled:
    """Returned by ``compare`` when its cancellation flag was set."""
    keys_processed: int = 0


class CancelFlag(Protocol):
    def is_set(self) -> bool: ...


# =============================================================================
# Row comparison
# =============================================================================

def diff_columns(row_a: Row, row_b: Row, columns: list[str]) -> list[str]:
    """Columns whose display text differs between two rows."""
    return [
        col for col in columns
        if to_text(cell(row_a, col)) != to_text(cell(row_b, col))
    ]


def compare(
    left: Table,
    left_key: str,
    right: Table,
    right_key: str,
    cancel: CancelFlag | None = None,
) -> ComparisonResult | Cancelled:
    """
    Compare ``left`` and ``right`` on their key columns.

    A key column missing from a table is not an error: every row then falls
    into the empty-key group and is paired positionally with the other side's
    empty-key rows.
    """
    index_a = build_index(left, left_key)
    index_b = build_index(right, right_key)

    all_keys = ordered_union(index_a.keys(), index_b.keys())
    all_columns = ordered_union(left.columns, right.columns)

    entries = []
    for processed, key in enumerate(all_keys):
        if cancel is not None and cancel.is_set():
            return Cancelled(keys_processed=processed)

        group_a = index_a.get(key)
        group_b = index_b.get(key)
        label = index_a.labels.get(key, index_b.labels.get(key))
        label = None if is_null(label) else label

        for i in range(max(len(group_a), len(group_b))):
            row_a = group_a[i] if i < len(group_a) else None
            row_b = group_b[i] if i < len(group_b) else None

            if row_a is not None and row_b is not None:
                changed = diff_columns(row_a, row_b, all_columns)
                status = MatchStatus.CHANGED if changed else MatchStatus.UNCHANGED
                entries.append(ComparisonEntry(status, label, row_a, row_b, changed))
            elif row_a is not None:
                entries.append(ComparisonEntry(MatchStatus.LEFT_ONLY, label, row_a, None))
            else:
                entries.append(ComparisonEntry(MatchStatus.RIGHT_ONLY, label, None, row_b))

    return ComparisonResult(
        entries=entries,
        all_columns=all_columns,
        left_name=left.name,
        right_name=right.name,
        left_key=left_key,
        right_key=right_key,
    )
