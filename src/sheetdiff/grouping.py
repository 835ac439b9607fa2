"""Key-value grouping of table rows."""

from dataclasses import dataclass, field
from typing import Any

from sheetdiff.table import Row, Table, cell, to_text


@dataclass
class GroupingIndex:
    """
    Rows of one table grouped by the text of their key value.

    Groups are kept in first-seen order and each group keeps source row order.
    ``labels`` holds the first raw key value seen for every group.
    """
    key_column: str
    groups: dict[str, list[Row]] = field(default_factory=dict)
    labels: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.groups)

    def keys(self) -> list[str]:
        return list(self.groups)

    def get(self, key: str) -> list[Row]:
        return self.groups.get(key, [])

    @property
    def row_count(self) -> int:
        return sum(len(rows) for rows in self.groups.values())

    def duplicate_keys(self) -> list[str]:
        return [key for key, rows in self.groups.items() if len(rows) > 1]


def build_index(table: Table, key_column: str) -> GroupingIndex:
    """
    Group the rows of ``table`` by ``key_column``.

    Rows lacking the column, or holding a null value there, land in the
    empty-string group. No row is ever dropped.
    """
    index = GroupingIndex(key_column=key_column)
    for row in table.rows:
        raw = cell(row, key_column)
        key = to_text(raw)
        if key not in index.groups:
            index.groups[key] = []
            index.labels[key] = raw
        index.groups[key].append(row)
    return index
