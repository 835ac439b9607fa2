"""
Tabular data model shared by the comparison and merge engines.

A Table is an ordered list of rows; each row is a plain dict mapping column
name to a scalar. Rows of one table may carry different column sets, so every
lookup goes through ``cell()`` which yields ``ABSENT`` for a missing column.
"""

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np


Scalar = str | int | float | bool | None
Row = dict[str, Scalar]


# =============================================================================
# Absent marker
# =============================================================================

class _Absent:
    """Marker for a column missing from a row. Renders like null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


# =============================================================================
# Value normalization
# =============================================================================

def to_scalar(value: Any) -> Any:
    """Unwrap numpy scalars into the equivalent Python scalar."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def is_null(value: Any) -> bool:
    """True for None, ABSENT and NaN."""
    value = to_scalar(value)
    if value is None or value is ABSENT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def to_text(value: Any) -> str:
    """
    Display text of a cell value, used for both equality checks and keys.

    Null-like values become the empty string, booleans are lower-cased and
    integral floats drop their fractional part, so ``1``, ``1.0`` and ``"1"``
    all read as ``"1"``.
    """
    value = to_scalar(value)
    if is_null(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def cell(row: Row, column: str) -> Any:
    """Value of ``column`` in ``row``, or ABSENT."""
    return row.get(column, ABSENT)


def ordered_union(*column_lists) -> list[str]:
    """Union of column names preserving first-seen order."""
    seen = {}
    for columns in column_lists:
        for col in columns:
            seen.setdefault(col, None)
    return list(seen)


# =============================================================================
# Table
# =============================================================================

@dataclass
class Table:
    name: str
    rows: list[Row] = field(default_factory=list)
    # Columns declared by the source (file header, export layout). Kept so an
    # empty table still writes its header; never consulted for comparison.
    header: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def columns(self) -> list[str]:
        """Ordered union of the columns seen across all rows."""
        return ordered_union(*(row.keys() for row in self.rows))

    @property
    def output_columns(self) -> list[str]:
        """Declared header followed by any further columns seen in rows."""
        return ordered_union(self.header, self.columns)

    def copy(self, name: str | None = None) -> "Table":
        return Table(name=name or self.name, rows=[dict(row) for row in self.rows], header=list(self.header))
