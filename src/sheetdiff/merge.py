"""Lookup-style merge (left outer join) of selected columns between two tables."""

from sheetdiff.table import Row, Table, cell, is_null, to_text

MERGED_SUFFIX = " (Merged)"


def build_lookup(table: Table, key_column: str) -> dict[str, Row]:
    """
    Map key text to row. On duplicate keys the last row wins; rows with a null
    or missing key are left out.
    """
    lookup = {}
    for row in table.rows:
        raw = cell(row, key_column)
        if is_null(raw):
            continue
        lookup[to_text(raw)] = row
    return lookup


def merged_name(left: Table, right: Table) -> str:
    return f"Merged_{left.name}_{right.name}"


def merge(
    left: Table,
    left_key: str,
    right: Table,
    right_key: str,
    columns_to_copy: list[str],
) -> Table:
    """
    Copy ``columns_to_copy`` from matching right rows onto copies of the left rows.

    A column already present on the left row is written as ``"<column> (Merged)"``
    instead of overwriting it. Unmatched left rows are copied unchanged, and the
    output always has as many rows as ``left``.
    """
    lookup = build_lookup(right, right_key)

    rows = []
    for left_row in left.rows:
        new_row = dict(left_row)
        raw = cell(left_row, left_key)
        right_row = None if is_null(raw) else lookup.get(to_text(raw))

        if right_row is not None:
            for col in columns_to_copy:
                target = col if col not in left_row else f"{col}{MERGED_SUFFIX}"
                new_row[target] = right_row.get(col)
        rows.append(new_row)

    return Table(name=merged_name(left, right), rows=rows, header=left.output_columns)
