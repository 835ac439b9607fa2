"""
Text output for comparison results: the flattened export table, a short
stdout summary and a markdown report.
"""

from datetime import datetime

from sheetdiff.compare import ComparisonEntry, ComparisonResult, MatchStatus
from sheetdiff.grouping import build_index
from sheetdiff.table import Table, cell, to_text

RIGHT_SUFFIX = " (Right)"
LEFT_SUFFIX = " (Left)"
STATUS_COLUMN = "Status"
KEY_COLUMN = "Key"


# =============================================================================
# Flattened projection
# =============================================================================

def export_names(columns: list[str]) -> tuple[dict[str, str], dict[str, str]]:
    """
    Output names of the data columns and of their right-hand value columns.

    ``Status`` and ``Key`` always hold the entry status and key, so a data
    column with one of those names becomes ``"<column> (Left)"``. The
    ``"<column> (Right)"`` name gets a further suffix when a data column
    already carries it. Every output name is distinct.
    """
    taken = {STATUS_COLUMN, KEY_COLUMN}
    data_names = {}
    for col in columns:
        name = col
        while name in taken:
            name += LEFT_SUFFIX
        taken.add(name)
        data_names[col] = name

    right_names = {}
    for col in columns:
        name = f"{col}{RIGHT_SUFFIX}"
        while name in taken:
            name += RIGHT_SUFFIX
        taken.add(name)
        right_names[col] = name
    return data_names, right_names


def flatten_entry(entry: ComparisonEntry, data_names: dict[str, str], right_names: dict[str, str]) -> dict:
    base = entry.row_from_left if entry.row_from_left is not None else entry.row_from_right
    row = {STATUS_COLUMN: entry.status.value, KEY_COLUMN: entry.key}
    for col, name in data_names.items():
        row[name] = base.get(col)
    if entry.status == MatchStatus.CHANGED:
        for col in entry.changed_columns:
            row[right_names[col]] = entry.row_from_right.get(col)
    return row


def flatten(result: ComparisonResult, statuses: tuple[MatchStatus, ...] | None = None) -> Table:
    """
    One row per entry with ``Status`` and ``Key`` first.

    Values come from the left row (the right row for RightOnly entries); the
    right-hand value of every changed column is added as ``"<column> (Right)"``.
    The table header lists ``Status``, ``Key`` and the data columns even when
    no entry is selected.
    """
    entries = result.entries if statuses is None else result.by_status(*statuses)
    data_names, right_names = export_names(result.all_columns)
    name = f"Compare_{result.left_name}_{result.right_name}"
    return Table(
        name=name,
        rows=[flatten_entry(e, data_names, right_names) for e in entries],
        header=[STATUS_COLUMN, KEY_COLUMN, *data_names.values()],
    )


# =============================================================================
# Formatting helpers
# =============================================================================

def format_number(n: int) -> str:
    """Format number with commas."""
    return f"{n:,}"


def verdict(result: ComparisonResult) -> str:
    counts = result.counts()
    if not result.has_differences:
        return "IDENTICAL"
    if counts[MatchStatus.CHANGED] == 0:
        return "DIFFERENT (rows added/removed only)"
    return "DIFFERENT"


def _md_cell(value) -> str:
    text = to_text(value).replace("|", "\\|").replace("\n", " ")
    return text[:50]


# =============================================================================
# Report Generation
# =============================================================================

def generate_stdout_summary(result: ComparisonResult) -> str:
    """Generate a concise summary for stdout."""
    counts = result.counts()
    lines = []
    lines.append("=" * 60)
    lines.append("SHEET COMPARISON SUMMARY")
    lines.append("=" * 60)
    lines.append("")
    lines.append(f"Left:  {result.left_name} (key: {result.left_key})")
    lines.append(f"Right: {result.right_name} (key: {result.right_key})")
    lines.append("")
    for status in MatchStatus:
        lines.append(f"{status.value + ':':<12} {format_number(counts[status])}")
    lines.append("")
    lines.append("-" * 60)
    lines.append(f"OVERALL: {verdict(result)}")
    lines.append("-" * 60)

    changed = result.by_status(MatchStatus.CHANGED)
    if changed:
        per_column = column_change_counts(result)
        lines.append("")
        lines.append("  Columns with changes:")
        for col, n in list(per_column.items())[:5]:
            lines.append(f"    - {col}: {format_number(n)}")

    return "\n".join(lines)


def column_change_counts(result: ComparisonResult) -> dict[str, int]:
    """Changed-entry count per column, most changed first."""
    totals: dict[str, int] = {}
    for entry in result.by_status(MatchStatus.CHANGED):
        for col in entry.changed_columns:
            totals[col] = totals.get(col, 0) + 1
    return dict(sorted(totals.items(), key=lambda item: -item[1]))


def _entry_table(lines: list[str], entries: list[ComparisonEntry], columns: list[str],
                 max_rows: int) -> None:
    lines.append("| Key | " + " | ".join(columns) + " |")
    lines.append("|-----|" + "|".join("---" for _ in columns) + "|")
    for entry in entries[:max_rows]:
        row = entry.row_from_left if entry.row_from_left is not None else entry.row_from_right
        values = " | ".join(_md_cell(cell(row, col)) for col in columns)
        lines.append(f"| `{_md_cell(entry.key)}` | {values} |")
    if len(entries) > max_rows:
        lines.append("")
        lines.append(f"... and {format_number(len(entries) - max_rows)} more")
    lines.append("")


def generate_report(result: ComparisonResult, left: Table | None = None, right: Table | None = None,
                    max_rows: int = 50, show_unchanged: bool = False) -> str:
    """Generate a markdown report."""
    counts = result.counts()
    lines = []

    lines.append("# Sheet Comparison Report")
    lines.append("")
    lines.append(f"**Generated:** {datetime.now().isoformat()}")
    lines.append("")

    lines.append("## 1. Sheets")
    lines.append("")
    lines.append("| Property | Left | Right |")
    lines.append("|----------|------|-------|")
    lines.append(f"| Sheet | `{result.left_name}` | `{result.right_name}` |")
    lines.append(f"| Key column | `{result.left_key}` | `{result.right_key}` |")
    if left is not None and right is not None:
        lines.append(f"| Rows | {format_number(len(left))} | {format_number(len(right))} |")
        lines.append(f"| Columns | {len(left.columns)} | {len(right.columns)} |")
    lines.append("")

    if left is not None and right is not None:
        lines.append("## 2. Key Analysis")
        lines.append("")
        for label, table, key in (("Left", left, result.left_key), ("Right", right, result.right_key)):
            index = build_index(table, key)
            dups = index.duplicate_keys()
            if key not in table.columns:
                lines.append(f"✗ Key column `{key}` not found in {label} - every row shares the empty key")
            elif dups:
                lines.append(f"⚠ {format_number(len(dups))} duplicated keys in {label} (rows paired by position)")
            else:
                lines.append(f"✓ Keys are unique in {label}")
        lines.append("")

        only_left = sorted(set(left.columns) - set(right.columns))
        only_right = sorted(set(right.columns) - set(left.columns))
        if only_left:
            lines.append(f"- Columns only in Left: {only_left}")
        if only_right:
            lines.append(f"- Columns only in Right: {only_right}")
        if only_left or only_right:
            lines.append("")

    lines.append("## 3. Row Status")
    lines.append("")
    lines.append("| Status | Rows |")
    lines.append("|--------|------|")
    for status in MatchStatus:
        lines.append(f"| {status.value} | {format_number(counts[status])} |")
    lines.append("")

    changed = result.by_status(MatchStatus.CHANGED)
    if changed:
        lines.append("## 4. Changed Rows")
        lines.append("")
        per_column = column_change_counts(result)
        lines.append("| Column | Changed rows |")
        lines.append("|--------|--------------|")
        for col, n in per_column.items():
            lines.append(f"| {col} | {format_number(n)} |")
        lines.append("")
        lines.append("| Key | Column | Left | Right |")
        lines.append("|-----|--------|------|-------|")
        for entry in changed[:max_rows]:
            for col in entry.changed_columns:
                val_a = _md_cell(cell(entry.row_from_left, col))
                val_b = _md_cell(cell(entry.row_from_right, col))
                lines.append(f"| `{_md_cell(entry.key)}` | {col} | `{val_a}` | `{val_b}` |")
        if len(changed) > max_rows:
            lines.append("")
            lines.append(f"... and {format_number(len(changed) - max_rows)} more changed rows")
        lines.append("")

    sections = [
        (MatchStatus.LEFT_ONLY, "## 5. Rows Only in Left"),
        (MatchStatus.RIGHT_ONLY, "## 6. Rows Only in Right"),
    ]
    if show_unchanged:
        sections.append((MatchStatus.UNCHANGED, "## 7. Unchanged Rows"))
    for status, heading in sections:
        entries = result.by_status(status)
        if entries:
            lines.append(heading)
            lines.append("")
            _entry_table(lines, entries, result.all_columns, max_rows)

    lines.append(f"### Overall: **{verdict(result)}**")
    lines.append("")

    return "\n".join(lines)
