"""
Workbook loading and table export.

This is the boundary between files on disk and the in-memory Table model.
Every pandas/openpyxl failure is re-raised as IngestionError so the engine
only ever sees well-formed tables.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from sheetdiff.errors import IngestionError, UsageError
from sheetdiff.table import Row, Table, is_null, to_scalar, to_text


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class Workbook:
    name: str
    sheets: list[Table] = field(default_factory=list)

    def sheet(self, name: str | None = None) -> Table:
        """Sheet by name; the first sheet when ``name`` is None."""
        if not self.sheets:
            raise UsageError(f"{self.name} has no sheets")
        if name is None:
            return self.sheets[0]
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        available = ", ".join(s.name for s in self.sheets)
        raise UsageError(f"Sheet '{name}' not found in {self.name} (available: {available})")

    def labels(self) -> list[str]:
        return [f"{self.name} - {sheet.name}" for sheet in self.sheets]


# =============================================================================
# Format Detection
# =============================================================================

FORMAT_MAP = {
    '.csv': 'csv',
    '.xlsx': 'excel',
    '.xlsm': 'excel',
    '.xls': 'excel',
    '.parquet': 'parquet',
    '.pq': 'parquet',
}


def detect_format(filepath) -> str:
    """Detect file format from extension."""
    ext = Path(filepath).suffix.lower()
    fmt = FORMAT_MAP.get(ext)
    if fmt is None:
        supported = ", ".join(sorted(FORMAT_MAP))
        raise IngestionError(filepath, f"Unsupported file format: {ext or '(none)'}. Supported: {supported}")
    return fmt


def header_warnings(columns: list[str]) -> list[str]:
    """Warnings about header rows that look suspicious."""
    warnings = []
    unnamed = [c for c in columns if str(c).startswith("Unnamed:")]
    if unnamed:
        warnings.append(f"{len(unnamed)} of {len(columns)} columns have no header")

    numeric = [c for c in columns if str(c).strip()[:1].isdigit()]
    if columns and len(numeric) == len(columns):
        shown = columns[:5]
        more = '...' if len(columns) > 5 else ''
        warnings.append(f"ALL columns start with numbers - first row is likely DATA, not headers! {shown}{more}")
    return warnings


# =============================================================================
# Loading
# =============================================================================

def normalize_cell(value: Any) -> Any:
    """Turn a pandas cell into a plain scalar. Timestamps become ISO text."""
    value = to_scalar(value)
    if isinstance(value, (pd.Timestamp, datetime)):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return value


def frame_to_table(df: pd.DataFrame, name: str) -> Table:
    """Convert a DataFrame into a Table. Null cells are left out of their row."""
    columns = [str(c) for c in df.columns]
    rows = []
    for values in df.itertuples(index=False, name=None):
        row: Row = {}
        for col, value in zip(columns, values):
            if is_null(value) or (pd.api.types.is_scalar(value) and pd.isna(value)):
                continue
            row[col] = normalize_cell(value)
        rows.append(row)
    return Table(name=name, rows=rows, header=columns)


def _read_frames(path: Path, fmt: str) -> dict[str, pd.DataFrame]:
    if fmt == 'csv':
        return {path.stem: pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])}
    if fmt == 'excel':
        return pd.read_excel(path, sheet_name=None)
    if fmt == 'parquet':
        return {path.stem: pd.read_parquet(path)}
    raise IngestionError(path, f"Unsupported file format: {fmt}")


def load_workbook(filepath) -> Workbook:
    """Load every sheet of a spreadsheet-like file."""
    path = Path(filepath)
    fmt = detect_format(path)
    if not path.exists():
        raise IngestionError(path, "File not found")

    try:
        frames = _read_frames(path, fmt)
    except IngestionError:
        raise
    except pd.errors.EmptyDataError as exc:
        raise IngestionError(path, "File has no columns (headers required)") from exc
    except Exception as exc:
        raise IngestionError(path, f"Could not read file: {exc}") from exc

    sheets = []
    for sheet_name, df in frames.items():
        if len(df.columns) == 0 and fmt != 'excel':
            raise IngestionError(path, "File has no columns (headers required)")
        sheets.append(frame_to_table(df, str(sheet_name)))

    return Workbook(name=path.name, sheets=sheets)


def load_table(filepath, sheet: str | None = None) -> Table:
    return load_workbook(filepath).sheet(sheet)


# =============================================================================
# Export
# =============================================================================

_INVALID_SHEET_CHARS = re.compile(r'[\[\]:*?/\\]')


def excel_sheet_name(name: str) -> str:
    """Excel limits sheet names to 31 characters without []:*?/\\."""
    cleaned = _INVALID_SHEET_CHARS.sub('_', name).strip("'")
    return (cleaned or "Sheet1")[:31]


def table_to_frame(table: Table, columns: list[str] | None = None) -> pd.DataFrame:
    columns = columns or table.output_columns
    return pd.DataFrame.from_records(
        [{col: row.get(col) for col in columns} for row in table.rows],
        columns=columns,
    )


def write_table(table: Table, filepath, columns: list[str] | None = None) -> Path:
    """
    Write ``table`` as CSV, Excel or Parquet depending on the extension.

    Columns default to ``table.output_columns``, so a table without rows still
    gets its header line.
    """
    path = Path(filepath)
    fmt = detect_format(path)
    if path.suffix.lower() == '.xls':
        raise IngestionError(path, "Writing legacy .xls is not supported, use .xlsx")
    df = table_to_frame(table, columns)

    try:
        if fmt == 'csv':
            df.to_csv(path, index=False)
        elif fmt == 'excel':
            df.to_excel(path, index=False, sheet_name=excel_sheet_name(table.name))
        else:
            # Mixed-type object columns do not survive parquet; store display text
            df.map(to_text).to_parquet(path, index=False)
    except OSError as exc:
        raise IngestionError(path, f"Could not write file: {exc}") from exc
    return path
