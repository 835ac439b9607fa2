#!/usr/bin/env python3
"""
Sheet compare/merge command line.

Usage:
    sheetdiff sheets orders.xlsx
    sheetdiff compare old.xlsx new.xlsx --key id
    sheetdiff merge orders.xlsx customers.csv --key customer_id --column name -o merged.xlsx
"""

import argparse
import sys
from dataclasses import dataclass, field

from sheetdiff.compare import MatchStatus
from sheetdiff.errors import SheetDiffError
from sheetdiff.io import Workbook, header_warnings, load_workbook, write_table
from sheetdiff.report import flatten, format_number, generate_report, generate_stdout_summary
from sheetdiff.selection import CompareRequest, MergeRequest, SheetRef, resolve_sheet, run_compare, run_merge


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class CompareConfig:
    """Configuration for a compare run."""
    file_a: str
    file_b: str
    key: str
    right_key: str | None = None
    sheet_a: str | None = None
    sheet_b: str | None = None
    output_file: str | None = None
    export_file: str | None = None
    show_unchanged: bool = False
    max_rows: int = 50


@dataclass
class MergeConfig:
    """Configuration for a merge run."""
    file_left: str
    file_right: str
    key: str
    columns: list[str] = field(default_factory=list)
    right_key: str | None = None
    sheet_left: str | None = None
    sheet_right: str | None = None
    output_file: str = "merged.xlsx"


# =============================================================================
# Loading
# =============================================================================

def load_files(paths: list[str]) -> list[Workbook]:
    """Load each distinct path once, in order."""
    books: dict[str, Workbook] = {}
    for path in paths:
        if path in books:
            continue
        print(f"Loading {path}...")
        book = load_workbook(path)
        for sheet in book.sheets:
            print(f"  {book.name} - {sheet.name}: {format_number(len(sheet))} rows × {len(sheet.columns)} columns")
            for warning in header_warnings(sheet.columns):
                print(f"  ⚠ {sheet.name}: {warning}")
        books[path] = book
    return list(books.values())


def _file_index(paths: list[str], path: str) -> int:
    return list(dict.fromkeys(paths)).index(path)


# =============================================================================
# Commands
# =============================================================================

def run_sheets(paths: list[str]) -> int:
    for book in load_files(paths):
        for label in book.labels():
            print(label)
    return 0


def run_compare_command(config: CompareConfig) -> int:
    paths = [config.file_a, config.file_b]
    files = load_files(paths)
    request = CompareRequest(
        left=SheetRef(_file_index(paths, config.file_a), config.sheet_a),
        right=SheetRef(_file_index(paths, config.file_b), config.sheet_b),
        left_key=config.key,
        right_key=config.right_key,
    )

    print(f"Comparing {request.left.label(files)} with {request.right.label(files)}...")
    result = run_compare(files, request)
    left, right = resolve_sheet(files, request.left), resolve_sheet(files, request.right)

    print()
    print(generate_stdout_summary(result))

    output_path = config.output_file or "comparison_report.md"
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(generate_report(result, left, right, max_rows=config.max_rows,
                                show_unchanged=config.show_unchanged))
    print()
    print(f"Detailed report written to: {output_path}")

    if config.export_file:
        statuses = None if config.show_unchanged else (
            MatchStatus.CHANGED, MatchStatus.LEFT_ONLY, MatchStatus.RIGHT_ONLY)
        table = flatten(result, statuses)
        write_table(table, config.export_file)
        print(f"Diff rows exported to: {config.export_file} ({format_number(len(table))} rows)")

    return 1 if result.has_differences else 0


def run_merge_command(config: MergeConfig) -> int:
    paths = [config.file_left, config.file_right]
    files = load_files(paths)
    request = MergeRequest(
        left=SheetRef(_file_index(paths, config.file_left), config.sheet_left),
        right=SheetRef(_file_index(paths, config.file_right), config.sheet_right),
        left_key=config.key,
        right_key=config.right_key,
        columns=config.columns,
    )

    print(f"Merging {request.right.label(files)} into {request.left.label(files)}...")
    merged = run_merge(files, request)
    write_table(merged, config.output_file)
    print(f"  {merged.name}: {format_number(len(merged))} rows written to {config.output_file}")
    return 0


# =============================================================================
# CLI
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetdiff",
        description="Compare or merge spreadsheet sheets (CSV/XLSX/XLS/Parquet) by key column.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sheetdiff compare jan.xlsx feb.xlsx --key id --export changes.xlsx
  sheetdiff compare book.xlsx book.xlsx --sheet-a Old --sheet-b New --key sku
  sheetdiff merge orders.csv customers.xlsx --key customer_id --column name --column city -o out.xlsx
        """
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_sheets = sub.add_parser("sheets", help="List the sheets of one or more files")
    p_sheets.add_argument("files", nargs="+", help="Spreadsheet files")

    p_cmp = sub.add_parser("compare", help="Compare two sheets by key column")
    p_cmp.add_argument("file_a", help="Left (reference) file")
    p_cmp.add_argument("file_b", help="Right file (may be the same file as the left one)")
    p_cmp.add_argument("--key", "-k", required=True, help="Key column of the left sheet")
    p_cmp.add_argument("--right-key", help="Key column of the right sheet (default: same as --key)")
    p_cmp.add_argument("--sheet-a", help="Sheet of the left file (default: first sheet)")
    p_cmp.add_argument("--sheet-b", help="Sheet of the right file (default: first sheet)")
    p_cmp.add_argument("--output", "-o", help="Output file for detailed report (markdown)")
    p_cmp.add_argument("--export", "-e", help="Export diff rows to CSV/XLSX/Parquet")
    p_cmp.add_argument("--show-unchanged", action="store_true",
                       help="Include unchanged rows in the report and export")
    p_cmp.add_argument("--max-rows", type=int, default=50,
                       help="Maximum rows listed per report section (default: 50)")

    p_merge = sub.add_parser("merge", help="Copy columns from the right sheet onto the left sheet")
    p_merge.add_argument("file_left", help="Base file")
    p_merge.add_argument("file_right", help="Lookup file")
    p_merge.add_argument("--key", "-k", required=True, help="Key column of the left sheet")
    p_merge.add_argument("--right-key", help="Key column of the right sheet (default: same as --key)")
    p_merge.add_argument("--column", "-c", action="append", dest="columns", default=[],
                         help="Column of the right sheet to copy. Specify multiple times.")
    p_merge.add_argument("--sheet-left", help="Sheet of the left file (default: first sheet)")
    p_merge.add_argument("--sheet-right", help="Sheet of the right file (default: first sheet)")
    p_merge.add_argument("--output", "-o", default="merged.xlsx", help="Output file (default: merged.xlsx)")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "sheets":
            return run_sheets(args.files)
        if args.command == "compare":
            return run_compare_command(CompareConfig(
                file_a=args.file_a, file_b=args.file_b, key=args.key,
                right_key=args.right_key, sheet_a=args.sheet_a, sheet_b=args.sheet_b,
                output_file=args.output, export_file=args.export,
                show_unchanged=args.show_unchanged, max_rows=args.max_rows,
            ))
        return run_merge_command(MergeConfig(
            file_left=args.file_left, file_right=args.file_right, key=args.key,
            columns=args.columns, right_key=args.right_key,
            sheet_left=args.sheet_left, sheet_right=args.sheet_right,
            output_file=args.output,
        ))
    except SheetDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
