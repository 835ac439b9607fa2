"""
Run configuration and the checks performed before calling the engine.

``compare`` and ``merge`` accept any input; refusing nonsensical requests
(a sheet compared against itself, a merge that copies nothing) happens here.
"""

from dataclasses import dataclass, field

from sheetdiff.compare import Cancelled, ComparisonResult, compare
from sheetdiff.errors import UsageError
from sheetdiff.io import Workbook
from sheetdiff.merge import merge
from sheetdiff.table import Table


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class SheetRef:
    """A sheet inside a loaded file, as picked by the user."""
    file_index: int
    sheet_name: str | None = None

    def label(self, files: list[Workbook]) -> str:
        book = files[self.file_index]
        return f"{book.name} - {book.sheet(self.sheet_name).name}"


@dataclass
class CompareRequest:
    left: SheetRef
    right: SheetRef
    left_key: str
    right_key: str | None = None

    @property
    def effective_right_key(self) -> str:
        return self.right_key or self.left_key


@dataclass
class MergeRequest:
    left: SheetRef
    right: SheetRef
    left_key: str
    columns: list[str] = field(default_factory=list)
    right_key: str | None = None

    @property
    def effective_right_key(self) -> str:
        return self.right_key or self.left_key


# =============================================================================
# Resolution
# =============================================================================

def resolve_sheet(files: list[Workbook], ref: SheetRef) -> Table:
    if not 0 <= ref.file_index < len(files):
        raise UsageError(f"No file at position {ref.file_index} ({len(files)} loaded)")
    return files[ref.file_index].sheet(ref.sheet_name)


def check_compare(files: list[Workbook], request: CompareRequest) -> tuple[Table, Table]:
    """Resolve both sheets of a comparison and refuse self-comparison."""
    left = resolve_sheet(files, request.left)
    right = resolve_sheet(files, request.right)
    if left is right and request.left_key == request.effective_right_key:
        raise UsageError(
            f"Cannot compare '{request.left.label(files)}' on '{request.left_key}' with itself. "
            "Please select two different sheets or key columns."
        )
    return left, right


def check_merge(files: list[Workbook], request: MergeRequest) -> tuple[Table, Table]:
    """Resolve both sheets of a merge and require at least one column to copy."""
    left = resolve_sheet(files, request.left)
    right = resolve_sheet(files, request.right)
    if not request.columns:
        raise UsageError("Please select at least one column to merge.")
    return left, right


def run_compare(files: list[Workbook], request: CompareRequest, cancel=None) -> ComparisonResult | Cancelled:
    left, right = check_compare(files, request)
    return compare(left, request.left_key, right, request.effective_right_key, cancel=cancel)


def run_merge(files: list[Workbook], request: MergeRequest) -> Table:
    left, right = check_merge(files, request)
    return merge(left, request.left_key, right, request.effective_right_key, request.columns)
