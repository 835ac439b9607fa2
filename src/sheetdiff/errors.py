"""Exceptions raised at the boundaries around the comparison/merge engine."""


class SheetDiffError(ValueError):
    """Base class for sheetdiff errors."""


class UsageError(SheetDiffError):
    """The caller asked for an operation that makes no sense (e.g. a sheet compared with itself)."""


class IngestionError(SheetDiffError):
    """A file could not be read into tables."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")
