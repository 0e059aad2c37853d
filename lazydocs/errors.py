"""Error hierarchy shared by storage backends, entries, and exports."""

from __future__ import annotations


class LazyDocsError(Exception):
    """Base class for every error raised by ``lazydocs``."""


class NotFoundError(LazyDocsError, LookupError):
    """A file, directory, or export could not be located."""

    kind = "Entry"

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"{self.kind} not found: {path}")


class MissingFileError(NotFoundError):
    kind = "File"


class MissingDirectoryError(NotFoundError):
    kind = "Directory"


class MissingExportError(NotFoundError):
    """The analysis service reported no export with the requested name."""

    kind = "Export"

    def __init__(self, path: str, name: str) -> None:
        self.name = name
        super().__init__(path, f'Export "{name}" not found in {path}')


class AnalysisError(LazyDocsError):
    """The type-analysis service could not resolve a declaration."""


class LoadError(LazyDocsError):
    """Loading a module or executing transpiled source failed."""


class TranspileError(LoadError):
    """Source text cannot be turned into executable Python."""


class ValidationError(LazyDocsError, ValueError):
    """A schema validator rejected an export's runtime value.

    ``expected`` holds the validator's own description of the shape it wanted.
    """

    def __init__(self, path: str, name: str, expected: str) -> None:
        self.path = path
        self.name = name
        self.expected = expected
        super().__init__(f'Schema validation failed for export "{name}" in {path}: {expected}')


__all__ = [
    "LazyDocsError",
    "NotFoundError",
    "MissingFileError",
    "MissingDirectoryError",
    "MissingExportError",
    "AnalysisError",
    "LoadError",
    "TranspileError",
    "ValidationError",
]
