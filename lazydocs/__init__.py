"""Public package surface for lazydocs.

Exposes the entry model (``Directory``, ``File``, ``SourceModuleFile``),
export handles, storage backends, and navigation helpers. Most
implementation lives in submodules under ``lazydocs``.
"""

from __future__ import annotations

from .dependencies import clear_dependency_cache, find_package_dependency
from .entries import (
    Directory,
    File,
    FileSystemEntry,
    SourceModuleFile,
    has_extension,
    is_directory,
    is_file,
    is_source_module_file,
)
from .errors import (
    AnalysisError,
    LazyDocsError,
    LoadError,
    MissingDirectoryError,
    MissingExportError,
    MissingFileError,
    NotFoundError,
    TranspileError,
    ValidationError,
)
from .exports import Export
from .file_system import FileSystem, LocalFileSystem, VirtualFileSystem
from .navigation import TreeNode, build_tree

__all__ = [
    "AnalysisError",
    "Directory",
    "Export",
    "File",
    "FileSystem",
    "FileSystemEntry",
    "LazyDocsError",
    "LoadError",
    "LocalFileSystem",
    "MissingDirectoryError",
    "MissingExportError",
    "MissingFileError",
    "NotFoundError",
    "SourceModuleFile",
    "TranspileError",
    "TreeNode",
    "ValidationError",
    "VirtualFileSystem",
    "build_tree",
    "clear_dependency_cache",
    "find_package_dependency",
    "has_extension",
    "is_directory",
    "is_file",
    "is_source_module_file",
]
