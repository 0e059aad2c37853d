"""Storage backends: a capability base plus real-disk and in-memory implementations."""

from __future__ import annotations

from .base import FileSystem
from .local import LocalFileSystem, read_text
from .types import DirectoryEntry
from .virtual import VirtualFileSystem

__all__ = [
    "DirectoryEntry",
    "FileSystem",
    "LocalFileSystem",
    "VirtualFileSystem",
    "read_text",
]
