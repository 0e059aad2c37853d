"""Datatypes returned by storage backends."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirectoryEntry:
    """One raw child reported by a backend directory listing.

    ``path`` is the storage path the backend understands for later reads;
    ``absolute_path`` is the fully resolved location (equal to ``path`` for
    virtual backends).
    """

    name: str
    path: str
    is_file: bool
    is_directory: bool
    absolute_path: str


__all__ = ["DirectoryEntry"]
