"""Storage backend over real disk content."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from ..errors import MissingDirectoryError, MissingFileError
from ..gitignore import DEFAULT_IGNORE_FILE
from ..paths import join_storage_path, normalize_storage_path, order_sort_key
from .base import FileSystem
from .types import DirectoryEntry

TEXT_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")


def read_text(path: Path) -> str:
    """Read text trying common encodings, latin-1 last so decoding never fails."""
    for encoding in TEXT_ENCODINGS[:-1]:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_text(encoding=TEXT_ENCODINGS[-1])


class LocalFileSystem(FileSystem):
    """Real-storage backend rooted at ``root`` (defaults to the working directory).

    Listings put order-prefixed names first in numeric prefix order, then the
    rest by name.
    """

    def __init__(self, root: str | Path | None = None, *, ignore_file: str = DEFAULT_IGNORE_FILE) -> None:
        super().__init__(ignore_file=ignore_file)
        self.root = Path(root if root is not None else os.getcwd()).resolve()

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root / normalize_storage_path(path)

    def relative_path(self, path: str) -> str:
        resolved = self.resolve(path)
        try:
            return resolved.relative_to(self.root).as_posix()
        except ValueError:
            return path

    def _scan(self, path: str) -> list[DirectoryEntry]:
        directory = self.resolve(path)
        entries: list[DirectoryEntry] = []
        try:
            with os.scandir(directory) as children:
                for child in children:
                    try:
                        is_directory = child.is_dir()
                    except OSError:
                        is_directory = False
                    entries.append(
                        DirectoryEntry(
                            name=child.name,
                            path=join_storage_path(path, child.name),
                            is_file=not is_directory,
                            is_directory=is_directory,
                            absolute_path=str(Path(child.path).resolve()),
                        )
                    )
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise MissingDirectoryError(path) from exc
        entries.sort(key=lambda entry: order_sort_key(entry.name, entry.is_file))
        return entries

    async def read_directory(self, path: str = ".") -> list[DirectoryEntry]:
        return await asyncio.to_thread(self._scan, path)

    def read_file_sync(self, path: str) -> str:
        target = self.resolve(path)
        try:
            return read_text(target)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise MissingFileError(path) from exc

    async def read_file(self, path: str) -> str:
        return await asyncio.to_thread(self.read_file_sync, path)


__all__ = ["LocalFileSystem", "read_text"]
