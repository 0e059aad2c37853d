"""In-memory storage backend built from a literal ``path -> content`` mapping."""

from __future__ import annotations

from collections.abc import Mapping

from ..analysis.transpile import JAVASCRIPT_LIKE_EXTENSIONS, transpile_module
from ..errors import MissingFileError, TranspileError
from ..gitignore import DEFAULT_IGNORE_FILE
from ..paths import normalize_storage_path, split_extension
from .base import FileSystem
from .types import DirectoryEntry

PYTHON_EXTENSIONS = frozenset({"py"})


class VirtualFileSystem(FileSystem):
    """Synthetic tree for fixtures and generated content.

    Every key is normalized to leading-dot-relative form, so ``"a/b.ts"`` and
    ``"./a/b.ts"`` address the same file. Directories exist implicitly
    whenever a key lives below them.
    """

    is_virtual = True

    def __init__(self, files: Mapping[str, str], *, ignore_file: str = DEFAULT_IGNORE_FILE) -> None:
        super().__init__(ignore_file=ignore_file)
        self._files: dict[str, str] = {normalize_storage_path(path): content for path, content in files.items()}

    def get_files(self) -> dict[str, str]:
        return self._files

    def relative_path(self, path: str) -> str:
        return normalize_storage_path(path)

    async def read_directory(self, path: str = ".") -> list[DirectoryEntry]:
        """List direct children: files first, then directories, in mapping order."""
        directory = normalize_storage_path(path)
        prefix = directory.rstrip("/") + "/"
        files: list[DirectoryEntry] = []
        directories: dict[str, DirectoryEntry] = {}

        for file_path in self._files:
            if not file_path.startswith(prefix):
                continue
            segments = [segment for segment in file_path[len(prefix) :].split("/") if segment]
            if not segments:
                continue
            if len(segments) == 1:
                files.append(
                    DirectoryEntry(
                        name=segments[0],
                        path=file_path,
                        is_file=True,
                        is_directory=False,
                        absolute_path=file_path,
                    )
                )
                continue
            directory_path = prefix + segments[0]
            if directory_path not in directories:
                directories[directory_path] = DirectoryEntry(
                    name=segments[0],
                    path=directory_path,
                    is_file=False,
                    is_directory=True,
                    absolute_path=directory_path,
                )

        return files + list(directories.values())

    def read_file_sync(self, path: str) -> str:
        normalized = normalize_storage_path(path)
        content = self._files.get(normalized)
        if content is None:
            raise MissingFileError(normalized)
        return content

    def transpile_file(self, path: str) -> str:
        """Return executable Python source equivalent to the file's exports.

        Python files are returned as is. JavaScript-like files go through the
        literal transpiler, which supports exported literal values only.
        """
        normalized = normalize_storage_path(path)
        source = self.read_file_sync(normalized)
        _base, extension = split_extension(normalized.rsplit("/", 1)[-1])
        if extension in PYTHON_EXTENSIONS:
            return source
        if extension in JAVASCRIPT_LIKE_EXTENSIONS:
            return transpile_module(normalized, source)
        raise TranspileError(f"No transpiler available for {normalized}")


__all__ = ["VirtualFileSystem"]
