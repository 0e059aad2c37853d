"""Storage backend capability shared by real and virtual file systems."""

from __future__ import annotations

import logging

from ..errors import NotFoundError
from ..gitignore import DEFAULT_IGNORE_FILE, GitIgnoreMatcher, matcher_from_contents
from .types import DirectoryEntry

logger = logging.getLogger(__name__)

_UNLOADED = object()


class FileSystem:
    """Directory listing, file reads, and ignore-file matching for one root.

    Subclasses implement :meth:`read_directory` and :meth:`read_file_sync`;
    :meth:`read_file` defaults to the synchronous read.
    """

    is_virtual = False

    def __init__(self, *, ignore_file: str = DEFAULT_IGNORE_FILE) -> None:
        self.ignore_file = ignore_file
        self._ignore_matcher: GitIgnoreMatcher | None | object = _UNLOADED

    async def read_directory(self, path: str = ".") -> list[DirectoryEntry]:
        raise NotImplementedError

    def read_file_sync(self, path: str) -> str:
        raise NotImplementedError

    async def read_file(self, path: str) -> str:
        return self.read_file_sync(path)

    def relative_path(self, path: str) -> str:
        """Return ``path`` relative to this backend's root for ignore matching."""
        return path

    def _load_ignore_matcher(self) -> GitIgnoreMatcher | None | object:
        """Read the ignore file once it exists; absence is not an error."""
        try:
            contents = self.read_file_sync(self.ignore_file)
        except (NotFoundError, OSError, UnicodeDecodeError) as exc:
            logger.debug("no usable ignore file %s: %s", self.ignore_file, exc)
            return _UNLOADED
        return matcher_from_contents(contents)

    def is_file_path_ignored(self, path: str, is_directory: bool = False) -> bool:
        """Return whether ``path`` matches the root ignore file's patterns.

        The matcher is memoized after the first successful read. A missing or
        unreadable ignore file means nothing is ignored and the read is
        retried on the next call.
        """
        matcher = self._ignore_matcher
        if matcher is _UNLOADED:
            matcher = self._load_ignore_matcher()
            if matcher is _UNLOADED:
                return False
            self._ignore_matcher = matcher
        if matcher is None:
            return False
        return matcher.is_ignored(self.relative_path(path), is_directory=is_directory)

    def clear_ignore_cache(self) -> None:
        self._ignore_matcher = _UNLOADED


__all__ = ["FileSystem"]
