"""Gitignore-aware path filtering utilities.

Builds a matcher from ignore-file text (one pattern per line, ``#`` comments
and blank lines skipped) using gitwildmatch semantics from ``pathspec``.
Storage backends use this to hide ignored content from directory listings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import pathspec

DEFAULT_IGNORE_FILE = ".gitignore"


def parse_ignore_patterns(contents: str) -> list[str]:
    """Return usable patterns from ignore-file text."""
    patterns: list[str] = []
    for raw_line in contents.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def _relative_match_path(path: str) -> str:
    """Convert a storage path to the root-relative form pathspec matches against."""
    cleaned = path.replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned.lstrip("/")


@dataclass(frozen=True)
class GitIgnoreMatcher:
    """Compiled ignore patterns for one storage root."""

    patterns: tuple[str, ...]
    spec: pathspec.PathSpec

    def is_ignored(self, path: str, is_directory: bool = False) -> bool:
        """Return whether ``path`` (relative to the root) is ignored.

        Directory paths are also tested with a trailing slash so patterns like
        ``build/`` match the directory itself.
        """
        relative = _relative_match_path(path)
        if not relative or relative == ".":
            return False
        if self.spec.match_file(relative):
            return True
        if is_directory and self.spec.match_file(relative.rstrip("/") + "/"):
            return True
        return False


def build_gitignore_matcher(patterns: Iterable[str]) -> GitIgnoreMatcher:
    compiled = tuple(patterns)
    return GitIgnoreMatcher(
        patterns=compiled,
        spec=pathspec.PathSpec.from_lines("gitwildmatch", compiled),
    )


def matcher_from_contents(contents: str) -> GitIgnoreMatcher | None:
    """Build a matcher from ignore-file text, or ``None`` when it has no patterns."""
    patterns = parse_ignore_patterns(contents)
    if not patterns:
        return None
    return build_gitignore_matcher(patterns)


__all__ = [
    "DEFAULT_IGNORE_FILE",
    "GitIgnoreMatcher",
    "parse_ignore_patterns",
    "build_gitignore_matcher",
    "matcher_from_contents",
]
