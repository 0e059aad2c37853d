"""Sibling, breadcrumb, and tree navigation over entries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .paths import format_title, join_public_path, split_path

if TYPE_CHECKING:
    from .entries import FileSystemEntry


@dataclass
class TreeNode:
    """One node of a navigation tree.

    ``entry`` is ``None`` for intermediate segments that no input entry
    covers directly.
    """

    segment: str
    path: str
    title: str
    entry: FileSystemEntry | None = None
    children: list[TreeNode] = field(default_factory=list)

    def find_child(self, segment: str) -> TreeNode | None:
        for child in self.children:
            if child.segment == segment:
                return child
        return None

    def walk(self):
        """Yield this node's descendants in pre-order."""
        for child in self.children:
            yield child
            yield from child.walk()


def _navigation_target(entry: FileSystemEntry) -> FileSystemEntry | None:
    """Index and README files navigate as their directory."""
    if entry.is_file() and entry.is_index_or_readme():
        return entry.get_parent()
    return entry


async def get_siblings(entry: FileSystemEntry) -> tuple[FileSystemEntry | None, FileSystemEntry | None]:
    """Return ``(previous, next)`` among the parent's visible entries."""
    target = _navigation_target(entry)
    if target is None:
        return None, None
    parent = target.get_parent()
    if parent is None:
        return None, None

    entries = await parent.get_entries()
    storage_path = target.get_storage_path()
    for index, candidate in enumerate(entries):
        if candidate.get_storage_path() == storage_path:
            previous = entries[index - 1] if index > 0 else None
            following = entries[index + 1] if index + 1 < len(entries) else None
            return previous, following
    return None, None


def get_breadcrumbs(entry: FileSystemEntry) -> list[FileSystemEntry]:
    """Ancestors below the root directory, outermost first, ending with ``entry``."""
    trail = [entry]
    parent = entry.get_parent()
    while parent is not None and parent.get_parent() is not None:
        trail.append(parent)
        parent = parent.get_parent()
    trail.reverse()
    return trail


def build_tree(entries: Iterable[FileSystemEntry | str], base_path: str | None = None) -> list[TreeNode]:
    """Nest entries (or plain paths) by their public path segments.

    Every segment prefix gets exactly one node; an entry whose segments equal
    that prefix is attached to it.
    """
    roots: list[TreeNode] = []
    for item in entries:
        if isinstance(item, str):
            segments = split_path(item)
            entry = None
        else:
            segments = list(item.get_path_segments())
            entry = item
        if not segments:
            continue

        siblings = roots
        node: TreeNode | None = None
        for depth, segment in enumerate(segments):
            node = next((candidate for candidate in siblings if candidate.segment == segment), None)
            if node is None:
                node = TreeNode(
                    segment=segment,
                    path=join_public_path(base_path, segments[: depth + 1]),
                    title=format_title(segment),
                )
                siblings.append(node)
            siblings = node.children
        if node is not None and entry is not None:
            node.entry = entry
            node.title = entry.get_title()
    return roots


__all__ = ["TreeNode", "build_tree", "get_breadcrumbs", "get_siblings"]
