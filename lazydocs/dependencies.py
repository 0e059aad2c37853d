"""Package dependency lookup walking ``package.json`` files up to the workspace root."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST = "package.json"
WORKSPACE_MARKERS = ("pnpm-workspace.yaml", ".git")
DEPENDENCY_FIELDS = ("dependencies", "devDependencies")

# "<absolute directory>:<dependency name>" -> found; grows for the process lifetime
_DEPENDENCY_CACHE: dict[str, bool] = {}


def _read_manifest(directory: Path) -> dict | None:
    manifest = directory / PACKAGE_MANIFEST
    if not manifest.is_file():
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("ignoring unreadable %s: %s", manifest, exc)
        return None
    return data if isinstance(data, dict) else None


def find_workspace_root(start_directory: str | Path | None = None) -> Path:
    """Nearest ancestor that looks like a workspace root, else the filesystem root."""
    current = Path(start_directory if start_directory is not None else os.getcwd()).resolve()
    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in WORKSPACE_MARKERS):
            return directory
        manifest = _read_manifest(directory)
        if manifest is not None and "workspaces" in manifest:
            return directory
    return Path(current.anchor)


def _declares(manifest: dict, dependency_name: str) -> bool:
    for field in DEPENDENCY_FIELDS:
        declared = manifest.get(field)
        if isinstance(declared, dict) and declared.get(dependency_name):
            return True
    return False


def _find_package_dependency(dependency_name: str, start_directory: str | Path | None) -> bool:
    current = Path(start_directory if start_directory is not None else os.getcwd()).resolve()
    root: Path | None = None

    visited: list[str] = []
    found = False
    while True:
        cache_key = f"{current}:{dependency_name}"
        cached = _DEPENDENCY_CACHE.get(cache_key)
        if cached is not None:
            found = cached
            break
        visited.append(cache_key)

        manifest = _read_manifest(current)
        if manifest is not None and _declares(manifest, dependency_name):
            found = True
            break
        if root is None:
            root = find_workspace_root(current)
        if current == root or current.parent == current:
            break
        current = current.parent

    for key in visited:
        _DEPENDENCY_CACHE[key] = found
    return found


async def find_package_dependency(dependency_name: str, start_directory: str | Path | None = None) -> bool:
    """Whether any ``package.json`` from ``start_directory`` up to the workspace
    root declares ``dependency_name`` in ``dependencies`` or ``devDependencies``.

    Results are cached per directory, including negative ones.
    """
    return await asyncio.to_thread(_find_package_dependency, dependency_name, start_directory)


def clear_dependency_cache() -> None:
    _DEPENDENCY_CACHE.clear()


__all__ = [
    "DEPENDENCY_FIELDS",
    "PACKAGE_MANIFEST",
    "clear_dependency_cache",
    "find_package_dependency",
    "find_workspace_root",
]
