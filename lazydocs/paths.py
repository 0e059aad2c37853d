"""Path normalization for storage paths and public entry paths.

Storage paths are what backends understand (``./docs/01.intro.mdx``). Public
paths are what entries expose (``/docs/intro``): absolute from the root
directory, ``/``-separated, without order prefixes, file extensions, or a
trailing slash, optionally prefixed with a base path.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

ORDER_PREFIX_RE = re.compile(r"^(?P<order>\d+)\.(?=.)")
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_TITLE_SMALL_WORDS = frozenset({"a", "an", "and", "as", "at", "by", "for", "in", "of", "on", "or", "the", "to"})


def split_order_prefix(name: str) -> tuple[str | None, str]:
    """Split ``"01.server.ts"`` into ``("01", "server.ts")``.

    Names without a numeric prefix, or whose whole remainder would be empty,
    come back unchanged with ``None`` as the order.
    """
    match = ORDER_PREFIX_RE.match(name)
    if match is None:
        return None, name
    return match.group("order"), name[match.end() :]


def remove_order_prefix(name: str) -> str:
    return split_order_prefix(name)[1]


def remove_order_prefixes(path: str) -> str:
    """Strip order prefixes from every segment of a ``/``-separated path."""
    return "/".join(remove_order_prefix(segment) for segment in path.split("/"))


def split_extension(name: str) -> tuple[str, str | None]:
    """Split a file name at its last dot.

    Dotfiles such as ``.gitignore`` have no extension.
    """
    index = name.rfind(".")
    if index <= 0 or index == len(name) - 1:
        return name, None
    return name[:index], name[index + 1 :]


def split_file_name(name: str) -> tuple[str | None, str, str | None]:
    """Split a file name into order, base name and extension.

    The extension comes off first, so a numeric file name keeps its digits:
    ``"01.server.ts"`` is ``("01", "server", "ts")`` while ``"404.tsx"`` is
    ``(None, "404", "tsx")``.
    """
    base, extension = split_extension(name)
    order, base = split_order_prefix(base)
    return order, base, extension


def remove_file_order_prefix(name: str) -> str:
    """Strip the order prefix of a file name, keeping its extension."""
    _order, base, extension = split_file_name(name)
    return base if extension is None else f"{base}.{extension}"


def order_sort_key(name: str, is_file: bool = False) -> tuple[int, int, str]:
    """Numbered names first by numeric order, then unnumbered names by name."""
    if is_file:
        order, _base, _extension = split_file_name(name)
        rest = remove_file_order_prefix(name)
    else:
        order, rest = split_order_prefix(name)
    if order is None:
        return (1, 0, name)
    return (0, int(order), rest)


def normalize_storage_path(path: str) -> str:
    """Return ``path`` in leading-dot-relative form with no trailing slash."""
    cleaned = path.replace("\\", "/")
    segments = [segment for segment in cleaned.split("/") if segment and segment != "."]
    if not segments:
        return "."
    if cleaned.startswith("/"):
        return "/" + "/".join(segments)
    return "./" + "/".join(segments)


def join_storage_path(*parts: str) -> str:
    """Join storage path parts, keeping the first part's root style."""
    if not parts:
        return "."
    head, *rest = parts
    joined = "/".join([head.rstrip("/"), *(part.strip("/") for part in rest if part.strip("/"))])
    return normalize_storage_path(joined)


def storage_parent(path: str) -> str:
    normalized = normalize_storage_path(path)
    if normalized in {".", "/"}:
        return normalized
    head, _sep, _tail = normalized.rpartition("/")
    return head or "/"


def split_path(path: str | Sequence[str]) -> list[str]:
    """Turn a path string or segment sequence into non-empty segments."""
    if isinstance(path, str):
        raw_segments: Iterable[str] = path.replace("\\", "/").split("/")
    else:
        raw_segments = (part for segment in path for part in str(segment).split("/"))
    return [segment for segment in raw_segments if segment and segment != "."]


def join_public_path(base_path: str | None, segments: Iterable[str]) -> str:
    """Build a canonical public path from a base path and logical segments."""
    parts = split_path(base_path) if base_path else []
    parts.extend(segment for segment in segments if segment)
    return "/" + "/".join(parts)


def create_slug(text: str) -> str:
    """Lower-case, hyphen-separated slug (``"Use Hover"`` -> ``"use-hover"``)."""
    spaced = _CAMEL_BOUNDARY_RE.sub("-", text)
    return _SLUG_SEPARATOR_RE.sub("-", spaced.lower()).strip("-")


def format_title(text: str) -> str:
    """Human label from a file or directory name (``"use-hover"`` -> ``"Use Hover"``)."""
    words = [word for word in re.split(r"[-_\s]+", _CAMEL_BOUNDARY_RE.sub(" ", text)) if word]
    titled: list[str] = []
    for index, word in enumerate(words):
        if index > 0 and word.lower() in _TITLE_SMALL_WORDS:
            titled.append(word.lower())
        elif word.isupper() and len(word) > 1:
            titled.append(word)
        else:
            titled.append(word[:1].upper() + word[1:])
    return " ".join(titled)


__all__ = [
    "ORDER_PREFIX_RE",
    "split_order_prefix",
    "remove_order_prefix",
    "remove_order_prefixes",
    "split_extension",
    "split_file_name",
    "remove_file_order_prefix",
    "order_sort_key",
    "normalize_storage_path",
    "join_storage_path",
    "storage_parent",
    "split_path",
    "join_public_path",
    "create_slug",
    "format_title",
]
