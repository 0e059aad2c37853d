"""Tree-sitter parser loading and a small parse cache."""

from __future__ import annotations

import hashlib
from collections import OrderedDict
from dataclasses import dataclass
from functools import lru_cache

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "ts": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "tsx": "tsx",
}

MISSING_PARSER_ERROR = (
    "Tree-sitter parser package not found. Install tree-sitter-language-pack or tree-sitter-languages."
)
PARSE_CACHE_MAX = 128


@dataclass(frozen=True)
class ParsedSource:
    """Parse result plus the exact bytes offsets refer to."""

    path: str
    language: str
    source_bytes: bytes
    tree: object

    @property
    def root(self):
        return self.tree.root_node

    def text(self, node) -> str:
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


_PARSE_CACHE: OrderedDict[tuple[str, str], ParsedSource] = OrderedDict()


def language_for_path(path: str) -> str | None:
    """Map a path's extension to a Tree-sitter language key."""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return None
    return LANGUAGE_BY_EXTENSION.get(name.rsplit(".", 1)[-1].lower())


@lru_cache(maxsize=8)
def load_parser(language_name: str):
    """Load a Tree-sitter parser using supported provider packages.

    Tries ``tree_sitter_language_pack`` first, then ``tree_sitter_languages``.
    Returns ``(parser, error_message)``.
    """
    errors: list[str] = []

    try:
        from tree_sitter_language_pack import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    try:
        from tree_sitter_languages import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    if errors:
        return None, errors[0]

    return None, MISSING_PARSER_ERROR


def _cache_key(path: str, source: str) -> tuple[str, str]:
    return path, hashlib.sha1(source.encode("utf-8", errors="replace")).hexdigest()


def parse_source(path: str, source: str, language: str) -> tuple[ParsedSource | None, str | None]:
    """Parse ``source`` with the grammar for ``language``, reusing cached trees.

    Returns ``(parsed, error_message)``.
    """
    cache_key = _cache_key(path, source)
    cached = _PARSE_CACHE.get(cache_key)
    if cached is not None and cached.language == language:
        _PARSE_CACHE.move_to_end(cache_key)
        return cached, None

    parser, parser_error = load_parser(language)
    if parser is None:
        return None, parser_error or MISSING_PARSER_ERROR

    source_bytes = source.encode("utf-8", errors="replace")
    try:
        tree = parser.parse(source_bytes)
    except Exception as exc:
        return None, f"Tree-sitter parse failed: {exc}"

    parsed = ParsedSource(path=path, language=language, source_bytes=source_bytes, tree=tree)
    _PARSE_CACHE[cache_key] = parsed
    _PARSE_CACHE.move_to_end(cache_key)
    while len(_PARSE_CACHE) > PARSE_CACHE_MAX:
        _PARSE_CACHE.popitem(last=False)
    return parsed, None


def clear_parse_cache() -> None:
    _PARSE_CACHE.clear()


def parser_available(language: str = "typescript") -> bool:
    parser, _error = load_parser(language)
    return parser is not None


__all__ = [
    "LANGUAGE_BY_EXTENSION",
    "MISSING_PARSER_ERROR",
    "ParsedSource",
    "language_for_path",
    "load_parser",
    "parse_source",
    "clear_parse_cache",
    "parser_available",
]
