"""Type-analysis service interface and its Tree-sitter implementation."""

from __future__ import annotations

from .jsdoc import parse_doc_comment
from .parsers import clear_parse_cache, language_for_path, parser_available
from .transpile import JAVASCRIPT_LIKE_EXTENSIONS, UNTRANSPILED_NAME, transpile_module
from .treesitter import TreeSitterAnalyzer
from .types import (
    ENVIRONMENT_CLIENT,
    ENVIRONMENT_ISOMORPHIC,
    ENVIRONMENT_SERVER,
    Diagnostic,
    ExportDeclaration,
    ExportMetadata,
    Tag,
    TypeAnalyzer,
    TypeDescription,
    TypeMember,
)

__all__ = [
    "ENVIRONMENT_CLIENT",
    "ENVIRONMENT_ISOMORPHIC",
    "ENVIRONMENT_SERVER",
    "JAVASCRIPT_LIKE_EXTENSIONS",
    "UNTRANSPILED_NAME",
    "Diagnostic",
    "ExportDeclaration",
    "ExportMetadata",
    "Tag",
    "TypeAnalyzer",
    "TypeDescription",
    "TypeMember",
    "TreeSitterAnalyzer",
    "clear_parse_cache",
    "language_for_path",
    "parse_doc_comment",
    "parser_available",
    "transpile_module",
]
