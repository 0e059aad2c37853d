"""Datatypes and the service interface for type analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

ENVIRONMENT_SERVER = "server"
ENVIRONMENT_CLIENT = "client"
ENVIRONMENT_ISOMORPHIC = "isomorphic"


@dataclass(frozen=True)
class ExportDeclaration:
    """One exported declaration; ``position`` is a stable source offset key."""

    name: str
    position: int
    kind: str = "unknown"


@dataclass(frozen=True)
class Tag:
    """Documentation tag such as ``@category greetings``."""

    tag_name: str
    text: str | None = None


@dataclass(frozen=True)
class ExportMetadata:
    """Name, environment, and documentation of one export.

    ``name`` is ``None`` for an anonymous default export.
    """

    name: str | None
    environment: str = ENVIRONMENT_ISOMORPHIC
    description: str | None = None
    tags: tuple[Tag, ...] = ()


@dataclass(frozen=True)
class TypeMember:
    name: str
    type: str | None = None
    optional: bool = False


@dataclass(frozen=True)
class TypeDescription:
    """Structural description of a declaration's type."""

    kind: str
    name: str | None
    text: str
    members: tuple[TypeMember, ...] = ()


@dataclass(frozen=True)
class Diagnostic:
    """Syntax problem reported by the analysis service (0-based line/column)."""

    line: int
    column: int
    message: str


class TypeAnalyzer(Protocol):
    """External analysis service consulted by source-module files."""

    def get_exports(self, path: str, source: str) -> list[ExportDeclaration]: ...

    def get_export_metadata(self, path: str, source: str, name: str, position: int) -> ExportMetadata: ...

    def get_type(self, path: str, source: str, name: str, position: int) -> TypeDescription | None: ...

    def get_diagnostics(self, path: str, source: str) -> list[Diagnostic]: ...


__all__ = [
    "ENVIRONMENT_SERVER",
    "ENVIRONMENT_CLIENT",
    "ENVIRONMENT_ISOMORPHIC",
    "ExportDeclaration",
    "Tag",
    "ExportMetadata",
    "TypeMember",
    "TypeDescription",
    "Diagnostic",
    "TypeAnalyzer",
]
