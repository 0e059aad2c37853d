"""Entry model: directories, files, and source-module files over a backend.

A root :class:`Directory` owns a shared :class:`EntryContext` (backend, base
path, module loader, schema, analyzer, settings). Every entry it produces
keeps that context and a weak reference to the directory that listed it.
Listings, file contents, and export declarations are cached on the entry
that produced them; nothing is invalidated automatically.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .analysis.treesitter import TreeSitterAnalyzer
from .analysis.types import Diagnostic, ExportDeclaration, TypeAnalyzer
from .config import Settings, load_settings
from .errors import MissingDirectoryError, MissingFileError
from .exports import Export, ModuleLoader, SchemaMap
from .file_system import FileSystem, LocalFileSystem
from .navigation import TreeNode, build_tree, get_breadcrumbs, get_siblings
from .paths import (
    create_slug,
    format_title,
    join_public_path,
    normalize_storage_path,
    remove_file_order_prefix,
    remove_order_prefix,
    split_extension,
    split_file_name,
    split_order_prefix,
    split_path,
    storage_parent,
)
from .summary import text_summary

logger = logging.getLogger(__name__)

REPRESENTATIVE_NAMES = ("index", "readme")


@dataclass(frozen=True)
class EntryContext:
    """State shared by every entry reachable from one root directory."""

    file_system: FileSystem
    root_path: str
    root_name: str
    base_path: str | None
    module_loader: ModuleLoader | None
    schema: SchemaMap | None
    analyzer: TypeAnalyzer
    settings: Settings


def _normalize_extensions(extension: str | Iterable[str] | None) -> tuple[str, ...]:
    if extension is None:
        return ()
    values = [extension] if isinstance(extension, str) else list(extension)
    return tuple(value.lstrip(".").lower() for value in values if value and value.lstrip("."))


class FileSystemEntry:
    """Common behavior of files and directories."""

    def __init__(
        self,
        context: EntryContext,
        storage_path: str,
        raw_segments: Sequence[str],
        parent: Directory | None = None,
    ) -> None:
        self._context = context
        self._storage_path = storage_path
        self._raw_segments = tuple(raw_segments)
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_relative_path()!r})"

    @property
    def file_system(self) -> FileSystem:
        return self._context.file_system

    @property
    def analyzer(self) -> TypeAnalyzer:
        return self._context.analyzer

    @property
    def module_loader(self) -> ModuleLoader | None:
        return self._context.module_loader

    @property
    def schema(self) -> SchemaMap | None:
        return self._context.schema

    def is_file(self) -> bool:
        return False

    def is_directory(self) -> bool:
        return False

    def is_index_or_readme(self) -> bool:
        return False

    def get_storage_path(self) -> str:
        """Path understood by the backend, e.g. ``./docs/01.intro.mdx``."""
        return self._storage_path

    def get_relative_path(self) -> str:
        """Raw path below the root directory, with order prefixes and extension."""
        return "/".join(self._raw_segments) or "."

    def get_raw_name(self) -> str:
        if self._raw_segments:
            return self._raw_segments[-1]
        return self._storage_path.rsplit("/", 1)[-1]

    def get_name(self) -> str:
        raise NotImplementedError

    def get_order(self) -> str | None:
        """Numeric order prefix of the raw name (``"02"`` for ``02.setup.mdx``)."""
        if not self._raw_segments:
            return None
        return split_order_prefix(self._raw_segments[-1])[0]

    def get_path_segments(self) -> list[str]:
        """Logical segments below the root; the base path is not included."""
        return [remove_order_prefix(segment) for segment in self._raw_segments]

    def get_path(self) -> str:
        return join_public_path(self._context.base_path, self.get_path_segments())

    def get_title(self) -> str:
        return format_title(self.get_name())

    def get_slug(self) -> str:
        return create_slug(self.get_name())

    def get_parent(self) -> Directory | None:
        """Return the listing directory, rebuilding it when no longer referenced."""
        if not self._raw_segments:
            return None
        if self._parent_ref is not None:
            parent = self._parent_ref()
            if parent is not None:
                return parent
        logger.debug("rebuilding parent directory of %s", self._storage_path)
        return Directory._from_context(
            self._context,
            storage_parent(self._storage_path),
            self._raw_segments[:-1],
        )

    async def get_siblings(self) -> tuple[FileSystemEntry | None, FileSystemEntry | None]:
        """Previous and next visible entries in the parent directory."""
        return await get_siblings(self)

    def get_breadcrumbs(self) -> list[FileSystemEntry]:
        return get_breadcrumbs(self)


class File(FileSystemEntry):
    """A file entry; reads and descriptions are cached per instance."""

    def __init__(
        self,
        context: EntryContext,
        storage_path: str,
        raw_segments: Sequence[str],
        parent: Directory | None = None,
    ) -> None:
        super().__init__(context, storage_path, raw_segments, parent)
        self._source: str | None = None

    def is_file(self) -> bool:
        return True

    def get_extension(self) -> str | None:
        return split_extension(self.get_raw_name())[1]

    def has_extension(self, extension: str | Iterable[str]) -> bool:
        current = self.get_extension()
        return current is not None and current.lower() in _normalize_extensions(extension)

    def get_base_name(self) -> str:
        """Name without order prefix or extension (``01.server.ts`` -> ``server``, ``404.tsx`` -> ``404``)."""
        return split_file_name(self.get_raw_name())[1]

    def get_order(self) -> str | None:
        if not self._raw_segments:
            return None
        return split_file_name(self._raw_segments[-1])[0]

    def is_index_or_readme(self) -> bool:
        return self.get_base_name().lower() in REPRESENTATIVE_NAMES

    def get_name(self) -> str:
        if self.is_index_or_readme():
            if len(self._raw_segments) > 1:
                return remove_order_prefix(self._raw_segments[-2])
            if self._context.root_name:
                return self._context.root_name
        return self.get_base_name()

    def get_path_segments(self) -> list[str]:
        segments = super().get_path_segments()
        if segments:
            segments[-1] = self.get_base_name()
        return segments

    async def read(self) -> str:
        if self._source is None:
            self._source = await self.file_system.read_file(self._storage_path)
        return self._source

    def read_sync(self) -> str:
        if self._source is None:
            self._source = self.file_system.read_file_sync(self._storage_path)
        return self._source

    async def get_source(self) -> str:
        return await self.read()

    async def get_description(self) -> str | None:
        """First paragraph of markdown, or the leading doc comment of source."""
        return text_summary(await self.read(), self.get_extension())


class SourceModuleFile(File):
    """A file whose exports can be enumerated through the type analyzer."""

    def __init__(
        self,
        context: EntryContext,
        storage_path: str,
        raw_segments: Sequence[str],
        parent: Directory | None = None,
    ) -> None:
        super().__init__(context, storage_path, raw_segments, parent)
        self._declarations: list[ExportDeclaration] | None = None
        self._exports: dict[str, Export] = {}

    async def get_declarations(self) -> list[ExportDeclaration]:
        if self._declarations is None:
            source = await self.read()
            self._declarations = list(self.analyzer.get_exports(self._storage_path, source))
        return self._declarations

    def _handle(self, name: str, position: int | None = None, kind: str | None = None) -> Export:
        handle = self._exports.get(name)
        if handle is None:
            handle = Export(self, name, position, kind)
            self._exports[name] = handle
        elif handle.position is None and position is not None:
            handle.position = position
            handle.kind = kind
        return handle

    async def get_exports(self) -> list[Export]:
        """Export handles in declaration order."""
        declarations = await self.get_declarations()
        return [self._handle(item.name, item.position, item.kind) for item in declarations]

    async def get_export_names(self) -> list[str]:
        return [item.name for item in await self.get_declarations()]

    async def has_export(self, name: str) -> bool:
        return name in await self.get_export_names()

    def get_export(self, name: str) -> Export:
        """Return a handle for ``name``; existence is checked when it is first used."""
        return self._handle(name)

    async def get_export_value(self, name: str) -> Any:
        return await self.get_export(name).get_runtime_value()

    async def get_diagnostics(self) -> list[Diagnostic]:
        return list(self.analyzer.get_diagnostics(self._storage_path, await self.read()))


class Directory(FileSystemEntry):
    """A directory over a storage backend.

    Constructing one directly creates a root: ``path`` is resolved against
    ``file_system`` (a :class:`LocalFileSystem` at the working directory by
    default), and public paths are computed relative to it.
    """

    def __init__(
        self,
        path: str = ".",
        *,
        file_system: FileSystem | None = None,
        base_path: str | None = None,
        get_module: ModuleLoader | None = None,
        schema: SchemaMap | None = None,
        analyzer: TypeAnalyzer | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings if settings is not None else load_settings()
        if file_system is None:
            file_system = LocalFileSystem(ignore_file=settings.ignore_file)
        storage_path = normalize_storage_path(path)
        root_segments = split_path(storage_path)
        context = EntryContext(
            file_system=file_system,
            root_path=storage_path,
            root_name=remove_order_prefix(root_segments[-1]) if root_segments else "",
            base_path=base_path,
            module_loader=get_module,
            schema=schema,
            analyzer=analyzer if analyzer is not None else TreeSitterAnalyzer(),
            settings=settings,
        )
        super().__init__(context, storage_path, ())
        self._children: list[FileSystemEntry] | None = None

    @classmethod
    def _from_context(
        cls,
        context: EntryContext,
        storage_path: str,
        raw_segments: Sequence[str],
        parent: Directory | None = None,
    ) -> Directory:
        directory = cls.__new__(cls)
        FileSystemEntry.__init__(directory, context, storage_path, raw_segments, parent)
        directory._children = None
        return directory

    def is_directory(self) -> bool:
        return True

    def is_root(self) -> bool:
        return not self._raw_segments

    def get_name(self) -> str:
        if self._raw_segments:
            return remove_order_prefix(self._raw_segments[-1])
        return self._context.root_name

    def _create_file(self, storage_path: str, raw_segments: tuple[str, ...]) -> File:
        _base, extension = split_extension(raw_segments[-1])
        if extension is not None and extension.lower() in self._context.settings.source_module_extensions:
            return SourceModuleFile(self._context, storage_path, raw_segments, self)
        return File(self._context, storage_path, raw_segments, self)

    async def _get_children(self) -> list[FileSystemEntry]:
        if self._children is None:
            listing = await self.file_system.read_directory(self._storage_path)
            children: list[FileSystemEntry] = []
            for item in listing:
                raw_segments = self._raw_segments + (item.name,)
                if item.is_directory:
                    children.append(Directory._from_context(self._context, item.path, raw_segments, self))
                else:
                    children.append(self._create_file(item.path, raw_segments))
            self._children = children
        return self._children

    def _is_visible(self, entry: FileSystemEntry, include_index_and_readme: bool, include_hidden: bool) -> bool:
        if not include_hidden and entry.get_raw_name().startswith("."):
            return False
        if not include_index_and_readme and entry.is_index_or_readme():
            return False
        return not self.file_system.is_file_path_ignored(entry.get_storage_path(), is_directory=entry.is_directory())

    async def get_entries(
        self,
        *,
        recursive: bool = False,
        include_index_and_readme: bool = False,
        include_hidden: bool = False,
    ) -> list[FileSystemEntry]:
        """Visible children in backend order; recursion is pre-order depth-first.

        Ignored entries are always excluded. Hidden (dot) entries and
        index/README files are excluded unless requested.
        """
        entries: list[FileSystemEntry] = []
        for child in await self._get_children():
            if not self._is_visible(child, include_index_and_readme, include_hidden):
                continue
            entries.append(child)
            if recursive and isinstance(child, Directory):
                entries.extend(
                    await child.get_entries(
                        recursive=True,
                        include_index_and_readme=include_index_and_readme,
                        include_hidden=include_hidden,
                    )
                )
        return entries

    async def get_files(self, **options: bool) -> list[File]:
        return [entry for entry in await self.get_entries(**options) if isinstance(entry, File)]

    async def get_directories(self, **options: bool) -> list[Directory]:
        return [entry for entry in await self.get_entries(**options) if isinstance(entry, Directory)]

    async def _find_directory(self, segments: Sequence[str]) -> Directory | None:
        current: Directory = self
        for segment in segments:
            wanted = remove_order_prefix(segment)
            match = None
            for child in await current._get_children():
                if isinstance(child, Directory) and (child.get_raw_name() == segment or child.get_name() == wanted):
                    match = child
                    break
            if match is None:
                return None
            current = match
        return current

    def _by_preference(self, files: list[File]) -> list[File]:
        preference = self._context.settings.extension_preference

        def rank(file: File) -> int:
            extension = (file.get_extension() or "").lower()
            return preference.index(extension) if extension in preference else len(preference)

        return sorted(files, key=rank)

    async def get_representative_file(self, extension: str | Iterable[str] | None = None) -> File | None:
        """The directory's index file, else its README."""
        extensions = _normalize_extensions(extension)
        files = [child for child in await self._get_children() if isinstance(child, File)]
        for name in REPRESENTATIVE_NAMES:
            candidates = [
                file
                for file in files
                if file.get_base_name().lower() == name and (not extensions or file.has_extension(extensions))
            ]
            if candidates:
                return self._by_preference(candidates)[0]
        return None

    async def find_files(self, path: str | Sequence[str], extension: str | Iterable[str] | None = None) -> list[File]:
        """Every file matching ``path``, best match first.

        An exact raw or prefix-stripped name match comes first; extension-less
        matches follow in extension-preference order. When nothing matches and
        ``path`` names a directory, its index or README file is returned.
        """
        segments = split_path(path)
        extensions = _normalize_extensions(extension)
        if not segments:
            representative = await self.get_representative_file(extensions or None)
            return [representative] if representative is not None else []

        *directory_segments, last = segments
        directory = await self._find_directory(directory_segments)
        if directory is None:
            return []

        target = remove_order_prefix(last)
        target_file_name = remove_file_order_prefix(last)
        exact: list[File] = []
        by_base_name: list[File] = []
        for child in await directory._get_children():
            if not isinstance(child, File):
                continue
            if extensions and not child.has_extension(extensions):
                continue
            if child.get_raw_name() == last or remove_file_order_prefix(child.get_raw_name()) == target_file_name:
                exact.append(child)
            elif child.get_base_name() == target:
                by_base_name.append(child)

        if len(by_base_name) > 1 and not extensions:
            logger.debug(
                "%s matches %d files in %s; preferring %s",
                last,
                len(by_base_name),
                directory.get_relative_path(),
                self._by_preference(by_base_name)[0].get_relative_path(),
            )
        matches = exact + self._by_preference(by_base_name)
        if matches:
            return matches

        subdirectory = await directory._find_directory([last])
        if subdirectory is None:
            return []
        representative = await subdirectory.get_representative_file(extensions or None)
        return [representative] if representative is not None else []

    async def get_file(self, path: str | Sequence[str], extension: str | Iterable[str] | None = None) -> File | None:
        matches = await self.find_files(path, extension)
        return matches[0] if matches else None

    async def get_file_or_throw(self, path: str | Sequence[str], extension: str | Iterable[str] | None = None) -> File:
        file = await self.get_file(path, extension)
        if file is None:
            label = "/".join(split_path(path))
            extensions = _normalize_extensions(extension)
            if extensions:
                label = f"{label}.{'|'.join(extensions)}"
            raise MissingFileError(label)
        return file

    async def get_directory(self, path: str | Sequence[str]) -> Directory | None:
        return await self._find_directory(split_path(path))

    async def get_directory_or_throw(self, path: str | Sequence[str]) -> Directory:
        directory = await self.get_directory(path)
        if directory is None:
            raise MissingDirectoryError("/".join(split_path(path)))
        return directory

    async def get_entry(self, path: str | Sequence[str]) -> FileSystemEntry | None:
        """A directory when ``path`` names one, else the best matching file."""
        directory = await self.get_directory(path)
        if directory is not None:
            return directory
        return await self.get_file(path)

    async def get_entry_or_throw(self, path: str | Sequence[str]) -> FileSystemEntry:
        entry = await self.get_entry(path)
        if entry is None:
            raise MissingFileError("/".join(split_path(path)))
        return entry

    async def get_tree(self, *, include_index_and_readme: bool = False) -> list[TreeNode]:
        entries = await self.get_entries(recursive=True, include_index_and_readme=include_index_and_readme)
        return build_tree(entries, self._context.base_path)

    async def get_description(self) -> str | None:
        representative = await self.get_representative_file()
        if representative is None:
            return None
        return await representative.get_description()


def is_file(entry: Any, extension: str | Iterable[str] | None = None) -> bool:
    if not isinstance(entry, File):
        return False
    return extension is None or entry.has_extension(extension)


def is_directory(entry: Any) -> bool:
    return isinstance(entry, Directory)


def is_source_module_file(entry: Any) -> bool:
    return isinstance(entry, SourceModuleFile)


def has_extension(entry: Any, extension: str | Iterable[str]) -> bool:
    return isinstance(entry, File) and entry.has_extension(extension)


__all__ = [
    "Directory",
    "EntryContext",
    "File",
    "FileSystemEntry",
    "REPRESENTATIVE_NAMES",
    "SourceModuleFile",
    "has_extension",
    "is_directory",
    "is_file",
    "is_source_module_file",
]
