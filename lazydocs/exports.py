"""Export handles: lazily resolved metadata and runtime values for one symbol.

Every accessor computes its value on first use and caches it on the handle.
Failures are not cached, so a later call retries the underlying service.
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .analysis.transpile import UNTRANSPILED_NAME
from .analysis.types import ExportMetadata, Tag, TypeDescription
from .errors import LoadError, MissingExportError, ValidationError

if TYPE_CHECKING:
    from .entries import SourceModuleFile

logger = logging.getLogger(__name__)

ModuleLoader = Callable[[str], Any]
Validator = Callable[[Any], Any]
SchemaMap = Mapping[str, Mapping[str, Validator]]

_MISSING = object()


def lookup_validator(schema: SchemaMap | None, extension: str | None, name: str) -> Validator | None:
    """Return the validator registered for ``(extension, export name)``."""
    if not schema or extension is None:
        return None
    validators = schema.get(extension)
    if validators is None:
        validators = schema.get(f".{extension}")
    if validators is None:
        return None
    return validators.get(name)


def validate_value(schema: SchemaMap | None, extension: str | None, path: str, name: str, value: Any) -> Any:
    """Apply the registered validator, turning rejections into ``ValidationError``."""
    validator = lookup_validator(schema, extension, name)
    if validator is None:
        return value
    try:
        return validator(value)
    except ValidationError:
        raise
    except Exception as exc:
        expected = str(exc) or exc.__class__.__name__
        raise ValidationError(path, name, expected) from exc


def execute_module_source(path: str, code: str) -> dict[str, Any]:
    """Execute Python source in a fresh module namespace and return it."""
    module_name = "lazydocs_virtual_" + "".join(ch if ch.isalnum() else "_" for ch in path)
    module = types.ModuleType(module_name)
    module.__file__ = path
    try:
        exec(compile(code, path, "exec"), module.__dict__)
    except Exception as exc:
        raise LoadError(f"Executing transpiled source for {path} failed: {exc}") from exc
    return module.__dict__


def module_member(module: Any, name: str, path: str) -> Any:
    """Read export ``name`` from a module mapping or module-like object."""
    if isinstance(module, Mapping):
        untranspiled = module.get(UNTRANSPILED_NAME)
        if isinstance(untranspiled, Mapping) and name in untranspiled:
            raise LoadError(
                f'Export "{name}" in {path} has no static value ({untranspiled[name]}); supply a module loader'
            )
        if name in module:
            return module[name]
    elif hasattr(module, name):
        return getattr(module, name)
    raise LoadError(f'Module for {path} has no export "{name}"')


class Export:
    """Handle for one exported symbol of a source-module file.

    ``name`` is the exported name as requested (``"default"`` for default
    exports); :meth:`get_name` resolves the declared name. ``position`` is
    ``None`` until resolved through :meth:`get_position`.
    """

    def __init__(self, file: SourceModuleFile, name: str, position: int | None = None, kind: str | None = None) -> None:
        self.file = file
        self.name = name
        self.position = position
        self.kind = kind
        self._metadata: ExportMetadata | None = None
        self._type: TypeDescription | None | object = _MISSING
        self._runtime_value: Any = _MISSING

    def __repr__(self) -> str:
        return f"Export(name={self.name!r}, position={self.position!r}, file={self.file.get_relative_path()!r})"

    async def get_position(self) -> int:
        if self.position is None:
            for declaration in await self.file.get_declarations():
                if declaration.name == self.name:
                    self.position = declaration.position
                    self.kind = declaration.kind
                    break
            else:
                raise MissingExportError(self.file.get_relative_path(), self.name)
        return self.position

    async def _get_metadata(self) -> ExportMetadata:
        if self._metadata is None:
            position = await self.get_position()
            source = await self.file.get_source()
            self._metadata = self.file.analyzer.get_export_metadata(
                self.file.get_storage_path(), source, self.name, position
            )
        return self._metadata

    async def get_name(self) -> str:
        """Declared name; anonymous default exports use the file's name."""
        metadata = await self._get_metadata()
        return metadata.name or self.file.get_name()

    async def get_description(self) -> str | None:
        return (await self._get_metadata()).description

    async def get_tags(self) -> list[Tag]:
        return list((await self._get_metadata()).tags)

    async def get_environment(self) -> str:
        """``"server"``, ``"client"``, or ``"isomorphic"`` from the file's imports."""
        return (await self._get_metadata()).environment

    async def get_type(self) -> TypeDescription | None:
        if self._type is _MISSING:
            position = await self.get_position()
            source = await self.file.get_source()
            self._type = self.file.analyzer.get_type(self.file.get_storage_path(), source, self.name, position)
        return self._type

    async def _load_module(self) -> Any:
        path = self.file.get_relative_path()
        loader = self.file.module_loader
        module = None
        if loader is not None:
            try:
                module = loader(path)
                if inspect.isawaitable(module):
                    module = await module
            except Exception as exc:
                raise LoadError(f"Module loader failed for {path}: {exc}") from exc

        if module is not None:
            return module

        file_system = self.file.file_system
        if not file_system.is_virtual:
            raise LoadError(f"No module loader result for {path}")

        logger.debug("evaluating transpiled source for %s", path)
        code = file_system.transpile_file(self.file.get_storage_path())
        return execute_module_source(path, code)

    async def get_runtime_value(self) -> Any:
        """Load, extract, and validate this export's live value (memoized)."""
        if self._runtime_value is _MISSING:
            module = await self._load_module()
            path = self.file.get_relative_path()
            value = module_member(module, self.name, path)
            self._runtime_value = validate_value(self.file.schema, self.file.get_extension(), path, self.name, value)
        return self._runtime_value


__all__ = [
    "Export",
    "ModuleLoader",
    "SchemaMap",
    "Validator",
    "execute_module_source",
    "lookup_validator",
    "module_member",
    "validate_value",
]
