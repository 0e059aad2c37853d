"""Tests for export handles: enumeration, metadata, runtime values, and validation."""

from __future__ import annotations

import re
import tempfile
import unittest

from lazydocs import Directory, LocalFileSystem, VirtualFileSystem
from lazydocs.analysis.types import Diagnostic, ExportDeclaration, ExportMetadata, Tag, TypeDescription
from lazydocs.config import Settings
from lazydocs.errors import LoadError, MissingExportError, ValidationError

_EXPORT_RE = re.compile(r"^export (?:const|function) (\w+)|^export default", re.MULTILINE)


class FakeAnalyzer:
    """Regex-driven analyzer recording every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def get_exports(self, path: str, source: str) -> list[ExportDeclaration]:
        self.calls.append(("get_exports", path))
        return [
            ExportDeclaration(name=match.group(1) or "default", position=match.start())
            for match in _EXPORT_RE.finditer(source)
        ]

    def get_export_metadata(self, path: str, source: str, name: str, position: int) -> ExportMetadata:
        self.calls.append(("get_export_metadata", name))
        return ExportMetadata(
            name=None if name == "default" else name,
            environment="server" if "server-only" in source else "isomorphic",
            description=f"About {name}.",
            tags=(Tag(tag_name="position", text=str(position)),),
        )

    def get_type(self, path: str, source: str, name: str, position: int) -> TypeDescription | None:
        self.calls.append(("get_type", name))
        return TypeDescription(kind="Function", name=name, text=source[position : position + 20])

    def get_diagnostics(self, path: str, source: str) -> list[Diagnostic]:
        self.calls.append(("get_diagnostics", path))
        return [Diagnostic(line=0, column=0, message="checked")]


SOURCE = "export const useHover = () => {}\nexport function Button() {}\nexport default {}\n"


def source_directory(files: dict[str, str], analyzer: FakeAnalyzer, **options) -> Directory:
    options.setdefault("settings", Settings())
    return Directory(file_system=VirtualFileSystem(files), analyzer=analyzer, **options)


class ExportMetadataTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.analyzer = FakeAnalyzer()
        self.directory = source_directory({"hooks/useHover.ts": SOURCE}, self.analyzer)
        self.file = await self.directory.get_file("hooks/useHover")

    async def test_get_exports_lists_names_and_positions(self) -> None:
        exports = await self.file.get_exports()

        self.assertEqual([export.name for export in exports], ["useHover", "Button", "default"])
        self.assertEqual(exports[0].position, 0)
        self.assertEqual(await self.file.get_export_names(), ["useHover", "Button", "default"])
        self.assertTrue(await self.file.has_export("Button"))

    async def test_exports_are_enumerated_once(self) -> None:
        first = await self.file.get_exports()
        second = await self.file.get_exports()

        self.assertEqual([call for call in self.analyzer.calls if call[0] == "get_exports"], [("get_exports", "./hooks/useHover.ts")])
        self.assertIs(first[1], second[1])
        self.assertIs(self.file.get_export("Button"), first[1])

    async def test_metadata_is_resolved_once_per_handle(self) -> None:
        export = self.file.get_export("Button")

        self.assertEqual(await export.get_name(), "Button")
        self.assertEqual(await export.get_description(), "About Button.")
        self.assertEqual(await export.get_environment(), "isomorphic")
        self.assertEqual(await export.get_tags(), [Tag(tag_name="position", text=str(SOURCE.index("export function")))])

        metadata_calls = [call for call in self.analyzer.calls if call[0] == "get_export_metadata"]
        self.assertEqual(metadata_calls, [("get_export_metadata", "Button")])

    async def test_anonymous_default_export_uses_file_name(self) -> None:
        export = self.file.get_export("default")
        self.assertEqual(await export.get_name(), "useHover")

    async def test_type_description_is_memoized(self) -> None:
        export = self.file.get_export("useHover")

        first = await export.get_type()
        second = await export.get_type()

        self.assertIs(first, second)
        self.assertEqual(first.kind, "Function")
        self.assertEqual(len([call for call in self.analyzer.calls if call[0] == "get_type"]), 1)

    async def test_unknown_export_raises_not_found(self) -> None:
        export = self.file.get_export("missing")
        with self.assertRaises(MissingExportError) as raised:
            await export.get_description()
        self.assertEqual(raised.exception.name, "missing")

    async def test_diagnostics_delegate_to_analyzer(self) -> None:
        diagnostics = await self.file.get_diagnostics()
        self.assertEqual([item.message for item in diagnostics], ["checked"])


class ExportRuntimeValueTests(unittest.IsolatedAsyncioTestCase):
    async def test_sync_loader_receives_root_relative_path(self) -> None:
        requested: list[str] = []

        def get_module(path: str):
            requested.append(path)
            return {"metadata": {"title": "Intro"}}

        directory = source_directory({"01.docs/intro.ts": "export const metadata = {}\n"}, FakeAnalyzer(), get_module=get_module)
        file = await directory.get_file("docs/intro")
        export = file.get_export("metadata")

        self.assertEqual(await export.get_runtime_value(), {"title": "Intro"})
        self.assertEqual(await export.get_runtime_value(), {"title": "Intro"})
        self.assertEqual(requested, ["01.docs/intro.ts"])

    async def test_async_loader_and_attribute_access(self) -> None:
        class Module:
            title = "From attribute"

        async def get_module(path: str):
            return Module

        directory = source_directory({"page.ts": "export const title = ''\n"}, FakeAnalyzer(), get_module=get_module)
        file = await directory.get_file("page")

        self.assertEqual(await file.get_export_value("title"), "From attribute")

    async def test_loader_failure_is_wrapped(self) -> None:
        def get_module(path: str):
            raise RuntimeError("boom")

        directory = source_directory({"page.ts": "export const title = ''\n"}, FakeAnalyzer(), get_module=get_module)
        file = await directory.get_file("page")

        with self.assertRaises(LoadError) as raised:
            await file.get_export("title").get_runtime_value()
        self.assertIsInstance(raised.exception.__cause__, RuntimeError)

    async def test_missing_member_is_a_load_error(self) -> None:
        directory = source_directory({"page.ts": ""}, FakeAnalyzer(), get_module=lambda path: {})
        file = await directory.get_file("page")
        with self.assertRaises(LoadError):
            await file.get_export("title").get_runtime_value()

    async def test_schema_validator_transforms_value(self) -> None:
        schema = {"ts": {"metadata": lambda value: {**value, "validated": True}}}
        directory = source_directory(
            {"page.ts": "export const metadata = {}\n"},
            FakeAnalyzer(),
            get_module=lambda path: {"metadata": {"title": "x"}},
            schema=schema,
        )
        file = await directory.get_file("page")

        self.assertEqual(await file.get_export_value("metadata"), {"title": "x", "validated": True})

    async def test_schema_rejection_raises_validation_error(self) -> None:
        def require_title(value):
            if "title" not in value:
                raise ValueError("an object with a title")
            return value

        directory = source_directory(
            {"page.ts": "export const metadata = {}\n"},
            FakeAnalyzer(),
            get_module=lambda path: {"metadata": {}},
            schema={".ts": {"metadata": require_title}},
        )
        file = await directory.get_file("page")

        with self.assertRaises(ValidationError) as raised:
            await file.get_export_value("metadata")
        self.assertEqual(raised.exception.name, "metadata")
        self.assertEqual(raised.exception.expected, "an object with a title")
        self.assertEqual(raised.exception.path, "page.ts")

    async def test_virtual_backend_falls_back_to_executing_source(self) -> None:
        settings = Settings(source_module_extensions=("py",))
        directory = source_directory(
            {"content/meta.py": "title = 'Hello'\nsize = len(title)\n"},
            FakeAnalyzer(),
            settings=settings,
            get_module=lambda path: None,
        )
        file = await directory.get_file("content/meta")

        self.assertEqual(await file.get_export_value("title"), "Hello")
        self.assertEqual(await file.get_export_value("size"), 5)

    async def test_local_backend_without_loader_result_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            directory = Directory(file_system=LocalFileSystem(tmp), analyzer=FakeAnalyzer(), settings=Settings())
            with open(f"{tmp}/page.ts", "w", encoding="utf-8") as handle:
                handle.write("export const title = ''\n")
            file = await directory.get_file("page")

            with self.assertRaises(LoadError):
                await file.get_export_value("title")


if __name__ == "__main__":
    unittest.main()
