"""End-to-end source-module tests over a virtual tree with the Tree-sitter analyzer."""

from __future__ import annotations

import unittest

from lazydocs import Directory, VirtualFileSystem
from lazydocs.analysis import clear_parse_cache, parser_available
from lazydocs.config import Settings
from lazydocs.entries import has_extension


@unittest.skipUnless(parser_available("typescript"), "Tree-sitter TypeScript grammar is required")
class SourceModuleTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        clear_parse_cache()

    async def test_export_round_trip_through_loader(self) -> None:
        directory = Directory(
            file_system=VirtualFileSystem({"index.ts": "export const x = 1"}),
            get_module=lambda path: {"x": 1},
            settings=Settings(),
        )

        file = await directory.get_file("index", "ts")
        export = file.get_export("x")

        self.assertEqual(await export.get_name(), "x")
        self.assertEqual(await export.get_runtime_value(), 1)

    async def test_export_round_trip_through_virtual_transpile(self) -> None:
        directory = Directory(file_system=VirtualFileSystem({"index.ts": "export const x = 1"}), settings=Settings())

        file = await directory.get_file("index", "ts")

        self.assertEqual(await file.get_export("x").get_runtime_value(), 1)

    async def test_anonymous_default_export_is_named_after_the_file(self) -> None:
        directory = Directory(
            file_system=VirtualFileSystem({"hooks/useHover.ts": "export default function () {}\n"}),
            settings=Settings(),
        )

        file = await directory.get_file("hooks/useHover")

        self.assertEqual(await file.get_export("default").get_name(), file.get_name())
        self.assertEqual(file.get_name(), "useHover")

    async def test_exports_positions_and_environment(self) -> None:
        directory = Directory(
            file_system=VirtualFileSystem(
                {
                    "server.ts": "import 'server-only'\n\n/** Starts it. */\nexport const useHover = () => {}\n",
                }
            ),
            settings=Settings(),
        )
        file = await directory.get_file("server")

        exports = await file.get_exports()

        self.assertEqual([export.name for export in exports], ["useHover"])
        self.assertEqual(await exports[0].get_environment(), "server")
        self.assertEqual(await exports[0].get_description(), "Starts it.")
        self.assertEqual(await file.get_diagnostics(), [])


class HasExtensionTests(unittest.IsolatedAsyncioTestCase):
    async def test_set_form_is_the_disjunction_of_single_forms(self) -> None:
        directory = Directory(
            file_system=VirtualFileSystem({"a.ts": "", "b.mdx": "", "c": ""}),
            settings=Settings(),
        )
        files = await directory.get_files()
        options = ["ts", "tsx", "mdx", "md"]

        for file in files:
            for first in options:
                for second in options:
                    with self.subTest(file=file.get_relative_path(), extensions=(first, second)):
                        self.assertEqual(
                            has_extension(file, [first, second]),
                            has_extension(file, first) or has_extension(file, second),
                        )
        self.assertEqual([file.get_extension() for file in files], ["ts", "mdx", None])


if __name__ == "__main__":
    unittest.main()
