"""Tests for directory listings, visibility filters, parents, and descriptions."""

from __future__ import annotations

import gc
import unittest
from unittest import mock

from lazydocs import Directory, VirtualFileSystem
from lazydocs.config import Settings


def virtual_directory(files: dict[str, str], **options) -> Directory:
    options.setdefault("settings", Settings())
    return Directory(file_system=VirtualFileSystem(files), **options)


def relative_paths(entries) -> list[str]:
    return [entry.get_relative_path() for entry in entries]


class DirectoryEntriesTests(unittest.IsolatedAsyncioTestCase):
    async def test_visibility_filters(self) -> None:
        directory = virtual_directory(
            {
                ".gitignore": "dist\n",
                "index.ts": "",
                "README.mdx": "",
                "guide.mdx": "",
                "dist/out.js": "",
                ".hidden/x.ts": "",
            }
        )

        self.assertEqual(relative_paths(await directory.get_entries()), ["guide.mdx"])
        self.assertEqual(
            relative_paths(await directory.get_entries(include_hidden=True)),
            [".gitignore", "guide.mdx", ".hidden"],
        )
        self.assertEqual(
            relative_paths(await directory.get_entries(include_index_and_readme=True)),
            ["index.ts", "README.mdx", "guide.mdx"],
        )

    async def test_recursive_listing_is_preorder(self) -> None:
        directory = virtual_directory(
            {
                "a.mdx": "",
                "b/c.mdx": "",
                "b/d/e.mdx": "",
                "f/g.mdx": "",
            }
        )

        entries = await directory.get_entries(recursive=True)

        self.assertEqual(relative_paths(entries), ["a.mdx", "b", "b/c.mdx", "b/d", "b/d/e.mdx", "f", "f/g.mdx"])

    async def test_recursive_listing_skips_ignored_subtrees(self) -> None:
        directory = virtual_directory({".gitignore": "drafts/\n", "drafts/wip.mdx": "", "docs/a.mdx": ""})
        self.assertEqual(relative_paths(await directory.get_entries(recursive=True)), ["docs", "docs/a.mdx"])

    async def test_get_files_and_directories(self) -> None:
        directory = virtual_directory({"a.mdx": "", "b/c.mdx": ""})

        self.assertEqual(relative_paths(await directory.get_files()), ["a.mdx"])
        self.assertEqual(relative_paths(await directory.get_directories()), ["b"])
        self.assertEqual(relative_paths(await directory.get_files(recursive=True)), ["a.mdx", "b/c.mdx"])

    async def test_listing_is_cached(self) -> None:
        file_system = VirtualFileSystem({"a.mdx": ""})
        directory = Directory(file_system=file_system, settings=Settings())
        with mock.patch.object(file_system, "read_directory", wraps=file_system.read_directory) as read_directory:
            first = await directory.get_entries()
            second = await directory.get_entries()

        self.assertEqual(read_directory.call_count, 1)
        self.assertIs(first[0], second[0])

    async def test_parent_is_rebuilt_after_the_listing_directory_is_gone(self) -> None:
        file = await virtual_directory({"docs/guides/intro.mdx": ""}).get_file("docs/guides/intro")
        gc.collect()

        parent = file.get_parent()

        self.assertEqual(parent.get_relative_path(), "docs/guides")
        self.assertEqual(parent.get_path(), "/docs/guides")
        grandparent = parent.get_parent()
        self.assertEqual(grandparent.get_relative_path(), "docs")
        self.assertTrue(grandparent.get_parent().is_root())
        self.assertIsNone(grandparent.get_parent().get_parent())

    async def test_breadcrumbs_exclude_the_root(self) -> None:
        directory = virtual_directory({"docs/guides/intro.mdx": ""})
        file = await directory.get_file("docs/guides/intro")

        self.assertEqual(relative_paths(file.get_breadcrumbs()), ["docs", "docs/guides", "docs/guides/intro.mdx"])

    async def test_read_is_cached_per_file(self) -> None:
        file_system = VirtualFileSystem({"a.mdx": "Hello.\n"})
        directory = Directory(file_system=file_system, settings=Settings())
        file = await directory.get_file("a")
        with mock.patch.object(file_system, "read_file", wraps=file_system.read_file) as read_file:
            self.assertEqual(await file.read(), "Hello.\n")
            self.assertEqual(await file.read(), "Hello.\n")

        self.assertEqual(read_file.call_count, 1)

    async def test_descriptions(self) -> None:
        directory = virtual_directory(
            {
                "hooks/index.ts": "/** Hooks for pointer state. */\nexport {}\n",
                "guide.mdx": "---\ntitle: Guide\n---\n# Guide\n\nLearn the basics.\n",
                "empty/a.mdx": "",
            }
        )

        self.assertEqual(await (await directory.get_file("guide")).get_description(), "Learn the basics.")
        self.assertEqual(await (await directory.get_directory("hooks")).get_description(), "Hooks for pointer state.")
        self.assertIsNone(await (await directory.get_directory("empty")).get_description())


if __name__ == "__main__":
    unittest.main()
