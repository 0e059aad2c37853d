"""Tests for storage/public path helpers, order prefixes, titles, and slugs."""

from __future__ import annotations

import unittest

from lazydocs import paths


class OrderPrefixTests(unittest.TestCase):
    def test_split_order_prefix_returns_order_and_remainder(self) -> None:
        self.assertEqual(paths.split_order_prefix("01.server.ts"), ("01", "server.ts"))
        self.assertEqual(paths.split_order_prefix("10.guides"), ("10", "guides"))

    def test_names_without_prefix_are_unchanged(self) -> None:
        self.assertEqual(paths.split_order_prefix("server.ts"), (None, "server.ts"))
        self.assertEqual(paths.split_order_prefix("v1.2.ts"), (None, "v1.2.ts"))

    def test_prefix_needs_a_remaining_name(self) -> None:
        self.assertEqual(paths.split_order_prefix("01."), (None, "01."))

    def test_remove_order_prefixes_strips_every_segment(self) -> None:
        self.assertEqual(paths.remove_order_prefixes("01.docs/02.intro.mdx"), "docs/intro.mdx")

    def test_file_names_split_extension_before_order(self) -> None:
        self.assertEqual(paths.split_file_name("01.server.ts"), ("01", "server", "ts"))
        self.assertEqual(paths.split_file_name("404.tsx"), (None, "404", "tsx"))
        self.assertEqual(paths.split_file_name("2.1.notes.md"), ("2", "1.notes", "md"))
        self.assertEqual(paths.remove_file_order_prefix("02.setup.mdx"), "setup.mdx")
        self.assertEqual(paths.remove_file_order_prefix("404.tsx"), "404.tsx")

    def test_order_sort_key_compares_prefixes_as_numbers(self) -> None:
        names = ["10.faq", "about", "2.setup", "1.intro"]
        self.assertEqual(sorted(names, key=paths.order_sort_key), ["1.intro", "2.setup", "10.faq", "about"])
        self.assertLess(paths.order_sort_key("9.a.mdx", True), paths.order_sort_key("404.mdx", True))


class StoragePathTests(unittest.TestCase):
    def test_normalize_storage_path_uses_leading_dot_form(self) -> None:
        self.assertEqual(paths.normalize_storage_path("a/b.ts"), "./a/b.ts")
        self.assertEqual(paths.normalize_storage_path("./a//b.ts/"), "./a/b.ts")
        self.assertEqual(paths.normalize_storage_path(""), ".")
        self.assertEqual(paths.normalize_storage_path("./"), ".")
        self.assertEqual(paths.normalize_storage_path("/abs/x"), "/abs/x")

    def test_join_and_parent(self) -> None:
        self.assertEqual(paths.join_storage_path(".", "docs", "intro.mdx"), "./docs/intro.mdx")
        self.assertEqual(paths.storage_parent("./docs/intro.mdx"), "./docs")
        self.assertEqual(paths.storage_parent("./docs"), ".")
        self.assertEqual(paths.storage_parent("."), ".")

    def test_split_extension_treats_dotfiles_as_extensionless(self) -> None:
        self.assertEqual(paths.split_extension("Button.tsx"), ("Button", "tsx"))
        self.assertEqual(paths.split_extension("archive.tar.gz"), ("archive.tar", "gz"))
        self.assertEqual(paths.split_extension(".gitignore"), (".gitignore", None))
        self.assertEqual(paths.split_extension("Makefile"), ("Makefile", None))

    def test_split_path_accepts_strings_and_sequences(self) -> None:
        self.assertEqual(paths.split_path("./components/Button/"), ["components", "Button"])
        self.assertEqual(paths.split_path(["fixtures", "components/index"]), ["fixtures", "components", "index"])
        self.assertEqual(paths.split_path("."), [])


class PublicPathTests(unittest.TestCase):
    def test_join_public_path_with_and_without_base_path(self) -> None:
        self.assertEqual(paths.join_public_path(None, ["docs", "intro"]), "/docs/intro")
        self.assertEqual(paths.join_public_path("renoun", ["server"]), "/renoun/server")
        self.assertEqual(paths.join_public_path("/docs/", []), "/docs")
        self.assertEqual(paths.join_public_path(None, []), "/")

    def test_format_title(self) -> None:
        self.assertEqual(paths.format_title("use-hover"), "Use Hover")
        self.assertEqual(paths.format_title("useHover"), "Use Hover")
        self.assertEqual(paths.format_title("getting_started_with_the_API"), "Getting Started with the API")

    def test_create_slug(self) -> None:
        self.assertEqual(paths.create_slug("useHover"), "use-hover")
        self.assertEqual(paths.create_slug("Getting Started!"), "getting-started")


if __name__ == "__main__":
    unittest.main()
