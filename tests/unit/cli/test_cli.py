"""CLI tests: argument parsing, notes-root resolution, and index listing."""

from __future__ import annotations

import io
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazynotes import cli
from lazynotes.logs import PACKAGE_LOGGER
from lazynotes.notes.types import Document


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        saved_handlers = list(package_logger.handlers)

        def restore() -> None:
            for handler in list(package_logger.handlers):
                package_logger.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                package_logger.addHandler(handler)

        self.addCleanup(restore)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.base = Path(self._tmp.name).resolve()


class ListingTests(CliTestCase):
    def test_format_index_listing(self) -> None:
        docs = [
            Document(path=self.base / "a.md", title="a", size=1, mtime_ns=1, tags=("x", "y")),
            Document(path=self.base / "b.md", title="sub/b", size=1, mtime_ns=1),
        ]
        self.assertEqual(cli.format_index_listing(docs), "a  #x #y\nsub/b\n")
        self.assertEqual(cli.format_index_listing([]), "")

    def test_list_flag_prints_sorted_index(self) -> None:
        root = self.base / "notes"
        (root / "sub").mkdir(parents=True)
        (root / "zeta.md").write_text("---\ntags: [work]\n---\nz\n", encoding="utf-8")
        (root / "sub" / "alpha.md").write_text("a\n", encoding="utf-8")
        (root / "ignored.txt").write_text("x", encoding="utf-8")

        stdout = io.StringIO()
        with mock.patch("lazynotes.cli.sys.stdout", stdout), mock.patch("lazynotes.cli.run_session") as run:
            cli.main([str(root), "--list", "--sort", "name"])

        self.assertEqual(stdout.getvalue(), "sub/alpha\nzeta  #work\n")
        run.assert_not_called()

    def test_non_tty_output_lists_instead_of_starting_tui(self) -> None:
        stdout = io.StringIO()
        with mock.patch("lazynotes.cli.sys.stdout", stdout), mock.patch("lazynotes.cli.run_session") as run:
            cli.main([], default_root=self.base / "fresh")

        self.assertTrue((self.base / "fresh").is_dir())
        self.assertEqual(stdout.getvalue(), "")
        run.assert_not_called()


class SessionLaunchTests(CliTestCase):
    def test_tty_starts_session_with_overrides(self) -> None:
        root = self.base / "notes"
        root.mkdir()
        with mock.patch("lazynotes.cli._is_tty", return_value=True), mock.patch(
            "lazynotes.cli.run_session"
        ) as run:
            cli.main([str(root), "--sort", "size", "--theme", "ocean", "--editor", "nano", "--no-color"])

        run.assert_called_once()
        args, kwargs = run.call_args
        self.assertEqual(args[0], root)
        config = args[1]
        self.assertEqual(config.sort_mode, "size")
        self.assertEqual(config.theme, "ocean")
        self.assertEqual(config.editor_cmd, "nano")
        self.assertTrue(kwargs["no_color"])
        self.assertIsNotNone(kwargs["log_buffer"])


class RootResolutionTests(CliTestCase):
    def test_missing_root_is_created(self) -> None:
        target = self.base / "a" / "b"
        self.assertEqual(cli.resolve_notes_root(str(target)), target)
        self.assertTrue(target.is_dir())

    def test_default_root_used_without_argument(self) -> None:
        self.assertEqual(cli.resolve_notes_root(None, self.base), self.base)

    def test_file_root_exits(self) -> None:
        target = self.base / "note.md"
        target.write_text("x", encoding="utf-8")
        with self.assertRaises(SystemExit):
            cli.resolve_notes_root(str(target))

    def test_invalid_sort_choice_exits(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit):
            cli.main([str(self.base), "--sort", "bogus"])


if __name__ == "__main__":
    unittest.main()
