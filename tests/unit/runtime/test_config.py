from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazynotes.runtime import config


class ConfigTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "config.json"
        patcher = mock.patch.object(config, "CONFIG_PATH", self.path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def write(self, payload: object) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload), encoding="utf-8")


class LoadConfigTests(ConfigTestCase):
    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.load_notes_config(), config.NotesConfig())

    def test_malformed_json_is_ignored(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("lazynotes.runtime.config", level="WARNING"):
            self.assertEqual(config.load_config(), {})

    def test_non_object_is_ignored(self) -> None:
        self.write(["editor_cmd"])
        self.assertEqual(config.load_config(), {})

    def test_values_are_validated(self) -> None:
        self.write(
            {
                "editor_cmd": "  nvim -p ",
                "auto_sync": "yes",
                "sort_mode": "date",
                "theme": "ocean",
                "colors": {"accent": "#AABBCC", "folder": "blue", "bogus": "#000000"},
            }
        )
        loaded = config.load_notes_config()
        self.assertEqual(loaded.editor_cmd, "nvim -p")
        self.assertFalse(loaded.auto_sync)
        self.assertEqual(loaded.sort_mode, "recent")
        self.assertEqual(loaded.theme, "ocean")
        self.assertEqual(loaded.colors, {"accent": "#aabbcc"})

    def test_auto_sync_true(self) -> None:
        self.write({"auto_sync": True, "sort_mode": "size"})
        loaded = config.load_notes_config()
        self.assertTrue(loaded.auto_sync)
        self.assertEqual(loaded.sort_mode, "size")


class SaveConfigTests(ConfigTestCase):
    def test_save_creates_parent_and_round_trips(self) -> None:
        config.save_config({"theme": "ocean"})
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"theme": "ocean"})

    def test_save_preferences_keep_other_keys(self) -> None:
        self.write({"editor_cmd": "nano"})
        config.save_sort_mode("NAME")
        config.save_theme_name("ocean")
        config.save_theme_name("   ")

        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"editor_cmd": "nano", "sort_mode": "name", "theme": "ocean"})

    def test_unwritable_location_is_logged(self) -> None:
        blocker = Path(self._tmp.name) / "nested"
        blocker.write_text("file, not a folder", encoding="utf-8")
        with self.assertLogs("lazynotes.runtime.config", level="WARNING"):
            config.save_config({"theme": "ocean"})


if __name__ == "__main__":
    unittest.main()
