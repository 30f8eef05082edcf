"""Frame composition tests using the plain theme where text matters."""

from __future__ import annotations

import unittest
from pathlib import Path

from lazynotes.render import (
    LOADING_PLACEHOLDER,
    RenderContext,
    build_frame_lines,
    build_status_line,
    list_window_start,
    preview_lines,
)
from lazynotes.render.ansi import display_width, strip_ansi
from lazynotes.render.help import HELP_TITLE
from lazynotes.render.theme import (
    DEFAULT_THEME,
    PLAIN_THEME,
    apply_color_overrides,
    hex_to_sgr,
    next_theme_name,
    normalize_theme_name,
    resolve_theme,
)
from lazynotes.notes.types import Document, Folder

ROOT = Path("/notes")


def _doc(name: str, tags: tuple[str, ...] = ()) -> Document:
    return Document(path=ROOT / f"{name}.md", title=name, size=10, mtime_ns=1, tags=tags)


def _context(**overrides) -> RenderContext:
    values = dict(
        root=ROOT,
        cursor="",
        entries=[Folder(ROOT / "projects"), _doc("alpha", ("work",)), _doc("beta")],
        selected=1,
        width=80,
        height=12,
        theme=PLAIN_THEME,
        no_color=True,
    )
    values.update(overrides)
    return RenderContext(**values)


class FrameLayoutTests(unittest.TestCase):
    def test_frame_has_exact_height_and_width(self) -> None:
        for height in (1, 2, 5, 24):
            lines = build_frame_lines(_context(height=height, preview_body="# Alpha"))
            self.assertEqual(len(lines), height)
        for line in build_frame_lines(_context(preview_body="# Alpha"))[:-1]:
            self.assertEqual(display_width(line), 80)

    def test_list_labels_and_selection_marker(self) -> None:
        lines = [strip_ansi(line) for line in build_frame_lines(_context(preview_body="hello"))]
        self.assertIn("lazynotes notes/", lines[0])
        self.assertIn("sort: recent", lines[0])
        self.assertIn("▸ projects/", lines[1])
        self.assertTrue(lines[2].startswith(">  alpha #work"))
        self.assertIn("hello", lines[1])
        self.assertTrue(lines[3].startswith("   beta"))

    def test_loading_placeholder_until_body_arrives(self) -> None:
        lines = build_frame_lines(_context())
        self.assertIn(LOADING_PLACEHOLDER, lines[1])

    def test_preview_error_is_shown(self) -> None:
        lines = build_frame_lines(_context(preview_error="Permission denied"))
        self.assertIn("Error: Permission denied", lines[1])

    def test_folder_preview(self) -> None:
        lines = build_frame_lines(_context(selected=0))
        self.assertIn("projects/", lines[1].split("│", 1)[1])
        self.assertIn("folder, press l to open", lines[2])

    def test_empty_listing(self) -> None:
        lines = build_frame_lines(_context(entries=[], selected=None))
        self.assertIn("(empty folder)", lines[1])
        lines = build_frame_lines(_context(entries=[], selected=None, search_active=True))
        self.assertIn("(no matches)", lines[1])

    def test_search_shows_full_titles_and_prompt(self) -> None:
        nested = Document(path=ROOT / "projects" / "plan.md", title="projects/plan", size=1, mtime_ns=1)
        lines = build_frame_lines(
            _context(
                entries=[nested],
                selected=0,
                search_active=True,
                search_query="pla",
                search_scope="tag",
                mode_label="BROWSE",
            )
        )
        self.assertIn("projects/plan", lines[1])
        self.assertTrue(lines[-1].startswith("[BROWSE] #pla"))

    def test_status_line_prompt(self) -> None:
        lines = build_frame_lines(_context(mode_label="NEW", prompt="New note: ide"))
        self.assertTrue(lines[-1].startswith("[NEW] New note: ide_"))
        self.assertTrue(lines[-1].rstrip().endswith("│ ? Help"))

    def test_log_pane(self) -> None:
        lines = build_frame_lines(_context(height=24, show_logs=True, log_lines=["one", "two"]))
        joined = "\n".join(lines)
        self.assertIn("── logs", joined)
        self.assertIn("two", joined)
        self.assertEqual(len(lines), 24)

    def test_help_modal_replaces_frame(self) -> None:
        lines = build_frame_lines(_context(height=30, show_help=True))
        self.assertEqual(len(lines), 30)
        self.assertTrue(any(HELP_TITLE in line for line in lines))
        self.assertFalse(any("alpha" in line for line in lines))

    def test_preview_scroll_is_clamped(self) -> None:
        body = "\n".join(f"line {idx}" for idx in range(40))
        lines = build_frame_lines(_context(preview_body=body, preview_scroll=1000))
        self.assertIn("line 39", "\n".join(lines))


class HelperTests(unittest.TestCase):
    def test_list_window_keeps_selection_visible(self) -> None:
        self.assertEqual(list_window_start(None, 50, 10), 0)
        self.assertEqual(list_window_start(3, 50, 10), 0)
        self.assertEqual(list_window_start(15, 50, 10), 6)
        self.assertEqual(list_window_start(49, 50, 10), 40)
        self.assertEqual(list_window_start(4, 5, 10), 0)

    def test_status_line_keeps_help_hint(self) -> None:
        line = build_status_line("x" * 200, 40)
        self.assertEqual(len(line), 39)
        self.assertTrue(line.endswith("│ ? Help"))

    def test_preview_lines_highlight_markdown(self) -> None:
        self.assertEqual(preview_lines("# Title\nbody", no_color=True), ["# Title", "body"])
        highlighted = preview_lines("# Title\nbody")
        self.assertIn("\033[", highlighted[0])
        self.assertEqual(strip_ansi(highlighted[0]), "# Title")

    def test_preview_strips_control_sequences(self) -> None:
        lines = preview_lines("safe\033[2Jtext", no_color=True)
        self.assertNotIn("\033", "".join(lines))


class ThemeTests(unittest.TestCase):
    def test_theme_names(self) -> None:
        self.assertEqual(normalize_theme_name(None), "default")
        self.assertEqual(normalize_theme_name(" OCEAN "), "ocean")
        self.assertEqual(normalize_theme_name("missing"), "default")
        self.assertEqual(next_theme_name("default"), "ocean")
        self.assertEqual(next_theme_name("ocean"), "default")

    def test_no_color_uses_plain(self) -> None:
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)

    def test_color_overrides(self) -> None:
        theme = apply_color_overrides(DEFAULT_THEME, {"accent": "#ff8000", "selection": "#000010"})
        self.assertEqual(hex_to_sgr("#ff8000"), "\033[38;2;255;128;0m")
        self.assertEqual(theme.accent, "\033[38;2;255;128;0m")
        self.assertEqual(theme.selection, "\033[48;2;0;0;16m")
        self.assertEqual(theme.folder, DEFAULT_THEME.folder)
        self.assertIs(apply_color_overrides(DEFAULT_THEME, {}), DEFAULT_THEME)


if __name__ == "__main__":
    unittest.main()
