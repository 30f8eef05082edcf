"""Help modal content and layout.

Builds the modal as a list of screen rows so the frame writer can emit it
like any other frame.
"""

from __future__ import annotations

from .ansi import fit_ansi_line
from .theme import UITheme

HELP_TITLE = "lazynotes help"

# (heading, ((keys, description), ...))
HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Browse",
        (
            ("j/k Up/Down", "move selection"),
            ("g/G Home/End", "first / last entry"),
            ("PgUp/PgDn", "move by 10"),
            ("l/Right/Enter", "open folder or edit note"),
            ("h/Left/Backspace", "parent folder"),
            ("Ctrl+D/Ctrl+U", "scroll preview"),
        ),
    ),
    (
        "Notes",
        (
            ("n", "new note in current folder"),
            ("N", "new folder"),
            ("r", "rename selection (.. moves up)"),
            ("d/Delete", "delete selection"),
            ("o", "open editor at notes root"),
        ),
    ),
    (
        "Search",
        (
            ("/", "fuzzy search titles"),
            ("#", "fuzzy search tags"),
            ("f", "full-text search"),
            ("Enter/Esc", "keep results / clear search"),
        ),
    ),
    (
        "Other",
        (
            ("S", "git commit + push"),
            ("s", "cycle sort (recent/name/size)"),
            ("t", "cycle theme"),
            ("L", "toggle log pane"),
            ("?", "toggle help"),
            ("q", "quit"),
        ),
    ),
)


def help_body_lines(theme: UITheme) -> list[str]:
    key_width = max(len(keys) for _heading, rows in HELP_SECTIONS for keys, _desc in rows)
    lines: list[str] = []
    for heading, rows in HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{theme.help_heading}{heading}{theme.reset}")
        for keys, description in rows:
            lines.append(f"  {theme.help_key}{keys.ljust(key_width)}{theme.reset}  {description}")
    lines.append("")
    lines.append(f"{theme.dim}Press ? / Esc / q to close{theme.reset}")
    return lines


def help_modal_lines(theme: UITheme, width: int, height: int) -> list[str]:
    """Return ``height`` rows with a framed help box centered on a blank screen."""
    width = max(1, width)
    height = max(1, height)
    body = help_body_lines(theme)
    modal_w = min(width, min(72, max(44, width - 8)))
    modal_h = min(height, len(body) + 2)
    inner_w = max(1, modal_w - 2)
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    indent = " " * x

    rows = ["" for _ in range(height)]
    if modal_h < 2:
        rows[0] = fit_ansi_line(HELP_TITLE, width)
        return rows

    title = f" {HELP_TITLE} "
    top_rule = "─" * max(0, inner_w - len(title) - 1)
    rows[y] = f"{indent}{theme.help_border}╭─{theme.reset}{theme.header}{title}{theme.reset}{theme.help_border}{top_rule}╮{theme.reset}"
    for offset in range(modal_h - 2):
        text = body[offset] if offset < len(body) else ""
        rows[y + 1 + offset] = (
            f"{indent}{theme.help_border}│{theme.reset}{fit_ansi_line(text, inner_w)}{theme.help_border}│{theme.reset}"
        )
    rows[y + modal_h - 1] = f"{indent}{theme.help_border}╰{'─' * inner_w}╯{theme.reset}"
    return rows


__all__ = ["HELP_SECTIONS", "help_body_lines", "help_modal_lines"]
