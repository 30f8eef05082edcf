"""Frame composition for the notes browser.

``build_frame_lines`` turns a ``RenderContext`` into screen rows without
touching the terminal; ``render_frame`` writes those rows as one full-screen
ANSI frame. Layout from top to bottom: header, list/preview split, optional
log pane, status line.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import MarkdownLexer

from ..notes.types import DirectoryEntry, Folder
from ..search.ranking import SEARCH_SCOPE_CONTENT, SEARCH_SCOPE_TAG
from .ansi import clip_ansi_line, display_width, fit_ansi_line, sanitize_terminal_text
from .help import help_modal_lines
from .theme import DEFAULT_THEME, UITheme

LOADING_PLACEHOLDER = "Loading..."
LEFT_PANE_PERCENT = 35
LEFT_PANE_MIN_WIDTH = 20
LOG_PANE_MAX_ROWS = 8
SEARCH_PREFIXES: dict[str, str] = {SEARCH_SCOPE_TAG: "#", SEARCH_SCOPE_CONTENT: "f>"}


@dataclass
class RenderContext:
    root: Path
    cursor: str
    entries: list[DirectoryEntry]
    selected: int | None
    width: int
    height: int
    theme: UITheme = DEFAULT_THEME
    no_color: bool = False
    sort_policy: str = "recent"
    mode_label: str = "BROWSE"
    prompt: str | None = None
    status_message: str = ""
    search_active: bool = False
    search_query: str = ""
    search_scope: str = "title"
    preview_body: str | None = None
    preview_error: str | None = None
    preview_scroll: int = 0
    show_help: bool = False
    show_logs: bool = False
    log_lines: list[str] = field(default_factory=list)


@lru_cache(maxsize=16)
def highlight_markdown(text: str) -> str:
    """Colorize Markdown for the preview pane."""
    return highlight(text, MarkdownLexer(), TerminalFormatter())


def preview_lines(body: str, no_color: bool = False) -> list[str]:
    text = sanitize_terminal_text(body)
    rendered = text if no_color else highlight_markdown(text)
    return rendered.splitlines()


def left_pane_width(width: int) -> int:
    if width <= LEFT_PANE_MIN_WIDTH + 2:
        return max(1, width // 2)
    return max(LEFT_PANE_MIN_WIDTH, (width * LEFT_PANE_PERCENT) // 100)


def list_window_start(selected: int | None, count: int, rows: int) -> int:
    """First visible list row such that the selection stays on screen."""
    if selected is None or rows <= 0 or count <= rows:
        return 0
    start = max(0, selected - rows + 1)
    return min(start, count - rows)


def _entry_label(entry: DirectoryEntry, search_active: bool, theme: UITheme) -> str:
    if isinstance(entry, Folder):
        return f"{theme.folder}▸ {entry.name}/{theme.reset}"
    label = entry.title if search_active else entry.name
    tags = ""
    if entry.tags:
        tags = " " + theme.tag + " ".join(f"#{tag}" for tag in entry.tags) + theme.reset
    return f"{theme.document}  {label}{theme.reset}{tags}"


def _list_rows(context: RenderContext, width: int, rows: int) -> list[str]:
    theme = context.theme
    if not context.entries:
        empty = "no matches" if context.search_active else "empty folder"
        return [fit_ansi_line(f"{theme.dim}  ({empty}){theme.reset}", width)] + [" " * width] * (rows - 1)

    start = list_window_start(context.selected, len(context.entries), rows)
    out: list[str] = []
    for idx in range(start, min(len(context.entries), start + rows)):
        label = _entry_label(context.entries[idx], context.search_active, theme)
        if idx == context.selected:
            plain = clip_ansi_line(label, width - 1)
            # Re-apply selection styling after every reset inside the label.
            selection = theme.selection or ""
            body = plain.replace("\033[0m", f"\033[0m{selection}") if selection else plain
            marker = ">" if not selection else " "
            out.append(fit_ansi_line(f"{selection}{marker}{body}", width))
        else:
            out.append(fit_ansi_line(f" {label}", width))
    while len(out) < rows:
        out.append(" " * width)
    return out


def _preview_source(context: RenderContext) -> list[str]:
    theme = context.theme
    entry = None
    if context.selected is not None and 0 <= context.selected < len(context.entries):
        entry = context.entries[context.selected]
    if entry is None:
        return []
    if isinstance(entry, Folder):
        return [
            f"{theme.folder}{entry.name}/{theme.reset}",
            f"{theme.dim}folder, press l to open{theme.reset}",
        ]
    if context.preview_error is not None:
        return [f"{theme.error}Error: {context.preview_error}{theme.reset}"]
    if context.preview_body is None:
        return [f"{theme.dim}{LOADING_PLACEHOLDER}{theme.reset}"]
    return preview_lines(context.preview_body, no_color=context.no_color)


def _preview_rows(context: RenderContext, width: int, rows: int) -> list[str]:
    source = _preview_source(context)
    max_scroll = max(0, len(source) - rows)
    start = max(0, min(context.preview_scroll, max_scroll))
    out = [fit_ansi_line(line, width) for line in source[start : start + rows]]
    while len(out) < rows:
        out.append(" " * width)
    return out


def _header_row(context: RenderContext, width: int) -> str:
    theme = context.theme
    location = f"/{context.cursor}" if context.cursor else "/"
    left = f"{theme.header}lazynotes{theme.reset} {theme.accent}{context.root.name}{location}{theme.reset}"
    right = f"{theme.dim}sort: {context.sort_policy}{theme.reset}"
    gap = max(1, width - display_width(left) - display_width(right))
    return fit_ansi_line(f"{left}{' ' * gap}{right}", width)


def _search_prompt(context: RenderContext) -> str:
    prefix = SEARCH_PREFIXES.get(context.search_scope, "/")
    return f"{prefix}{context.search_query}"


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _status_text(context: RenderContext) -> str:
    parts = [f"[{context.mode_label}]"]
    if context.prompt is not None:
        parts.append(f"{context.prompt}_")
    elif context.search_active:
        parts.append(_search_prompt(context))
    if context.status_message:
        parts.append(context.status_message)
    return " ".join(parts)


def _log_rows(context: RenderContext, width: int, rows: int) -> list[str]:
    theme = context.theme
    title = f"{theme.divider}── logs {'─' * max(0, width - 8)}{theme.reset}"
    out = [fit_ansi_line(title, width)]
    tail = context.log_lines[-(rows - 1) :] if rows > 1 else []
    for line in tail:
        out.append(fit_ansi_line(f"{theme.dim}{sanitize_terminal_text(line)}{theme.reset}", width))
    while len(out) < rows:
        out.append(" " * width)
    return out


def build_frame_lines(context: RenderContext) -> list[str]:
    """Return exactly ``context.height`` rows describing the next frame."""
    width = max(1, context.width)
    height = max(1, context.height)
    theme = context.theme
    if context.show_help:
        return help_modal_lines(theme, width, height)

    status = f"{theme.reverse}{build_status_line(_status_text(context), width)}{theme.reset}"
    if height == 1:
        return [status]

    log_rows = 0
    if context.show_logs:
        log_rows = min(LOG_PANE_MAX_ROWS, max(0, (height - 2) // 3))
    body_rows = max(0, height - 2 - log_rows)

    rows = [_header_row(context, width)]
    left_width = left_pane_width(width)
    right_width = max(0, width - left_width - 1)
    list_rows = _list_rows(context, left_width, body_rows)
    if right_width > 0:
        preview = _preview_rows(context, right_width, body_rows)
        divider = f"{theme.divider}│{theme.reset}"
        rows.extend(f"{left}{divider}{right}" for left, right in zip(list_rows, preview))
    else:
        rows.extend(list_rows)
    if log_rows:
        rows.extend(_log_rows(context, width, log_rows))
    rows.append(status)
    return rows[:height]


def render_frame(context: RenderContext) -> None:
    """Write one full frame to stdout."""
    out = "\033[H\033[J" + "\r\n".join(build_frame_lines(context))
    os.write(sys.stdout.fileno(), out.encode("utf-8", errors="replace"))


__all__ = [
    "LOADING_PLACEHOLDER",
    "RenderContext",
    "build_frame_lines",
    "build_status_line",
    "highlight_markdown",
    "list_window_start",
    "preview_lines",
    "render_frame",
]
