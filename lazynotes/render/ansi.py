"""ANSI-aware width measurement and clipping for frame composition.

Escape sequences never count toward width, tabs expand to 8-column stops,
and wide East Asian characters take two cells.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Visible column count of ``text`` with escapes removed."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim, tabs become spaces.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    idx = 0
    while idx < len(text) and col < max_cols:
        match = ANSI_ESCAPE_RE.match(text, idx) if text[idx] == "\x1b" else None
        if match is not None:
            out.append(match.group(0))
            idx = match.end()
            continue
        ch = text[idx]
        width = char_display_width(ch, col)
        if col + width > max_cols:
            break
        out.append(" " * width if ch == "\t" else ch)
        col += width
        idx += 1
    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip to ``width`` columns, then pad with spaces to exactly ``width``."""
    clipped = clip_ansi_line(text, width)
    padding = max(0, width - display_width(clipped))
    if "\033" in clipped:
        return f"{clipped}\033[0m{' ' * padding}"
    return f"{clipped}{' ' * padding}"


def sanitize_terminal_text(source: str) -> str:
    """Escape control bytes so note text cannot move the cursor or ring the bell."""
    if _CONTROL_RE.search(source) is None:
        return source
    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
        elif code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
        else:
            out.append(ch)
    return "".join(out)


__all__ = [
    "ANSI_ESCAPE_RE",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "fit_ansi_line",
    "sanitize_terminal_text",
    "strip_ansi",
]
