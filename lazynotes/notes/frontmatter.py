"""Tag extraction from a leading YAML front-matter block.

Only the first lines of a note are read. Anything unexpected (no opening
delimiter, unterminated block, YAML errors, odd types) yields no tags.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

FRONTMATTER_DELIMITER = "---"
FRONTMATTER_MAX_LINES = 200

logger = logging.getLogger(__name__)


def read_frontmatter_block(path: Path, max_lines: int = FRONTMATTER_MAX_LINES) -> str | None:
    """Return raw header text between the delimiters, or ``None`` when absent.

    Raises ``OSError`` when the file cannot be opened or read.
    """
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        first = handle.readline()
        if first.strip() != FRONTMATTER_DELIMITER:
            return None
        lines: list[str] = []
        for _ in range(max_lines):
            line = handle.readline()
            if not line:
                return None
            if line.strip() == FRONTMATTER_DELIMITER:
                return "".join(lines)
            lines.append(line)
    return None


def _normalize_tag(value: object) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def parse_tags(header: str) -> tuple[str, ...]:
    """Parse the ``tags`` key out of header text.

    Accepts a YAML list of scalars or a comma-separated string. Returns ``()``
    for malformed YAML or any other shape.
    """
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError:
        return ()
    if not isinstance(data, dict):
        return ()

    raw = data.get("tags")
    if isinstance(raw, str):
        candidates: list[object] = list(raw.split(","))
    elif isinstance(raw, list):
        candidates = raw
    else:
        return ()

    tags: list[str] = []
    for candidate in candidates:
        tag = _normalize_tag(candidate)
        if tag is not None and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def read_tags(path: Path) -> tuple[str, ...]:
    """Read and parse tags for ``path``; never raises."""
    try:
        header = read_frontmatter_block(path)
    except OSError as exc:
        logger.debug("Could not read header of %s: %s", path, exc)
        return ()
    if header is None:
        return ()
    return parse_tags(header)


__all__ = [
    "FRONTMATTER_DELIMITER",
    "FRONTMATTER_MAX_LINES",
    "parse_tags",
    "read_frontmatter_block",
    "read_tags",
]
