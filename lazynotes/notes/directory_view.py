"""One-level directory listing below a cursor, plus document sort policies.

A cursor is a root-relative POSIX path ("" is the root). Listing a cursor
returns only the entries exactly one path segment below it: folders first in
index order, then documents ordered by the active sort policy.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .index import relative_posix
from .types import DirectoryEntry, Document, Folder

SORT_RECENT = "recent"
SORT_NAME = "name"
SORT_SIZE = "size"
SORT_POLICIES: tuple[str, ...] = (SORT_RECENT, SORT_NAME, SORT_SIZE)
DEFAULT_SORT_POLICY = SORT_RECENT


def normalize_sort_policy(name: object) -> str:
    """Return a valid sort policy, falling back to the default."""
    if not isinstance(name, str):
        return DEFAULT_SORT_POLICY
    candidate = name.strip().lower()
    # Accept the older "date" spelling.
    if candidate == "date":
        return SORT_RECENT
    return candidate if candidate in SORT_POLICIES else DEFAULT_SORT_POLICY


def next_sort_policy(policy: str) -> str:
    current = normalize_sort_policy(policy)
    idx = SORT_POLICIES.index(current)
    return SORT_POLICIES[(idx + 1) % len(SORT_POLICIES)]


def sort_documents(documents: Iterable[Document], policy: str) -> list[Document]:
    """Return documents ordered by ``policy``; sorting is stable."""
    policy = normalize_sort_policy(policy)
    if policy == SORT_NAME:
        return sorted(documents, key=lambda doc: doc.title.casefold())
    if policy == SORT_SIZE:
        return sorted(documents, key=lambda doc: doc.size, reverse=True)
    return sorted(documents, key=lambda doc: doc.mtime_ns, reverse=True)


def cursor_parts(cursor: str) -> tuple[str, ...]:
    return tuple(part for part in cursor.split("/") if part)


def cursor_depth(cursor: str) -> int:
    return len(cursor_parts(cursor))


def parent_cursor(cursor: str) -> str:
    return "/".join(cursor_parts(cursor)[:-1])


def cursor_for_folder(folder: Folder, root: Path) -> str:
    return relative_posix(folder.path, root)


def cursor_path(root: Path, cursor: str) -> Path:
    """Absolute directory for ``cursor``."""
    return root.joinpath(*cursor_parts(cursor))


def list_directory(
    entries: Iterable[DirectoryEntry],
    root: Path,
    cursor: str,
    sort_policy: str = DEFAULT_SORT_POLICY,
) -> list[DirectoryEntry]:
    """Return entries exactly one level below ``cursor``."""
    prefix = cursor_parts(cursor)
    depth = len(prefix)
    folders: list[Folder] = []
    documents: list[Document] = []
    for entry in entries:
        parts = cursor_parts(relative_posix(entry.path, root))
        if len(parts) != depth + 1 or parts[:depth] != prefix:
            continue
        if isinstance(entry, Folder):
            folders.append(entry)
        else:
            documents.append(entry)
    return [*folders, *sort_documents(documents, sort_policy)]


__all__ = [
    "DEFAULT_SORT_POLICY",
    "SORT_NAME",
    "SORT_POLICIES",
    "SORT_RECENT",
    "SORT_SIZE",
    "cursor_depth",
    "cursor_for_folder",
    "cursor_parts",
    "cursor_path",
    "list_directory",
    "next_sort_policy",
    "normalize_sort_policy",
    "parent_cursor",
    "sort_documents",
]
