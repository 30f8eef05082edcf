"""Record types shared by the index, cache, and directory view."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class Document:
    """One indexed note file.

    ``path`` is the identity. Bodies are not stored here; they live in
    :class:`lazynotes.notes.cache.ContentCache` keyed by ``path``.
    """

    path: Path
    title: str
    size: int
    mtime_ns: int
    tags: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.path.stem

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class Folder:
    """A directory below the notes root."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_dir(self) -> bool:
        return True


DirectoryEntry = Union[Document, Folder]


__all__ = ["DirectoryEntry", "Document", "Folder"]
