"""Recursive note discovery and document record construction.

Walks the notes root with ``os.walk``, skipping hidden names, and builds
``Document``/``Folder`` records. A single unreadable file is logged and
skipped; the scan as a whole never fails.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .frontmatter import read_tags
from .types import DirectoryEntry, Document, Folder

NOTE_EXTENSION = ".md"
HIDDEN_PREFIX = "."

logger = logging.getLogger(__name__)


def is_hidden_name(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def is_note_name(name: str) -> bool:
    return name.endswith(NOTE_EXTENSION) and not is_hidden_name(name)


def relative_posix(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` as a POSIX string ("" for root)."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        return path.as_posix()
    text = relative.as_posix()
    return "" if text == "." else text


def document_title(path: Path, root: Path) -> str:
    """Display title: root-relative path with the note extension stripped."""
    relative = relative_posix(path, root)
    if relative.endswith(NOTE_EXTENSION):
        return relative[: -len(NOTE_EXTENSION)]
    return relative


def load_document(path: Path, root: Path) -> Document:
    """Build one ``Document`` from disk metadata.

    Raises ``OSError`` when the file cannot be stat'ed. Header problems never
    raise; they yield an empty tag tuple.
    """
    stat = path.stat()
    return Document(
        path=path,
        title=document_title(path, root),
        size=int(stat.st_size),
        mtime_ns=int(stat.st_mtime_ns),
        tags=read_tags(path),
    )


def read_document_body(path: Path) -> str:
    """Read note text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1. ``OSError`` propagates.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def _log_walk_error(error: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", error.filename, error)


def scan_tree(root: Path) -> list[DirectoryEntry]:
    """Return every visible folder and note below ``root``.

    Folders precede documents; each class is ordered lexicographically by its
    root-relative path.
    """
    root = root.resolve()
    folders: list[Folder] = []
    documents: list[Document] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        base = Path(dirpath)
        dirnames[:] = sorted(name for name in dirnames if not is_hidden_name(name))
        for name in dirnames:
            folders.append(Folder(path=base / name))
        for name in sorted(filenames):
            if not is_note_name(name):
                continue
            path = base / name
            try:
                if not path.is_file():
                    continue
                documents.append(load_document(path, root))
            except OSError as exc:
                logger.warning("Skipping note %s: %s", path, exc)

    folders.sort(key=lambda folder: relative_posix(folder.path, root))
    documents.sort(key=lambda doc: relative_posix(doc.path, root))
    return [*folders, *documents]


def scan(root: Path) -> list[Document]:
    """Return every visible note below ``root``, ordered by title."""
    return [entry for entry in scan_tree(root) if isinstance(entry, Document)]


class DocumentIndex:
    """Latest scan results for one notes root."""

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()
        self.entries: list[DirectoryEntry] = []
        self.documents: list[Document] = []
        self._by_path: dict[Path, Document] = {}

    def rescan(self) -> list[Document]:
        """Rebuild all records from disk and return the document list."""
        self.entries = scan_tree(self.root)
        self.documents = [entry for entry in self.entries if isinstance(entry, Document)]
        self._by_path = {doc.path: doc for doc in self.documents}
        logger.debug("Indexed %d notes under %s", len(self.documents), self.root)
        return self.documents

    def find(self, path: Path) -> Document | None:
        return self._by_path.get(path)


__all__ = [
    "DocumentIndex",
    "HIDDEN_PREFIX",
    "NOTE_EXTENSION",
    "document_title",
    "is_hidden_name",
    "is_note_name",
    "load_document",
    "read_document_body",
    "relative_posix",
    "scan",
    "scan_tree",
]
