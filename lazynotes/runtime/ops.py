"""Filesystem mutations on the notes tree.

Each operation returns the path it produced and raises ``OSError`` (including
``FileExistsError``) or ``ValueError`` on failure. The caller turns those into
status-line messages; nothing here touches UI state.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..notes.index import NOTE_EXTENSION, is_hidden_name

logger = logging.getLogger(__name__)


def normalize_document_name(name: str) -> str:
    """Turn user input into a note file name.

    Surrounding whitespace is dropped, inner spaces become underscores, and
    ``.md`` is appended unless the name already ends with exactly ``.md``.
    Names the index would never list (an empty final segment, or a hidden
    folder or file anywhere in the path) raise ``ValueError``.
    """
    cleaned = name.strip().replace(" ", "_")
    if not cleaned:
        raise ValueError("Name cannot be empty.")
    _check_visible(cleaned)
    if not cleaned.endswith(NOTE_EXTENSION):
        cleaned = f"{cleaned}{NOTE_EXTENSION}"
    return cleaned


def _normalize_folder_name(name: str) -> str:
    cleaned = name.strip().replace(" ", "_")
    if not cleaned:
        raise ValueError("Name cannot be empty.")
    _check_visible(cleaned.rstrip("/"))
    return cleaned


def _check_visible(relative: str) -> None:
    """Reject names whose result the index would skip as hidden."""
    *parents, final = relative.split("/")
    if not final:
        raise ValueError("Name must end with a file or folder name.")
    # "." and ".." may move between folders but never name the result.
    hidden = [part for part in parents if part not in {".", ".."} and is_hidden_name(part)]
    if is_hidden_name(final):
        hidden.append(final)
    if hidden:
        raise ValueError(f"Hidden names are not allowed: {hidden[0]}")


def _within(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def _checked_target(base: Path, relative: str, root: Path) -> Path:
    target = Path(os.path.normpath(base / relative))
    if not _within(target, root) or target.resolve() == root.resolve():
        raise ValueError(f"Refusing to write outside the notes folder: {relative}")
    return target


def create_document(root: Path, folder: Path, name: str) -> Path:
    """Create an empty note ``name`` inside ``folder``.

    ``name`` may contain ``/`` to create intermediate folders. An existing
    file is never overwritten.
    """
    target = _checked_target(folder, normalize_document_name(name), root)
    if target.exists():
        raise FileExistsError(f"File already exists: {target.name}")
    target.parent.mkdir(parents=True, exist_ok=True)
    # "x" mode closes the race between the exists() check and the write.
    with target.open("x", encoding="utf-8"):
        pass
    logger.info("Created document %s", target)
    return target


def create_folder(root: Path, folder: Path, name: str) -> Path:
    """Create directory ``name`` (and any missing parents) inside ``folder``."""
    target = _checked_target(folder, _normalize_folder_name(name), root)
    if target.exists():
        raise FileExistsError(f"Already exists: {target.name}")
    target.mkdir(parents=True)
    logger.info("Created folder %s", target)
    return target


def rename_entry(root: Path, path: Path, new_name: str) -> Path:
    """Rename ``path`` to ``new_name`` resolved against its parent directory.

    ``new_name`` may use ``..`` or ``/`` to move the entry, as long as the
    result stays under ``root``. Documents keep the ``.md`` extension.
    """
    if path.is_dir():
        relative = _normalize_folder_name(new_name)
    else:
        relative = normalize_document_name(new_name)
    target = _checked_target(path.parent, relative, root)
    if target == path:
        return path
    if target.exists():
        raise FileExistsError(f"Already exists: {target.name}")
    target.parent.mkdir(parents=True, exist_ok=True)
    path.rename(target)
    logger.info("Renamed %s to %s", path, target)
    return target


def delete_entry(root: Path, path: Path) -> None:
    """Delete a document, or a folder with everything below it."""
    if not _within(path, root) or path.resolve() == root.resolve():
        raise ValueError(f"Refusing to delete outside the notes folder: {path}")
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    logger.info("Deleted %s", path)


__all__ = [
    "create_document",
    "create_folder",
    "delete_entry",
    "normalize_document_name",
    "rename_entry",
]
