"""Filesystem change signatures for poll-based refreshes.

Computes a cheap digest over names, sizes, and mtimes of every visible
directory below the notes root. The watch thread compares successive digests
to decide when to post a ``FileChanged`` event.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from ..notes.index import is_hidden_name


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def build_tree_watch_signature(root: Path) -> str:
    """Build a digest describing every visible entry under ``root``.

    Hidden names are excluded so edits inside ``.git`` or editor swap files
    do not trigger rescans.
    """
    root = root.resolve()
    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"root:{root}")

    pending: list[Path] = [root]
    while pending:
        directory = pending.pop()
        _update_digest(digest, f"dir:{directory}")
        children: list[tuple[str, bool, int, int, str]] = []
        try:
            with os.scandir(directory) as entries:
                for child in entries:
                    name = child.name
                    if is_hidden_name(name):
                        continue
                    try:
                        is_dir = child.is_dir(follow_symlinks=False)
                    except OSError:
                        is_dir = False
                    try:
                        st = child.stat(follow_symlinks=False)
                        mtime_ns = st.st_mtime_ns
                        size = st.st_size
                        state = "ok"
                    except OSError:
                        mtime_ns = 0
                        size = 0
                        state = "error"
                    children.append((name, is_dir, mtime_ns, size, state))
        except OSError:
            _update_digest(digest, "children:error")
            continue

        children.sort(key=lambda item: (not item[1], item[0]))
        for name, is_dir, mtime_ns, size, state in children:
            # Directory sizes/mtimes are noisy across filesystems; children cover them.
            if is_dir:
                _update_digest(digest, f"child:{name}:1:{state}")
                pending.append(directory / name)
            else:
                _update_digest(digest, f"child:{name}:0:{state}:{mtime_ns}:{size}")

    return digest.hexdigest()


__all__ = ["build_tree_watch_signature"]
