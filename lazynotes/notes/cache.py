"""Bounded LRU cache of note bodies.

Bodies load lazily on first access. When the resident set grows beyond
``capacity`` the least recently used body is dropped, skipping any path in
the pinned set (normally the current selection). Pins are keyed by document
path, never by list position, since positions shift under re-sort and
filtering.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable, Iterable
from pathlib import Path

from .index import read_document_body
from .types import Document

DEFAULT_CACHE_CAPACITY = 10

logger = logging.getLogger(__name__)


class ContentCache:
    def __init__(
        self,
        capacity: int = DEFAULT_CACHE_CAPACITY,
        read_body: Callable[[Path], str] = read_document_body,
    ) -> None:
        self.capacity = max(1, int(capacity))
        self._read_body = read_body
        self._bodies: OrderedDict[Path, str] = OrderedDict()
        self._stamps: dict[Path, tuple[int, int]] = {}
        self._pinned: set[Path] = set()

    def __len__(self) -> int:
        return len(self._bodies)

    def __contains__(self, path: object) -> bool:
        return path in self._bodies

    @property
    def pinned(self) -> frozenset[Path]:
        return frozenset(self._pinned)

    def pin(self, path: Path) -> None:
        self._pinned.add(path)

    def unpin(self, path: Path) -> None:
        self._pinned.discard(path)

    def set_pinned(self, paths: Iterable[Path]) -> None:
        """Replace the pinned set."""
        self._pinned = set(paths)

    def get_or_load(self, doc: Document) -> str:
        """Return the body of ``doc``, reading it from disk on a miss.

        Either way ``doc`` becomes the most recently used entry. ``OSError``
        from the read propagates and nothing is cached.
        """
        path = doc.path
        cached = self._bodies.get(path)
        if cached is not None:
            self._bodies.move_to_end(path)
            return cached

        body = self._read_body(path)
        self._bodies[path] = body
        self._stamps[path] = (doc.size, doc.mtime_ns)
        self._bodies.move_to_end(path)
        self._evict_overflow()
        return body

    def peek(self, doc: Document) -> str | None:
        """Return a resident body without touching recency order."""
        return self._bodies.get(doc.path)

    def is_resident(self, doc: Document) -> bool:
        return doc.path in self._bodies

    def resident_paths(self) -> list[Path]:
        """Resident paths, least recently used first."""
        return list(self._bodies.keys())

    def invalidate(self, path: Path) -> None:
        self._bodies.pop(path, None)
        self._stamps.pop(path, None)

    def retain(self, documents: Iterable[Document]) -> None:
        """Drop bodies whose document vanished or changed size/mtime on disk."""
        current = {doc.path: (doc.size, doc.mtime_ns) for doc in documents}
        for path in list(self._bodies.keys()):
            if current.get(path) != self._stamps.get(path):
                self.invalidate(path)

    def clear(self) -> None:
        self._bodies.clear()
        self._stamps.clear()

    def _evict_overflow(self) -> None:
        while len(self._bodies) > self.capacity:
            victim = next((path for path in self._bodies if path not in self._pinned), None)
            if victim is None:
                return
            logger.debug("Evicting cached body for %s", victim)
            self.invalidate(victim)


__all__ = ["ContentCache", "DEFAULT_CACHE_CAPACITY"]
