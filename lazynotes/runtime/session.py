"""Mutable session state owned by the control loop.

Only the control-loop thread reads or writes a ``SessionState``; producer
threads talk to it exclusively through the event queue.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..input.modes import BROWSING, Mode
from ..notes.directory_view import DEFAULT_SORT_POLICY
from ..notes.types import DirectoryEntry, Document
from ..search.ranking import SEARCH_SCOPE_TITLE


@dataclass(frozen=True)
class OperationOutcome:
    """Result of a user-triggered file operation."""

    ok: bool
    message: str
    path: Path | None = None


@dataclass
class SessionState:
    root: Path
    cursor: str = ""
    entries: list[DirectoryEntry] = field(default_factory=list)
    selected: int | None = None
    mode: Mode = BROWSING
    input_buffer: str = ""
    search_query: str = ""
    search_scope: str = SEARCH_SCOPE_TITLE
    search_active: bool = False
    sort_policy: str = DEFAULT_SORT_POLICY
    theme_name: str = "default"
    status_message: str = ""
    preview_scroll: int = 0
    show_logs: bool = False
    pending_path: Path | None = None
    should_quit: bool = False
    dirty: bool = True

    def selected_entry(self) -> DirectoryEntry | None:
        if self.selected is None or not (0 <= self.selected < len(self.entries)):
            return None
        return self.entries[self.selected]

    def selected_document(self) -> Document | None:
        entry = self.selected_entry()
        return entry if isinstance(entry, Document) else None

    def replace_entries(self, entries: list[DirectoryEntry], keep_path: Path | None = None) -> None:
        """Swap the active list, keeping ``keep_path`` selected when present."""
        self.entries = entries
        if not entries:
            self.selected = None
            return
        if keep_path is not None:
            for idx, entry in enumerate(entries):
                if entry.path == keep_path:
                    self.selected = idx
                    return
        if self.selected is None:
            self.selected = 0
        else:
            self.selected = min(self.selected, len(entries) - 1)

    def move_selection(self, delta: int) -> bool:
        """Move by ``delta``; return whether selection changed.

        Single steps wrap around the ends of the list, page moves clamp.
        """
        if not self.entries:
            self.selected = None
            return False
        current = self.selected if self.selected is not None else 0
        count = len(self.entries)
        if abs(delta) == 1:
            target = (current + delta) % count
        else:
            target = max(0, min(count - 1, current + delta))
        changed = target != self.selected
        self.selected = target
        return changed

    def jump_selection(self, to_end: bool) -> bool:
        if not self.entries:
            self.selected = None
            return False
        target = len(self.entries) - 1 if to_end else 0
        changed = target != self.selected
        self.selected = target
        return changed


__all__ = ["OperationOutcome", "SessionState"]
