"""Session controller: applies intents to session state and drives the loop.

The controller is the only owner of ``SessionState``. Key events go through
the mode state machine; the resulting intent is applied synchronously inside
the same dispatch, so a navigation key is fully reflected in the next frame.
Editor and ``git`` subprocesses run in the foreground with the input poller
paused and the terminal handed back.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

from ..input.modes import (
    BROWSING,
    CONFIRM_DELETE,
    PURPOSE_CREATE,
    PURPOSE_CREATE_FOLDER,
    PURPOSE_RENAME,
    BeginSearch,
    CancelInput,
    ClearSearch,
    CloseHelp,
    CommitSearch,
    ConfirmDeletion,
    DeleteChar,
    DeleteSelected,
    EditRoot,
    Help,
    InsertChar,
    Intent,
    JumpSelection,
    ModeStateMachine,
    MoveSelection,
    NewDocument,
    NewFolder,
    NoIntent,
    OpenSelected,
    ParentFolder,
    Quit,
    RenameSelected,
    ScrollPreview,
    SearchInput,
    ShowHelp,
    Submit,
    Sync,
    TextInput,
    ToggleLogs,
    ToggleSort,
    ToggleTheme,
    mode_label,
)
from ..logs import LogBuffer
from ..notes.cache import DEFAULT_CACHE_CAPACITY, ContentCache
from ..notes.directory_view import (
    cursor_for_folder,
    cursor_path,
    list_directory,
    next_sort_policy,
    parent_cursor,
    sort_documents,
)
from ..notes.index import DocumentIndex, relative_posix
from ..notes.types import DirectoryEntry, Document, Folder
from ..render import RenderContext, render_frame
from ..render.theme import next_theme_name, normalize_theme_name, resolve_theme
from ..search.ranking import rank
from . import config as config_store
from .config import NotesConfig
from .editor import launch_editor as default_launch_editor
from .events import Event, EventBus, FileChanged, KeyEvent
from .git_sync import SyncOutcome, run_git_sync
from .ops import create_document, create_folder, delete_entry, rename_entry
from .session import OperationOutcome, SessionState
from .terminal import TerminalController

EditorLauncher = Callable[..., str | None]
SyncRunner = Callable[[Path], SyncOutcome]

logger = logging.getLogger(__name__)


def _noop() -> None:
    return None


class SessionController:
    """Own session state and translate events into state changes."""

    def __init__(
        self,
        root: Path,
        *,
        config: NotesConfig | None = None,
        bus: EventBus | None = None,
        terminal: TerminalController | None = None,
        log_buffer: LogBuffer | None = None,
        cache_capacity: int = DEFAULT_CACHE_CAPACITY,
        no_color: bool = False,
        persist_preferences: bool = True,
        launch_editor: EditorLauncher = default_launch_editor,
        run_sync: SyncRunner = run_git_sync,
        render: Callable[[RenderContext], None] = render_frame,
        terminal_size: Callable[[], tuple[int, int]] | None = None,
    ) -> None:
        self.config = config if config is not None else NotesConfig()
        self.index = DocumentIndex(root)
        self.cache = ContentCache(cache_capacity)
        self.machine = ModeStateMachine()
        self.bus = bus if bus is not None else EventBus()
        self.terminal = terminal
        self.log_buffer = log_buffer
        self.no_color = no_color
        self.persist_preferences = persist_preferences
        self._launch_editor = launch_editor
        self._run_sync = run_sync
        self._render = render
        self._terminal_size = terminal_size or self._default_terminal_size
        self._preview_errors: dict[Path, str] = {}
        self.state = SessionState(
            root=self.index.root,
            sort_policy=self.config.sort_mode,
            theme_name=normalize_theme_name(self.config.theme),
        )
        self._handlers: dict[type, Callable[[Intent], None]] = {
            NoIntent: self._ignore,
            Quit: self._quit,
            MoveSelection: self._move_selection,
            JumpSelection: self._jump_selection,
            OpenSelected: self._open_selected,
            ParentFolder: self._parent_folder,
            ScrollPreview: self._scroll_preview,
            NewDocument: self._new_document,
            NewFolder: self._new_folder,
            RenameSelected: self._rename_selected,
            DeleteSelected: self._delete_selected,
            Sync: self._sync,
            ToggleSort: self._toggle_sort,
            ToggleTheme: self._toggle_theme,
            ToggleLogs: self._toggle_logs,
            EditRoot: self._edit_root,
            BeginSearch: self._begin_search,
            InsertChar: self._insert_char,
            DeleteChar: self._delete_char,
            Submit: self._submit,
            ConfirmDeletion: self._confirm_deletion,
            CancelInput: self._cancel_input,
            CommitSearch: self._commit_search,
            ClearSearch: self._clear_search,
            ShowHelp: self._ignore,
            CloseHelp: self._ignore,
        }

    @property
    def root(self) -> Path:
        return self.index.root

    @staticmethod
    def _default_terminal_size() -> tuple[int, int]:
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines

    # Index and active list

    def start(self) -> None:
        """Build the initial index and listing."""
        self.index.rescan()
        self.rebuild_active_list()

    def refresh_index(self, keep_path: Path | None = None) -> None:
        """Rescan the root and rebuild the active list.

        The current selection is kept by path when it still exists.
        """
        if keep_path is None:
            entry = self.state.selected_entry()
            keep_path = entry.path if entry is not None else None
        self.index.rescan()
        self.cache.retain(self.index.documents)
        self._preview_errors.clear()
        self.rebuild_active_list(keep_path)

    def rebuild_active_list(self, keep_path: Path | None = None) -> None:
        state = self.state
        if state.search_active:
            entries: list[DirectoryEntry] = list(self._search_results())
        else:
            self._settle_cursor()
            entries = list_directory(self.index.entries, self.root, state.cursor, state.sort_policy)
        state.replace_entries(entries, keep_path)
        self._selection_changed()

    def _search_results(self) -> list[Document]:
        state = self.state
        ordered = sort_documents(self.index.documents, state.sort_policy)
        return rank(ordered, state.search_query, state.search_scope, load_body=self.cache.get_or_load)

    def _settle_cursor(self) -> None:
        """Walk the cursor up until it names an existing folder."""
        state = self.state
        while state.cursor and not cursor_path(self.root, state.cursor).is_dir():
            state.cursor = parent_cursor(state.cursor)

    def _selection_changed(self) -> None:
        """Pin and load the newly selected document."""
        state = self.state
        state.preview_scroll = 0
        state.dirty = True
        doc = state.selected_document()
        if doc is None:
            self.cache.set_pinned(())
            return
        self.cache.set_pinned((doc.path,))
        try:
            self.cache.get_or_load(doc)
        except OSError as exc:
            logger.warning("Could not read %s: %s", doc.path, exc)
            self._preview_errors[doc.path] = str(exc)
        else:
            self._preview_errors.pop(doc.path, None)

    # Event dispatch

    def handle_event(self, event: Event) -> None:
        if isinstance(event, KeyEvent):
            self.handle_key(event.key)
        elif isinstance(event, FileChanged):
            logger.debug("Filesystem change detected; rescanning")
            self.refresh_index()

    def handle_key(self, key: str) -> None:
        intent = self.machine.handle(key)
        self.apply(intent)
        self.state.mode = self.machine.mode
        self.state.dirty = True

    def apply(self, intent: Intent) -> None:
        """Apply one intent; every intent type has exactly one handler."""
        handler = self._handlers.get(type(intent))
        if handler is None:
            raise TypeError(f"unhandled intent: {intent!r}")
        handler(intent)

    # Intent handlers

    def _ignore(self, _intent: Intent) -> None:
        return None

    def _quit(self, _intent: Intent) -> None:
        self.state.should_quit = True

    def _move_selection(self, intent: MoveSelection) -> None:
        if self.state.move_selection(intent.delta):
            self._selection_changed()

    def _jump_selection(self, intent: JumpSelection) -> None:
        if self.state.jump_selection(intent.to_end):
            self._selection_changed()

    def _open_selected(self, _intent: Intent) -> None:
        entry = self.state.selected_entry()
        if entry is None:
            return
        if isinstance(entry, Folder):
            self.state.cursor = cursor_for_folder(entry, self.root)
            self.state.status_message = ""
            self.rebuild_active_list()
            return
        self.edit_document(entry.path)

    def _parent_folder(self, _intent: Intent) -> None:
        state = self.state
        if state.search_active:
            self._end_search(follow_selection=True)
            return
        if not state.cursor:
            return
        came_from = cursor_path(self.root, state.cursor)
        state.cursor = parent_cursor(state.cursor)
        state.status_message = ""
        self.rebuild_active_list(came_from)

    def _scroll_preview(self, intent: ScrollPreview) -> None:
        self.state.preview_scroll = max(0, self.state.preview_scroll + intent.delta)

    def _new_document(self, _intent: Intent) -> None:
        self._begin_text_input(PURPOSE_CREATE, "")

    def _new_folder(self, _intent: Intent) -> None:
        self._begin_text_input(PURPOSE_CREATE_FOLDER, "")

    def _rename_selected(self, _intent: Intent) -> None:
        entry = self.state.selected_entry()
        if entry is None:
            self.state.status_message = "Nothing selected."
            return
        self.state.pending_path = entry.path
        self._begin_text_input(PURPOSE_RENAME, entry.name)

    def _begin_text_input(self, purpose: str, initial: str) -> None:
        self.machine.enter(TextInput(purpose))
        self.state.input_buffer = initial
        self.state.status_message = ""

    def _delete_selected(self, _intent: Intent) -> None:
        entry = self.state.selected_entry()
        if entry is None:
            self.state.status_message = "Nothing selected."
            return
        self.state.pending_path = entry.path
        self.machine.enter(CONFIRM_DELETE)
        label = entry.title if isinstance(entry, Document) else f"{entry.name}/"
        self.state.status_message = f"Delete '{label}'? (y/n)"

    def _sync(self, _intent: Intent) -> None:
        outcome = self.sync()
        self.state.status_message = outcome.message if outcome.ok else f"Sync error: {outcome.message}"

    def _toggle_sort(self, _intent: Intent) -> None:
        state = self.state
        state.sort_policy = next_sort_policy(state.sort_policy)
        state.status_message = f"Sort: {state.sort_policy}"
        if self.persist_preferences:
            config_store.save_sort_mode(state.sort_policy)
        entry = state.selected_entry()
        self.rebuild_active_list(entry.path if entry is not None else None)

    def _toggle_theme(self, _intent: Intent) -> None:
        state = self.state
        state.theme_name = next_theme_name(state.theme_name)
        state.status_message = f"Theme: {state.theme_name}"
        if self.persist_preferences:
            config_store.save_theme_name(state.theme_name)

    def _toggle_logs(self, _intent: Intent) -> None:
        self.state.show_logs = not self.state.show_logs

    def _edit_root(self, _intent: Intent) -> None:
        error = self._run_editor(None)
        self.state.status_message = f"Error: {error}" if error else ""
        self.refresh_index()

    def _begin_search(self, intent: BeginSearch) -> None:
        state = self.state
        state.search_scope = intent.scope
        state.search_query = ""
        state.search_active = True
        state.status_message = ""
        state.selected = None
        self.rebuild_active_list()

    def _insert_char(self, intent: InsertChar) -> None:
        mode = self.machine.mode
        if isinstance(mode, SearchInput):
            self.state.search_query += intent.char
            self._rerank()
        elif isinstance(mode, TextInput):
            self.state.input_buffer += intent.char

    def _delete_char(self, _intent: Intent) -> None:
        mode = self.machine.mode
        if isinstance(mode, SearchInput):
            self.state.search_query = self.state.search_query[:-1]
            self._rerank()
        elif isinstance(mode, TextInput):
            self.state.input_buffer = self.state.input_buffer[:-1]

    def _rerank(self) -> None:
        self.state.selected = None
        self.rebuild_active_list()

    def _submit(self, intent: Submit) -> None:
        state = self.state
        if not state.input_buffer.strip():
            state.status_message = "Name cannot be empty."
            return
        if intent.purpose == PURPOSE_CREATE:
            outcome = self.create_document(state.input_buffer)
        elif intent.purpose == PURPOSE_CREATE_FOLDER:
            outcome = self.create_folder(state.input_buffer)
        else:
            outcome = self.rename_selected(state.input_buffer)
        state.status_message = outcome.message
        if not outcome.ok:
            if intent.purpose == PURPOSE_RENAME and self._pending_vanished():
                self._leave_input()
            return
        self._leave_input()
        if intent.purpose == PURPOSE_CREATE and outcome.path is not None:
            error = self.edit_document(outcome.path)
            state.status_message = f"{outcome.message} Error: {error}" if error else outcome.message

    def _confirm_deletion(self, _intent: Intent) -> None:
        outcome = self.delete_selected()
        self.state.status_message = outcome.message
        self.state.pending_path = None

    def _cancel_input(self, _intent: Intent) -> None:
        self.state.input_buffer = ""
        self.state.pending_path = None
        self.state.status_message = ""

    def _leave_input(self) -> None:
        self.machine.enter(BROWSING)
        self.state.input_buffer = ""
        self.state.pending_path = None

    def _commit_search(self, _intent: Intent) -> None:
        state = self.state
        if not state.search_query:
            self._end_search()
            return
        state.status_message = f"{len(state.entries)} match{'es' if len(state.entries) != 1 else ''}"

    def _clear_search(self, _intent: Intent) -> None:
        self._end_search()

    def _end_search(self, follow_selection: bool = False) -> None:
        """Leave search results for a directory listing.

        With ``follow_selection`` the listing is the folder holding the
        selected document; otherwise the cursor from before the search.
        """
        state = self.state
        entry = state.selected_entry()
        state.search_active = False
        state.search_query = ""
        state.status_message = ""
        keep_path = None
        if follow_selection and entry is not None:
            state.cursor = relative_posix(entry.path.parent, self.root)
            keep_path = entry.path
        self.rebuild_active_list(keep_path)

    # Operations

    def _current_folder(self) -> Path:
        return cursor_path(self.root, self.state.cursor)

    def _outcome(self, action: Callable[[], Path], message: str) -> OperationOutcome:
        try:
            path = action()
        except (OSError, ValueError) as exc:
            logger.error("%s failed: %s", message, exc)
            return OperationOutcome(False, f"Error: {exc}")
        self.refresh_index(path)
        return OperationOutcome(True, message, path)

    def create_document(self, name: str) -> OperationOutcome:
        folder = self._current_folder()
        return self._outcome(lambda: create_document(self.root, folder, name), "Note created.")

    def create_folder(self, name: str) -> OperationOutcome:
        folder = self._current_folder()
        return self._outcome(lambda: create_folder(self.root, folder, name), "Folder created.")

    def _action_target(self) -> DirectoryEntry | None:
        """Entry a rename or delete applies to.

        Once a prompt has named an entry, that path decides the target even
        if a rescan has since reordered or shrunk the active list.
        """
        path = self.state.pending_path
        if path is None:
            return self.state.selected_entry()
        if not path.exists():
            return None
        return next((entry for entry in self.index.entries if entry.path == path), None)

    def _pending_vanished(self) -> bool:
        return self.state.pending_path is not None and self._action_target() is None

    def _missing_target(self) -> OperationOutcome:
        if self.state.pending_path is not None:
            return OperationOutcome(False, "Item no longer exists.")
        return OperationOutcome(False, "Nothing selected.")

    def rename_selected(self, new_name: str) -> OperationOutcome:
        entry = self._action_target()
        if entry is None:
            return self._missing_target()
        self.cache.invalidate(entry.path)
        return self._outcome(lambda: rename_entry(self.root, entry.path, new_name), "Item renamed.")

    def delete_selected(self) -> OperationOutcome:
        entry = self._action_target()
        if entry is None:
            return self._missing_target()
        try:
            delete_entry(self.root, entry.path)
        except (OSError, ValueError) as exc:
            logger.error("Delete failed: %s", exc)
            return OperationOutcome(False, f"Error: {exc}")
        self.cache.invalidate(entry.path)
        self.refresh_index()
        return OperationOutcome(True, "Item deleted.", entry.path)

    @contextlib.contextmanager
    def _suspended(self) -> Iterator[None]:
        """Pause input polling and hand the terminal to a foreground process."""
        self.bus.pause()
        try:
            if self.terminal is not None:
                with self.terminal.suspended():
                    yield
            else:
                yield
        finally:
            self.bus.resume()

    def _run_editor(self, target: Path | None) -> str | None:
        self.bus.pause()
        try:
            if self.terminal is not None:
                disable, enable = self.terminal.disable_tui_mode, self.terminal.enable_tui_mode
            else:
                disable, enable = _noop, _noop
            return self._launch_editor(self.root, target, disable, enable, editor_cmd=self.config.editor_cmd)
        finally:
            self.bus.resume()

    def edit_document(self, path: Path) -> str | None:
        """Open ``path`` in the editor; return the editor error, if any."""
        error = self._run_editor(path)
        self.cache.invalidate(path)
        self.state.status_message = f"Error: {error}" if error else ""
        self.refresh_index(path)
        return error

    def sync(self) -> SyncOutcome:
        with self._suspended():
            # The TUI is gone while git runs; leave a line on the plain screen.
            if self.terminal is not None:
                sys.stdout.write("Syncing with git...\n")
                sys.stdout.flush()
            outcome = self._run_sync(self.root)
        if outcome.ok:
            logger.info("Sync: %s", outcome.message)
        else:
            logger.error("Sync failed (%s): %s", outcome.status, outcome.message)
        self.refresh_index()
        return outcome

    def auto_sync_on_exit(self) -> SyncOutcome | None:
        """Run the configured sync once the TUI has been torn down."""
        if not self.config.auto_sync:
            return None
        sys.stdout.write("Auto-syncing with git before exit...\n")
        sys.stdout.flush()
        outcome = self._run_sync(self.root)
        if not outcome.ok:
            logger.error("Auto-sync failed (%s): %s", outcome.status, outcome.message)
            sys.stdout.write(f"Auto-sync failed: {outcome.message}\n")
        return outcome

    # Rendering and loop

    def render_context(self) -> RenderContext:
        state = self.state
        width, height = self._terminal_size()
        doc = state.selected_document()
        prompt = None
        mode = self.machine.mode
        if isinstance(mode, TextInput):
            label = {
                PURPOSE_CREATE: "New note",
                PURPOSE_CREATE_FOLDER: "New folder",
                PURPOSE_RENAME: "Rename to",
            }.get(mode.purpose, "Input")
            prompt = f"{label}: {state.input_buffer}"
        return RenderContext(
            root=self.root,
            cursor=state.cursor,
            entries=state.entries,
            selected=state.selected,
            width=width,
            height=height,
            theme=resolve_theme(state.theme_name, no_color=self.no_color, colors=self.config.colors),
            no_color=self.no_color,
            sort_policy=state.sort_policy,
            mode_label=mode_label(mode),
            prompt=prompt,
            status_message=state.status_message,
            search_active=state.search_active,
            search_query=state.search_query,
            search_scope=state.search_scope,
            preview_body=self.cache.peek(doc) if doc is not None else None,
            preview_error=self._preview_errors.get(doc.path) if doc is not None else None,
            preview_scroll=state.preview_scroll,
            show_help=isinstance(mode, Help),
            show_logs=state.show_logs,
            log_lines=self.log_buffer.lines() if self.log_buffer is not None else [],
        )

    def run(self, poll_seconds: float | None = None) -> None:
        """Render and dispatch events until a quit intent arrives."""
        state = self.state
        while not state.should_quit:
            if state.dirty:
                self._render(self.render_context())
                state.dirty = False
            event = self.bus.next(timeout=poll_seconds)
            if event is None:
                continue
            rescanned = isinstance(event, FileChanged)
            self.handle_event(event)
            # One rescan covers any burst of watcher events.
            for pending in self.bus.drain():
                if state.should_quit:
                    break
                if isinstance(pending, FileChanged):
                    if rescanned:
                        continue
                    rescanned = True
                self.handle_event(pending)


__all__ = ["SessionController"]
