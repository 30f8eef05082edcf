"""Interaction modes and key interpretation.

``interpret(mode, key)`` is a pure function from the current mode and one key
token to the next mode plus an intent. It never looks at session data or the
clock, so a given ``(mode, key)`` pair always yields the same transition.
The session controller applies intents and may enter further modes itself
(for example a delete request becomes ``ConfirmDelete`` only when something
is selected).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..search.ranking import SEARCH_SCOPE_CONTENT, SEARCH_SCOPE_TAG, SEARCH_SCOPE_TITLE
from .key_registry import KeyBinding, KeyTable
from .keys import is_printable_key, normalize_enter

PURPOSE_CREATE = "create"
PURPOSE_RENAME = "rename"
PURPOSE_CREATE_FOLDER = "create-folder"
TEXT_INPUT_PURPOSES: tuple[str, ...] = (PURPOSE_CREATE, PURPOSE_RENAME, PURPOSE_CREATE_FOLDER)

PREVIEW_SCROLL_STEP = 5


# Modes


@dataclass(frozen=True)
class Browsing:
    pass


@dataclass(frozen=True)
class TextInput:
    purpose: str


@dataclass(frozen=True)
class ConfirmDelete:
    pass


@dataclass(frozen=True)
class SearchInput:
    scope: str


@dataclass(frozen=True)
class Help:
    pass


Mode = Union[Browsing, TextInput, ConfirmDelete, SearchInput, Help]

BROWSING = Browsing()
CONFIRM_DELETE = ConfirmDelete()
HELP = Help()


# Intents


@dataclass(frozen=True)
class NoIntent:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class JumpSelection:
    to_end: bool


@dataclass(frozen=True)
class OpenSelected:
    pass


@dataclass(frozen=True)
class ParentFolder:
    pass


@dataclass(frozen=True)
class ScrollPreview:
    delta: int


@dataclass(frozen=True)
class NewDocument:
    pass


@dataclass(frozen=True)
class NewFolder:
    pass


@dataclass(frozen=True)
class RenameSelected:
    pass


@dataclass(frozen=True)
class DeleteSelected:
    pass


@dataclass(frozen=True)
class Sync:
    pass


@dataclass(frozen=True)
class ToggleSort:
    pass


@dataclass(frozen=True)
class ToggleTheme:
    pass


@dataclass(frozen=True)
class ToggleLogs:
    pass


@dataclass(frozen=True)
class EditRoot:
    pass


@dataclass(frozen=True)
class BeginSearch:
    scope: str


@dataclass(frozen=True)
class InsertChar:
    char: str


@dataclass(frozen=True)
class DeleteChar:
    pass


@dataclass(frozen=True)
class Submit:
    purpose: str


@dataclass(frozen=True)
class ConfirmDeletion:
    pass


@dataclass(frozen=True)
class CancelInput:
    pass


@dataclass(frozen=True)
class CommitSearch:
    pass


@dataclass(frozen=True)
class ClearSearch:
    pass


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class CloseHelp:
    pass


Intent = Union[
    NoIntent,
    Quit,
    MoveSelection,
    JumpSelection,
    OpenSelected,
    ParentFolder,
    ScrollPreview,
    NewDocument,
    NewFolder,
    RenameSelected,
    DeleteSelected,
    Sync,
    ToggleSort,
    ToggleTheme,
    ToggleLogs,
    EditRoot,
    BeginSearch,
    InsertChar,
    DeleteChar,
    Submit,
    ConfirmDeletion,
    CancelInput,
    CommitSearch,
    ClearSearch,
    ShowHelp,
    CloseHelp,
]

NO_INTENT = NoIntent()


@dataclass(frozen=True)
class Transition:
    mode: Mode
    intent: Intent = NO_INTENT


def _browse(keys: tuple[str, ...], intent: Intent) -> KeyBinding[Transition]:
    return KeyBinding(keys, Transition(BROWSING, intent))


def _enter_search(keys: tuple[str, ...], scope: str) -> KeyBinding[Transition]:
    return KeyBinding(keys, Transition(SearchInput(scope), BeginSearch(scope)))


_BROWSING_KEYS: KeyTable[Transition] = KeyTable(
    normalize_enter,
    _browse(("q", "CTRL_C"), Quit()),
    _browse(("j", "DOWN"), MoveSelection(1)),
    _browse(("k", "UP"), MoveSelection(-1)),
    _browse(("PAGE_DOWN",), MoveSelection(10)),
    _browse(("PAGE_UP",), MoveSelection(-10)),
    _browse(("g", "HOME"), JumpSelection(to_end=False)),
    _browse(("G", "END"), JumpSelection(to_end=True)),
    _browse(("l", "RIGHT", "ENTER"), OpenSelected()),
    _browse(("h", "LEFT", "BACKSPACE"), ParentFolder()),
    _browse(("CTRL_D",), ScrollPreview(PREVIEW_SCROLL_STEP)),
    _browse(("CTRL_U",), ScrollPreview(-PREVIEW_SCROLL_STEP)),
    _browse(("n",), NewDocument()),
    _browse(("N",), NewFolder()),
    _browse(("r",), RenameSelected()),
    _browse(("d", "DELETE"), DeleteSelected()),
    _browse(("S",), Sync()),
    _browse(("s",), ToggleSort()),
    _browse(("t",), ToggleTheme()),
    _browse(("L",), ToggleLogs()),
    _browse(("o",), EditRoot()),
    _enter_search(("/",), SEARCH_SCOPE_TITLE),
    _enter_search(("#",), SEARCH_SCOPE_TAG),
    _enter_search(("f",), SEARCH_SCOPE_CONTENT),
    KeyBinding(("?",), Transition(HELP, ShowHelp())),
)

_CONFIRM_DELETE_KEYS: KeyTable[Transition] = KeyTable(
    normalize_enter,
    _browse(("y", "Y"), ConfirmDeletion()),
    _browse(("n", "N", "ESC"), CancelInput()),
)

_HELP_KEYS: KeyTable[Transition] = KeyTable(
    normalize_enter,
    _browse(("?", "ESC", "q"), CloseHelp()),
)


def _interpret_text_input(mode: TextInput, key: str) -> Transition:
    if key == "ENTER":
        return Transition(mode, Submit(mode.purpose))
    if key == "ESC":
        return Transition(BROWSING, CancelInput())
    if key == "BACKSPACE":
        return Transition(mode, DeleteChar())
    if is_printable_key(key):
        return Transition(mode, InsertChar(key))
    return Transition(mode)


def _interpret_search_input(mode: SearchInput, key: str) -> Transition:
    if key == "ENTER":
        return Transition(BROWSING, CommitSearch())
    if key == "ESC":
        return Transition(BROWSING, ClearSearch())
    if key == "BACKSPACE":
        return Transition(mode, DeleteChar())
    if key == "DOWN":
        return Transition(mode, MoveSelection(1))
    if key == "UP":
        return Transition(mode, MoveSelection(-1))
    if is_printable_key(key):
        return Transition(mode, InsertChar(key))
    return Transition(mode)


def interpret(mode: Mode, key: str) -> Transition:
    """Map ``(mode, key)`` to the next mode and the intent to apply."""
    key = normalize_enter(key)
    if isinstance(mode, TextInput):
        return _interpret_text_input(mode, key)
    if isinstance(mode, SearchInput):
        return _interpret_search_input(mode, key)

    if isinstance(mode, ConfirmDelete):
        table = _CONFIRM_DELETE_KEYS
    elif isinstance(mode, Help):
        table = _HELP_KEYS
    else:
        table = _BROWSING_KEYS
    transition = table.lookup(key)
    if transition is None:
        return Transition(mode)
    return transition


class ModeStateMachine:
    """Holds the current mode and advances it one key at a time."""

    def __init__(self, mode: Mode = BROWSING) -> None:
        self.mode: Mode = mode

    def handle(self, key: str) -> Intent:
        transition = interpret(self.mode, key)
        self.mode = transition.mode
        return transition.intent

    def enter(self, mode: Mode) -> None:
        self.mode = mode

    def reset(self) -> None:
        self.mode = BROWSING


def mode_label(mode: Mode) -> str:
    """Short label used by the status line."""
    if isinstance(mode, TextInput):
        return {
            PURPOSE_CREATE: "NEW",
            PURPOSE_RENAME: "RENAME",
            PURPOSE_CREATE_FOLDER: "NEW FOLDER",
        }.get(mode.purpose, "INPUT")
    if isinstance(mode, SearchInput):
        return f"SEARCH {mode.scope.upper()}"
    if isinstance(mode, ConfirmDelete):
        return "DELETE"
    if isinstance(mode, Help):
        return "HELP"
    return "BROWSE"
