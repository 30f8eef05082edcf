"""Mode state machine tests.

Transitions are a pure function of ``(mode, key)``; these tests pin down the
key map and the mode each key leads to.
"""

from __future__ import annotations

import unittest

from lazynotes.input.modes import (
    BROWSING,
    CONFIRM_DELETE,
    HELP,
    PURPOSE_CREATE,
    PURPOSE_RENAME,
    BeginSearch,
    Browsing,
    CancelInput,
    ClearSearch,
    CloseHelp,
    CommitSearch,
    ConfirmDeletion,
    DeleteChar,
    DeleteSelected,
    InsertChar,
    JumpSelection,
    ModeStateMachine,
    MoveSelection,
    NoIntent,
    OpenSelected,
    ParentFolder,
    Quit,
    SearchInput,
    ShowHelp,
    Submit,
    TextInput,
    Transition,
    interpret,
    mode_label,
)
from lazynotes.search.ranking import SEARCH_SCOPE_CONTENT, SEARCH_SCOPE_TAG, SEARCH_SCOPE_TITLE


class BrowsingKeyTests(unittest.TestCase):
    def test_navigation_keys(self) -> None:
        self.assertEqual(interpret(BROWSING, "j"), Transition(BROWSING, MoveSelection(1)))
        self.assertEqual(interpret(BROWSING, "DOWN"), Transition(BROWSING, MoveSelection(1)))
        self.assertEqual(interpret(BROWSING, "k"), Transition(BROWSING, MoveSelection(-1)))
        self.assertEqual(interpret(BROWSING, "G"), Transition(BROWSING, JumpSelection(to_end=True)))
        self.assertEqual(interpret(BROWSING, "g"), Transition(BROWSING, JumpSelection(to_end=False)))
        self.assertEqual(interpret(BROWSING, "l").intent, OpenSelected())
        self.assertEqual(interpret(BROWSING, "ENTER_CR").intent, OpenSelected())
        self.assertEqual(interpret(BROWSING, "h").intent, ParentFolder())

    def test_quit_and_delete_request(self) -> None:
        self.assertEqual(interpret(BROWSING, "q").intent, Quit())
        self.assertEqual(interpret(BROWSING, "CTRL_C").intent, Quit())
        # The controller decides whether to confirm; the machine stays in Browsing.
        self.assertEqual(interpret(BROWSING, "d"), Transition(BROWSING, DeleteSelected()))

    def test_search_keys_enter_search_input(self) -> None:
        self.assertEqual(
            interpret(BROWSING, "/"),
            Transition(SearchInput(SEARCH_SCOPE_TITLE), BeginSearch(SEARCH_SCOPE_TITLE)),
        )
        self.assertEqual(interpret(BROWSING, "#").mode, SearchInput(SEARCH_SCOPE_TAG))
        self.assertEqual(interpret(BROWSING, "f").mode, SearchInput(SEARCH_SCOPE_CONTENT))

    def test_help_key(self) -> None:
        self.assertEqual(interpret(BROWSING, "?"), Transition(HELP, ShowHelp()))

    def test_unknown_key_is_ignored(self) -> None:
        self.assertEqual(interpret(BROWSING, "x"), Transition(BROWSING, NoIntent()))


class InputModeTests(unittest.TestCase):
    def test_text_input_editing(self) -> None:
        mode = TextInput(PURPOSE_CREATE)
        self.assertEqual(interpret(mode, "a"), Transition(mode, InsertChar("a")))
        self.assertEqual(interpret(mode, "q"), Transition(mode, InsertChar("q")))
        self.assertEqual(interpret(mode, "BACKSPACE"), Transition(mode, DeleteChar()))
        self.assertEqual(interpret(mode, "ENTER_LF"), Transition(mode, Submit(PURPOSE_CREATE)))
        self.assertEqual(interpret(mode, "ESC"), Transition(BROWSING, CancelInput()))
        self.assertEqual(interpret(mode, "UP"), Transition(mode, NoIntent()))

    def test_search_input(self) -> None:
        mode = SearchInput(SEARCH_SCOPE_TITLE)
        self.assertEqual(interpret(mode, "j"), Transition(mode, InsertChar("j")))
        self.assertEqual(interpret(mode, "DOWN"), Transition(mode, MoveSelection(1)))
        self.assertEqual(interpret(mode, "ENTER"), Transition(BROWSING, CommitSearch()))
        self.assertEqual(interpret(mode, "ESC"), Transition(BROWSING, ClearSearch()))

    def test_confirm_delete(self) -> None:
        self.assertEqual(interpret(CONFIRM_DELETE, "y"), Transition(BROWSING, ConfirmDeletion()))
        self.assertEqual(interpret(CONFIRM_DELETE, "Y"), Transition(BROWSING, ConfirmDeletion()))
        self.assertEqual(interpret(CONFIRM_DELETE, "n"), Transition(BROWSING, CancelInput()))
        self.assertEqual(interpret(CONFIRM_DELETE, "ESC"), Transition(BROWSING, CancelInput()))
        self.assertEqual(interpret(CONFIRM_DELETE, "j"), Transition(CONFIRM_DELETE, NoIntent()))

    def test_help_mode_closes_on_exit_keys_only(self) -> None:
        for key in ("?", "ESC", "q"):
            self.assertEqual(interpret(HELP, key), Transition(BROWSING, CloseHelp()))
        self.assertEqual(interpret(HELP, "j"), Transition(HELP, NoIntent()))


class DeterminismTests(unittest.TestCase):
    def test_same_inputs_give_same_transition(self) -> None:
        modes = [BROWSING, TextInput(PURPOSE_RENAME), SearchInput(SEARCH_SCOPE_TAG), CONFIRM_DELETE, HELP]
        keys = ["j", "ENTER", "ESC", "BACKSPACE", "y", "?", "/", "x", "UP"]
        for mode in modes:
            for key in keys:
                self.assertEqual(interpret(mode, key), interpret(mode, key))

    def test_state_machine_follows_transitions(self) -> None:
        machine = ModeStateMachine()
        self.assertEqual(machine.handle("/"), BeginSearch(SEARCH_SCOPE_TITLE))
        self.assertEqual(machine.mode, SearchInput(SEARCH_SCOPE_TITLE))
        self.assertEqual(machine.handle("a"), InsertChar("a"))
        self.assertEqual(machine.handle("ESC"), ClearSearch())
        self.assertIsInstance(machine.mode, Browsing)

        machine.enter(TextInput(PURPOSE_RENAME))
        self.assertEqual(mode_label(machine.mode), "RENAME")
        machine.reset()
        self.assertEqual(machine.mode, BROWSING)


if __name__ == "__main__":
    unittest.main()
