"""Editor launch helper for external note edits.

Runs the configured editor (or ``$EDITOR``, or ``vim``) from the notes root
while temporarily leaving raw/alternate-screen TUI mode. Returns an error
message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable

DEFAULT_EDITOR = "vim"

logger = logging.getLogger(__name__)


def resolve_editor_command(editor_cmd: str | None = None) -> list[str]:
    """Return the editor argv prefix, preferring config over ``$EDITOR``."""
    for candidate in (editor_cmd, os.environ.get("EDITOR"), DEFAULT_EDITOR):
        if candidate is None or not candidate.strip():
            continue
        try:
            cmd = shlex.split(candidate)
        except ValueError:
            continue
        if cmd:
            return cmd
    return [DEFAULT_EDITOR]


def launch_editor(
    root: Path,
    target: Path | None,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
    editor_cmd: str | None = None,
) -> str | None:
    """Run the editor on ``target`` (or with no argument) and wait for it.

    TUI mode is restored whatever the editor does.
    """
    cmd = resolve_editor_command(editor_cmd)
    argv = [*cmd, str(target)] if target is not None else cmd

    disable_tui_mode()
    try:
        proc = subprocess.run(argv, cwd=root, check=False)
    except OSError as exc:
        logger.error("Failed to launch editor %s: %s", cmd[0], exc)
        return f"Failed to launch editor: {exc}"
    finally:
        enable_tui_mode()

    if proc.returncode != 0:
        logger.error("Editor %s exited with status %d", cmd[0], proc.returncode)
        return f"Editor exited with status {proc.returncode}."
    return None
