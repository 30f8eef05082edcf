"""Interactive session bootstrap.

Wires the terminal, event bus, and session controller together, runs the
loop inside raw alternate-screen mode, and always restores the terminal.
"""

from __future__ import annotations

import logging
import sys
from functools import partial
from pathlib import Path

from ..input.keys import read_key
from ..logs import LogBuffer
from .config import NotesConfig
from .controller import SessionController
from .events import EventBus
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def run_session(
    root: Path,
    config: NotesConfig,
    *,
    no_color: bool = False,
    log_buffer: LogBuffer | None = None,
    persist_preferences: bool = True,
) -> None:
    """Run the interactive browser on ``root`` until the user quits."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    bus = EventBus()
    controller = SessionController(
        root,
        config=config,
        bus=bus,
        terminal=terminal,
        log_buffer=log_buffer,
        no_color=no_color,
        persist_preferences=persist_preferences,
    )
    controller.start()
    logger.info("Browsing %d notes under %s", len(controller.index.documents), controller.root)

    try:
        with terminal.raw_mode():
            bus.start_input(partial(read_key, stdin_fd))
            bus.start_watcher(controller.root)
            controller.run()
    finally:
        bus.stop()

    controller.auto_sync_on_exit()


__all__ = ["run_session"]
