"""Event multiplexing for the session loop.

Two producer threads feed one ``queue.Queue``:

* the input poller reads one key token per tick interval and posts either a
  ``KeyEvent`` or, on timeout, a ``Tick``;
* the watcher polls a filesystem signature and posts ``FileChanged`` when it
  moves.

While the pause flag is set the poller does not touch the terminal, so a
foreground editor or ``git`` process owns stdin undisturbed.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .watch import build_tree_watch_signature

DEFAULT_TICK_SECONDS = 0.25
DEFAULT_WATCH_INTERVAL_SECONDS = 1.0
PAUSE_ACK_TIMEOUT_SECONDS = 1.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class FileChanged:
    pass


Event = Union[KeyEvent, Tick, FileChanged]

KeyReader = Callable[[int], str]


class EventBus:
    """Single ordered channel plus the producer threads that feed it."""

    def __init__(self, tick_seconds: float = DEFAULT_TICK_SECONDS) -> None:
        self.tick_seconds = tick_seconds
        self._events: queue.Queue[Event] = queue.Queue()
        self._paused = threading.Event()
        self._input_idle = threading.Event()
        self._stopped = threading.Event()
        self._threads: list[threading.Thread] = []

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    def post(self, event: Event) -> None:
        self._events.put(event)

    def next(self, timeout: float | None = None) -> Event | None:
        """Block for the next event; ``None`` when ``timeout`` elapses."""
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[Event]:
        """Return every queued event without blocking."""
        out: list[Event] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except queue.Empty:
                return out

    def start_input(self, read_key: KeyReader) -> None:
        """Start the key poller; ``read_key(timeout_ms)`` returns "" on timeout."""
        self._spawn("lazynotes-input", self._input_worker, read_key)

    def start_watcher(
        self,
        root: Path,
        interval_seconds: float = DEFAULT_WATCH_INTERVAL_SECONDS,
        signature: Callable[[Path], str] = build_tree_watch_signature,
    ) -> None:
        """Start the filesystem watcher for ``root``."""
        self._spawn("lazynotes-watch", self._watch_worker, root, interval_seconds, signature)

    def pause(self, wait: bool = True) -> None:
        """Stop consuming terminal input.

        With ``wait`` the call returns once the poller has acknowledged the
        pause (bounded by ``PAUSE_ACK_TIMEOUT_SECONDS``), so no read is in
        flight when a subprocess takes the terminal.
        """
        self._input_idle.clear()
        self._paused.set()
        if wait and self._has_input_thread():
            self._input_idle.wait(timeout=max(PAUSE_ACK_TIMEOUT_SECONDS, self.tick_seconds * 2))

    def resume(self) -> None:
        self._paused.clear()

    def stop(self, join_timeout: float | None = None) -> None:
        self._stopped.set()
        self._paused.clear()
        for thread in self._threads:
            thread.join(timeout=join_timeout if join_timeout is not None else self.tick_seconds * 4)
        self._threads = [thread for thread in self._threads if thread.is_alive()]

    def _has_input_thread(self) -> bool:
        return any(thread.name == "lazynotes-input" and thread.is_alive() for thread in self._threads)

    def _spawn(self, name: str, target: Callable[..., None], *args: object) -> None:
        worker = threading.Thread(target=target, args=args, name=name, daemon=True)
        self._threads.append(worker)
        worker.start()

    def _input_worker(self, read_key: KeyReader) -> None:
        timeout_ms = max(1, int(self.tick_seconds * 1000))
        while not self._stopped.is_set():
            if self._paused.is_set():
                self._input_idle.set()
                self._stopped.wait(self.tick_seconds)
                continue
            try:
                key = read_key(timeout_ms)
            except KeyboardInterrupt:
                continue
            except OSError as exc:
                logger.error("Input polling stopped: %s", exc)
                return
            if self._stopped.is_set():
                return
            self.post(KeyEvent(key) if key else Tick())

    def _watch_worker(
        self,
        root: Path,
        interval_seconds: float,
        signature: Callable[[Path], str],
    ) -> None:
        try:
            last = signature(root)
        except OSError as exc:
            logger.warning("Watching %s failed: %s", root, exc)
            return
        while not self._stopped.wait(interval_seconds):
            try:
                current = signature(root)
            except OSError as exc:
                logger.debug("Watch signature failed for %s: %s", root, exc)
                continue
            if current != last:
                last = current
                logger.debug("Change detected under %s", root)
                self.post(FileChanged())


__all__ = [
    "DEFAULT_TICK_SECONDS",
    "DEFAULT_WATCH_INTERVAL_SECONDS",
    "Event",
    "EventBus",
    "FileChanged",
    "KeyEvent",
    "Tick",
]
