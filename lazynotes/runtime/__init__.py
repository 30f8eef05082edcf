"""Runtime orchestration: session loop, events, subprocess hand-off.

``run_session`` is imported lazily so that importing ``lazynotes.runtime``
does not pull in terminal setup.
"""

from __future__ import annotations


def run_session(*args, **kwargs):
    """Lazily import the interactive bootstrap."""
    from .app import run_session as _run_session

    return _run_session(*args, **kwargs)


__all__ = ["run_session"]
