"""Keyboard decoding and mode interpretation."""

from __future__ import annotations

from .key_registry import KeyBinding, KeyTable
from .keys import read_key
from .modes import BROWSING, ModeStateMachine, Transition, interpret

__all__ = [
    "BROWSING",
    "KeyBinding",
    "KeyTable",
    "ModeStateMachine",
    "Transition",
    "interpret",
    "read_key",
]
