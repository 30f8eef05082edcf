"""Key tables mapping key tokens to fixed results.

Every binding in this application resolves to an immutable value (a mode
transition), so a table stores values rather than callbacks.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class KeyBinding(Generic[T]):
    """One or more key tokens that all resolve to ``result``."""

    keys: tuple[str, ...]
    result: T


class KeyTable(Generic[T]):
    """Lookup table from normalized key tokens to binding results."""

    def __init__(self, normalize: Callable[[str], str] | None = None, *bindings: KeyBinding[T]) -> None:
        self._normalize = normalize or (lambda key: key)
        self._results: dict[str, T] = {}
        for binding in bindings:
            self.bind(binding)

    def bind(self, binding: KeyBinding[T]) -> None:
        """Add ``binding``; binding a key twice raises ``ValueError``."""
        for key in binding.keys:
            normalized = self._normalize(key)
            if normalized in self._results:
                raise ValueError(f"key {key!r} is already bound")
            self._results[normalized] = binding.result

    def lookup(self, key: str) -> T | None:
        return self._results.get(self._normalize(key))

    def __contains__(self, key: str) -> bool:
        return self._normalize(key) in self._results

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)


__all__ = ["KeyBinding", "KeyTable"]
