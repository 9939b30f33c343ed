"""A LIFO stack of references to keys in a store."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import islice

from .objects import Obj
from .stackint import StackEmptyError
from .store import Store


@dataclass(frozen=True)
class StackElement:
    """A key taken from a reference stack together with its live object."""

    key: str
    obj: Obj


class StackRef:
    """Stack of key references; keys that no longer exist are skipped."""

    def __init__(self, store: Store) -> None:
        self._store = store
        self._keys: deque[str] = deque()

    def __len__(self) -> int:
        return len(self._keys)

    def push(self, key: str) -> bool:
        """Push a reference to ``key``; return False if the key does not exist."""
        if key not in self._store:
            return False
        self._keys.append(key)
        return True

    def pop(self) -> StackElement:
        """Pop references until one points at a live key and return it."""
        while self._keys:
            key = self._keys.pop()
            obj = self._store.get(key)
            if obj is not None:
                return StackElement(key, obj)
        raise StackEmptyError()

    def iterate(self, n: int) -> list[StackElement]:
        """Return the live elements among the top ``n`` references."""
        if n <= 0:
            return []
        return [
            StackElement(key, obj)
            for key in islice(reversed(self._keys), n)
            if (obj := self._store.get(key)) is not None
        ]