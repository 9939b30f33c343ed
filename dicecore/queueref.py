"""A FIFO queue of references to keys in a store."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import islice

from .objects import Obj
from .queueint import QueueEmptyError
from .store import Store


@dataclass(frozen=True)
class QueueElement:
    """A key taken from a reference queue together with its live object."""

    key: str
    obj: Obj


class QueueRef:
    """Queue of key references; keys that no longer exist are skipped."""

    def __init__(self, store: Store) -> None:
        self._store = store
        self._keys: deque[str] = deque()

    def __len__(self) -> int:
        return len(self._keys)

    def insert(self, key: str) -> bool:
        """Queue a reference to ``key``; return False if the key does not exist."""
        if key not in self._store:
            return False
        self._keys.append(key)
        return True

    def remove(self) -> QueueElement:
        """Dequeue references until one points at a live key and return it."""
        while self._keys:
            key = self._keys.popleft()
            obj = self._store.get(key)
            if obj is not None:
                return QueueElement(key, obj)
        raise QueueEmptyError()

    def iterate(self, n: int) -> list[QueueElement]:
        """Return the live elements among the first ``n`` references."""
        if n <= 0:
            return []
        return [
            QueueElement(key, obj)
            for key in islice(self._keys, n)
            if (obj := self._store.get(key)) is not None
        ]