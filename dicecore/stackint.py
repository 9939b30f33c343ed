"""LIFO stacks of non-negative integers."""

from __future__ import annotations

from collections import deque
from itertools import chain, islice

from .queueint import _CONTINUATION, _append_packed, _decode_uint, _values

STACK_INT_MAX_BUF = 256


class StackEmptyError(IndexError):
    """Raised when popping from an empty stack."""

    def __init__(self, message: str = "stack is empty") -> None:
        super().__init__(message)


class StackInt:
    """A stack that packs integers as varints into fixed-size byte chunks."""

    def __init__(self, chunk_capacity: int = STACK_INT_MAX_BUF) -> None:
        self._capacity = chunk_capacity
        self._chunks: deque[bytearray] = deque()
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def push(self, x: int) -> None:
        """Push ``x`` onto the stack; ``x`` must be non-negative."""
        _append_packed(self._chunks, x, self._capacity)
        self._length += 1

    def pop(self) -> int:
        """Remove and return the integer on top of the stack."""
        if not self._chunks:
            raise StackEmptyError()
        tail = self._chunks[-1]
        start = len(tail) - 1
        while start > 0 and tail[start - 1] & _CONTINUATION:
            start -= 1
        value = _decode_uint(tail[start:])
        del tail[start:]
        if not tail:
            self._chunks.pop()
        self._length -= 1
        return value

    def iterate(self, n: int) -> list[int]:
        """Return up to ``n`` integers from the top down; empty for ``n <= 0``."""
        if n <= 0:
            return []
        every = chain.from_iterable(
            reversed(list(_values(chunk))) for chunk in reversed(self._chunks)
        )
        return list(islice(every, n))