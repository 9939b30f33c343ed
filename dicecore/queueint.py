"""FIFO queues of non-negative integers."""

from __future__ import annotations

from collections import deque
from itertools import chain, islice
from typing import Iterator

QUEUE_INT_MAX_BUF = 256
_INT64_MAX = 2**63 - 1
_CONTINUATION = 0x80


class QueueEmptyError(IndexError):
    """Raised when removing from an empty queue."""

    def __init__(self, message: str = "queue is empty") -> None:
        super().__init__(message)


def _encode_uint(x: int) -> bytes:
    """Encode a non-negative integer as a varint; the last byte has the top bit clear."""
    if x < 0:
        raise ValueError("negative integers not supported yet")
    if x > _INT64_MAX:
        raise OverflowError("integer does not fit in 64 bits")
    out = bytearray()
    while True:
        group = x & 0x7F
        x >>= 7
        if x:
            out.append(group | _CONTINUATION)
        else:
            out.append(group)
            return bytes(out)


def _decode_uint(data: bytes | bytearray) -> int:
    return sum((b & 0x7F) << (7 * shift) for shift, b in enumerate(data))


def _values(chunk: bytearray) -> Iterator[int]:
    """Yield the integers packed in a chunk, oldest first."""
    start = 0
    for end, b in enumerate(chunk):
        if not b & _CONTINUATION:
            yield _decode_uint(chunk[start : end + 1])
            start = end + 1


def _append_packed(chunks: deque[bytearray], x: int, capacity: int) -> None:
    encoded = _encode_uint(x)
    if not chunks or capacity - len(chunks[-1]) < len(encoded):
        chunks.append(bytearray())
    chunks[-1].extend(encoded)


class QueueInt:
    """A queue that packs integers as varints into fixed-size byte chunks."""

    def __init__(self, chunk_capacity: int = QUEUE_INT_MAX_BUF) -> None:
        self._capacity = chunk_capacity
        self._chunks: deque[bytearray] = deque()
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def insert(self, x: int) -> None:
        """Append ``x`` to the back of the queue; ``x`` must be non-negative."""
        _append_packed(self._chunks, x, self._capacity)
        self._length += 1

    def remove(self) -> int:
        """Remove and return the integer at the front of the queue."""
        if not self._chunks:
            raise QueueEmptyError()
        head = self._chunks[0]
        end = next(i for i, b in enumerate(head) if not b & _CONTINUATION)
        value = _decode_uint(head[: end + 1])
        del head[: end + 1]
        if not head:
            self._chunks.popleft()
        self._length -= 1
        return value

    def iterate(self, n: int) -> list[int]:
        """Return up to ``n`` integers from the front; empty for ``n <= 0``."""
        if n <= 0:
            return []
        every = chain.from_iterable(_values(chunk) for chunk in self._chunks)
        return list(islice(every, n))


class QueueIntBasic:
    """A plain queue of integers kept in a deque."""

    def __init__(self) -> None:
        self._items: deque[int] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, x: int) -> None:
        """Append ``x`` to the back of the queue."""
        self._items.append(x)

    def remove(self) -> int:
        """Remove and return the integer at the front of the queue."""
        if not self._items:
            raise QueueEmptyError()
        return self._items.popleft()

    def iterate(self, n: int) -> list[int]:
        """Return up to ``n`` integers from the front; empty for ``n <= 0``."""
        if n <= 0:
            return []
        return list(islice(self._items, n))