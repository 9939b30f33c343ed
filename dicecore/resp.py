"""Encoding and incremental decoding of the RESP wire protocol."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from .executor import ResultRow
from .objects import Obj
from .queueref import QueueElement
from .stackref import StackElement
from .store import WatchEvent

IO_BUFFER_LENGTH = 512
RESP_NIL = b"$-1\r\n"
CRLF = b"\r\n"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INTEGER = re.compile(rb"[+-]?\d+")

logger = logging.getLogger(__name__)


class RESPProtocolError(ValueError):
    """Raised when incoming bytes are not valid RESP."""


def _to_str(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def _to_bytes(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


class RESPParser:
    """Decodes RESP values from a binary reader, buffering what it has read.

    The reader needs a ``read(size)`` method (``read1`` is used when present)
    that returns up to ``size`` bytes and an empty result at end of stream.
    """

    def __init__(
        self,
        reader: Any,
        initial: bytes = b"",
        buffer_size: int = IO_BUFFER_LENGTH,
    ) -> None:
        self._read: Callable[[int], bytes | None] = getattr(reader, "read1", None) or reader.read
        self._buf = bytearray(initial)
        self._buffer_size = buffer_size

    def _read_chunk(self, size: int) -> bytes:
        return self._read(size) or b""

    def decode_one(self) -> Any:
        """Decode and return the next value; raise EOFError on an empty stream."""
        while not (self._buf and CRLF in self._buf):
            chunk = self._read_chunk(self._buffer_size)
            if chunk:
                self._buf.extend(chunk)
            elif self._buf:
                break
            else:
                raise EOFError("end of stream")

        prefix = self._buf[0]
        del self._buf[0]

        if prefix == ord("+") or prefix == ord("-"):
            return _to_str(self._read_line())
        if prefix == ord(":"):
            return self._read_integer()
        if prefix == ord("$"):
            return self._read_bulk_string()
        if prefix == ord("*"):
            return self._read_array()

        # Anything else may be another protocol aimed at this port.
        logger.warning("possible cross protocol scripting attack detected. dropping the request.")
        raise RESPProtocolError("possible cross protocol scripting attack detected")

    def decode_multiple(self) -> list[Any]:
        """Decode values until the buffered input is used up."""
        values = [self.decode_one()]
        while self._buf:
            values.append(self.decode_one())
        return values

    def _read_line(self) -> bytes:
        end = self._buf.find(b"\r")
        if end < 0:
            self._buf.clear()
            raise EOFError("unterminated line")
        line = bytes(self._buf[:end])
        del self._buf[: end + 1]
        if not self._buf:
            raise EOFError("unterminated line")
        del self._buf[0]
        return line

    def _read_integer(self) -> int:
        line = self._read_line()
        if not _INTEGER.fullmatch(line):
            raise RESPProtocolError(f"invalid integer: {line!r}")
        value = int(line)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise RESPProtocolError(f"integer out of range: {line!r}")
        return value

    def _read_bulk_string(self) -> str:
        length = self._read_integer()
        if length < 0:
            raise RESPProtocolError(f"invalid bulk string length: {length}")
        remaining = length + len(CRLF) - len(self._buf)
        while remaining > 0:
            chunk = self._read_chunk(remaining)
            if not chunk:
                return ""
            self._buf.extend(chunk)
            remaining -= len(chunk)
        data = bytes(self._buf[:length])
        del self._buf[:length]
        if len(self._buf) < len(CRLF):
            raise EOFError("truncated bulk string")
        del self._buf[: len(CRLF)]
        return _to_str(data)

    def _read_array(self) -> list[Any]:
        count = self._read_integer()
        if count < 0:
            raise RESPProtocolError(f"invalid array length: {count}")
        return [self.decode_one() for _ in range(count)]


def _encode_bulk(text: str) -> bytes:
    data = _to_bytes(text)
    return b"$%d\r\n%s\r\n" % (len(data), data)


def _encode_pair(key: str, obj: Obj | None) -> bytes:
    value = obj.value if obj is not None else None
    return b"*2\r\n" + encode(key, False) + encode(value, False)


def _encode_element(element: Any) -> bytes:
    if isinstance(element, Obj):
        return encode(element.value, False)
    return encode(element, False)


def encode(value: Any, is_simple: bool = False) -> bytes:
    """Encode ``value`` as RESP; unsupported values become a nil bulk string."""
    if isinstance(value, str):
        if is_simple:
            return b"+%s\r\n" % _to_bytes(value)
        return _encode_bulk(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return b":%d\r\n" % value
    if isinstance(value, (QueueElement, StackElement)):
        return _encode_pair(value.key, value.obj)
    if isinstance(value, ResultRow):
        return _encode_pair(value.key, value.value)
    if isinstance(value, WatchEvent):
        body = b"".join(
            (
                encode(f"key:{value.key}", False),
                encode(f"op:{value.operation}", False),
                encode(value.value.value, False),
            )
        )
        return b"*3\r\n" + body
    if isinstance(value, BaseException):
        return b"-%s\r\n" % _to_bytes(str(value))
    if isinstance(value, (list, tuple)):
        body = b"".join(_encode_element(element) for element in value)
        return b"*%d\r\n" % len(value) + body
    logger.warning("Unsupported type: %s", type(value).__name__)
    return RESP_NIL