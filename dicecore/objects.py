"""Stored objects and their packed type/encoding byte."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_TYPE_MASK = 0b11110000
_ENCODING_MASK = 0b00001111

OBJ_TYPE_STRING = 0 << 4
OBJ_ENCODING_RAW = 0
OBJ_ENCODING_INT = 1
OBJ_ENCODING_EMBSTR = 8

OBJ_TYPE_BYTELIST = 1 << 4
OBJ_ENCODING_QINT = 0
OBJ_ENCODING_QREF = 1
OBJ_ENCODING_STACKINT = 2
OBJ_ENCODING_STACKREF = 3

OBJ_TYPE_BITSET = 2 << 4
OBJ_ENCODING_BF = 2

OBJ_TYPE_JSON = 3 << 4
OBJ_ENCODING_JSON = 0


class TypeEncodingError(TypeError):
    """Raised when an operation does not fit an object's type or encoding."""


@dataclass(eq=False)
class Obj:
    """A stored value with its type/encoding byte and last access clock.

    Objects compare and hash by identity, so they can key expiry tables.
    """

    value: Any = None
    type_encoding: int = 0
    last_accessed_at: int = 0


def get_type(te: int) -> int:
    """Return the type bits (high nibble) of a type/encoding byte."""
    return te & _TYPE_MASK


def get_encoding(te: int) -> int:
    """Return the encoding bits (low nibble) of a type/encoding byte."""
    return te & _ENCODING_MASK


def extract_type_encoding(obj: Obj) -> tuple[int, int]:
    """Split an object's type/encoding byte into ``(type, encoding)``."""
    return get_type(obj.type_encoding), get_encoding(obj.type_encoding)


def assert_type(te: int, t: int) -> None:
    """Raise :class:`TypeEncodingError` unless ``te`` carries type ``t``."""
    if get_type(te) != t:
        raise TypeEncodingError("the operation is not permitted on this type")


def assert_encoding(te: int, e: int) -> None:
    """Raise :class:`TypeEncodingError` unless ``te`` carries encoding ``e``."""
    if get_encoding(te) != e:
        raise TypeEncodingError("the operation is not permitted on this encoding")