"""
Byte hashers consumed by the sketch builders.

A hasher is anything with ``write(byte)`` and ``finish()``; a hasher factory
is any zero-argument callable returning a fresh hasher (normally the class
itself, which also keeps factories picklable for process pools).
"""

from __future__ import annotations

import zlib
from typing import Callable, Dict, Protocol

import mmh3

from .errors import ConfigurationError


class RollingHasher(Protocol):
    """Stateful, byte-consuming hash accumulator."""

    def write(self, byte: int) -> None:
        ...

    def finish(self) -> int:
        ...


HasherFactory = Callable[[], RollingHasher]


class CRC32Hasher:
    """IEEE CRC32 over every byte written so far, widened to 64 bits."""

    __slots__ = ("_crc",)

    def __init__(self) -> None:
        self._crc = 0

    def write(self, byte: int) -> None:
        self._crc = zlib.crc32(bytes((byte,)), self._crc)

    def update(self, data: bytes) -> None:
        self._crc = zlib.crc32(data, self._crc)

    def finish(self) -> int:
        return self._crc & 0xFFFFFFFF


class Murmur3Hasher:
    """
    MurmurHash3 (x64, 128-bit, seed 0) over every byte written so far.

    finish() returns the low 64 bits as an unsigned integer. The digest is
    recomputed from the buffered bytes, so reading it never disturbs state.
    """

    __slots__ = ("_buf",)

    def __init__(self) -> None:
        self._buf = bytearray()

    def write(self, byte: int) -> None:
        self._buf.append(byte)

    def update(self, data: bytes) -> None:
        self._buf.extend(data)

    def finish(self) -> int:
        low, _high = mmh3.hash64(bytes(self._buf), seed=0, x64arch=True, signed=False)
        return low


HASHERS: Dict[str, HasherFactory] = {
    "crc32": CRC32Hasher,
    "murmur3": Murmur3Hasher,
}

DEFAULT_HASHER = "murmur3"


def get_hasher_factory(name: str) -> HasherFactory:
    """Resolve a hasher factory by its registered name."""
    try:
        return HASHERS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown hasher '{name}' (expected one of: {', '.join(sorted(HASHERS))})",
            details={'hasher': name}
        ) from None
