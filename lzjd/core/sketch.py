"""
The LZDict sketch: a sorted list of the K smallest LZ-phrase hashes.
"""

from __future__ import annotations

import base64
import binascii
from bisect import bisect_left
from typing import Iterable, Iterator, List, Sequence, Union, overload

import numpy as np

from .errors import DigestDecodeError
from .similarity import jaccard_similarity

# Maximum number of hashes kept per sketch.
SKETCH_SIZE = 1024

# Persisted entries are unsigned 64-bit little-endian integers.
_ENTRY_DTYPE = np.dtype("<u8")
_ENTRY_BYTES = _ENTRY_DTYPE.itemsize


class LZDict(Sequence[int]):
    """
    Immutable, strictly ascending sequence of distinct 64-bit hashes.

    Instances are produced by a sketch builder or decoded from their
    persisted base64 form; the entries are never modified afterwards, so a
    single LZDict can be shared between threads and workers freely.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[int] = ()) -> None:
        # Callers guarantee ascending, unique order.
        self._entries: List[int] = list(entries)

    @classmethod
    def from_values(cls, values: Iterable[int], k: int = SKETCH_SIZE) -> "LZDict":
        """Build a sketch from arbitrary values, keeping the k smallest distinct ones."""
        return cls(sorted(set(values))[:k])

    @classmethod
    def from_persisted(cls, text: str) -> "LZDict":
        """
        Decode the base64 form produced by to_persisted().

        The decoded buffer is split into 8-byte chunks; ordering is not
        re-validated.

        Raises:
            DigestDecodeError: payload is not valid base64 or its length
                is not a multiple of 8 bytes
        """
        try:
            raw = base64.b64decode(text.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DigestDecodeError(f"Decode error: {e}") from e

        if len(raw) % _ENTRY_BYTES != 0:
            raise DigestDecodeError(
                f"Decode error: payload length {len(raw)} is not a multiple of {_ENTRY_BYTES}",
                details={'length': len(raw)}
            )

        return cls(int(v) for v in np.frombuffer(raw, dtype=_ENTRY_DTYPE))

    def to_persisted(self) -> str:
        """Encode the entries as base64 of concatenated 8-byte little-endian values."""
        raw = np.asarray(self._entries, dtype=_ENTRY_DTYPE).tobytes()
        return base64.b64encode(raw).decode("ascii")

    @property
    def entries(self) -> List[int]:
        return list(self._entries)

    def min(self) -> int:
        return self._entries[0]

    def max(self) -> int:
        return self._entries[-1]

    def __len__(self) -> int:
        return len(self._entries)

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> List[int]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[int, List[int]]:
        return self._entries[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int):
            return False
        i = bisect_left(self._entries, value)
        return i < len(self._entries) and self._entries[i] == value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LZDict):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._entries))

    def __repr__(self) -> str:
        return f"LZDict(len={len(self._entries)})"

    def similarity(self, other: "LZDict") -> float:
        """Jaccard similarity with another sketch."""
        return jaccard_similarity(self, other)

    def dist(self, other: "LZDict") -> float:
        """LZJD distance to another sketch."""
        return 1.0 - self.similarity(other)
