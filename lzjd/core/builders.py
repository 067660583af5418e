"""
Sketch builders turning a byte stream into an LZDict.

Two interchangeable strategies share the same bounded top-K policy:

- StreamingSketchBuilder: single forward pass that treats "hash already in
  the sketch" as "phrase still matching". Approximates LZ78 boundaries
  without keeping a phrase table.
- LZ78SketchBuilder: exact LZ78 factorization with an explicit phrase
  table, then one hash per phrase. Slower and memory hungry; used to
  cross-check the streaming strategy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_left
from typing import Dict, Iterable, List, Tuple, Type

from .errors import ConfigurationError
from .hashers import HasherFactory
from .sketch import LZDict, SKETCH_SIZE


def _offer(entries: List[int], candidate: int, k: int) -> bool:
    """
    Apply the insert/evict/discard policy for a candidate hash.

    Returns False if the candidate is already present (nothing changes),
    True if it was new, whether it was kept or discarded.
    """
    i = bisect_left(entries, candidate)
    if i < len(entries) and entries[i] == candidate:
        return False
    if len(entries) < k:
        entries.insert(i, candidate)
    elif candidate < entries[-1]:
        # i < len(entries) here, so it stays valid after the pop
        entries.pop()
        entries.insert(i, candidate)
    return True


class SketchBuilder(ABC):
    """Builds a bounded sketch from a byte stream with a given hasher factory."""

    name: str = "base"

    def __init__(self, hasher_factory: HasherFactory, k: int = SKETCH_SIZE):
        if k < 1:
            raise ConfigurationError(f"Sketch size must be >= 1, got {k}", details={'k': k})
        self.hasher_factory = hasher_factory
        self.k = k

    @abstractmethod
    def build(self, byte_stream: Iterable[int]) -> LZDict:
        """Build the sketch of one byte stream."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(hasher={getattr(self.hasher_factory, '__name__', self.hasher_factory)}, k={self.k})"


class StreamingSketchBuilder(SketchBuilder):
    """Approximate single-pass builder."""

    name = "streaming"

    def build(self, byte_stream: Iterable[int]) -> LZDict:
        factory = self.hasher_factory
        k = self.k
        entries: List[int] = []
        hasher = factory()

        for byte in byte_stream:
            hasher.write(byte)
            if _offer(entries, hasher.finish(), k):
                # New value: the current phrase ends here
                hasher = factory()

        return LZDict(entries)


class LZ78SketchBuilder(SketchBuilder):
    """Exact LZ78 builder."""

    name = "lz78"

    @staticmethod
    def parse(byte_stream: Iterable[int]) -> Tuple[List[int], List[int]]:
        """
        Factor a byte stream into LZ78 phrases.

        Returns parallel lists (parents, last_bytes); index 0 is the root
        phrase. A partial match left at the end of the stream is not a
        phrase.
        """
        parents: List[int] = [0]
        last_bytes: List[int] = [0]
        children: Dict[Tuple[int, int], int] = {}

        last_matching_index = 0
        for byte in byte_stream:
            key = (last_matching_index, byte)
            match = children.get(key)
            if match is not None:
                last_matching_index = match
            else:
                children[key] = len(parents)
                parents.append(last_matching_index)
                last_bytes.append(byte)
                last_matching_index = 0

        return parents, last_bytes

    @staticmethod
    def phrase_bytes(parents: List[int], last_bytes: List[int], phrase_id: int) -> bytes:
        """Byte content of a phrase, root to leaf."""
        path = []
        node = phrase_id
        while node != 0:
            path.append(last_bytes[node])
            node = parents[node]
        path.reverse()
        return bytes(path)

    def build(self, byte_stream: Iterable[int]) -> LZDict:
        parents, last_bytes = self.parse(byte_stream)
        factory = self.hasher_factory
        k = self.k
        entries: List[int] = []

        for phrase_id in range(1, len(parents)):
            hasher = factory()
            for byte in self.phrase_bytes(parents, last_bytes, phrase_id):
                hasher.write(byte)
            _offer(entries, hasher.finish(), k)

        return LZDict(entries)


BUILDERS: Dict[str, Type[SketchBuilder]] = {
    StreamingSketchBuilder.name: StreamingSketchBuilder,
    LZ78SketchBuilder.name: LZ78SketchBuilder,
}

DEFAULT_STRATEGY = StreamingSketchBuilder.name


def get_builder(strategy: str, hasher_factory: HasherFactory, k: int = SKETCH_SIZE) -> SketchBuilder:
    """Instantiate a builder by strategy name."""
    try:
        builder_cls = BUILDERS[strategy.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown strategy '{strategy}' (expected one of: {', '.join(sorted(BUILDERS))})",
            details={'strategy': strategy}
        ) from None
    return builder_cls(hasher_factory, k)


def build_streaming(byte_stream: Iterable[int], hasher_factory: HasherFactory,
                    k: int = SKETCH_SIZE) -> LZDict:
    return StreamingSketchBuilder(hasher_factory, k).build(byte_stream)


def build_lz78(byte_stream: Iterable[int], hasher_factory: HasherFactory,
               k: int = SKETCH_SIZE) -> LZDict:
    return LZ78SketchBuilder(hasher_factory, k).build(byte_stream)
