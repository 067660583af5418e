"""LZJD - Lempel-Ziv Jaccard Distance digests for fuzzy matching of binaries."""

__version__ = "0.2.0"

from .core.sketch import LZDict, SKETCH_SIZE
from .core.builders import build_streaming, build_lz78
from .core.similarity import jaccard_similarity, similarity, distance
from .core.digest import DigestRecord, ComparisonResult
from .core.errors import LZJDError
from .engine.comparator import BatchComparator

__all__ = [
    "LZDict",
    "SKETCH_SIZE",
    "build_streaming",
    "build_lz78",
    "jaccard_similarity",
    "similarity",
    "distance",
    "DigestRecord",
    "ComparisonResult",
    "LZJDError",
    "BatchComparator",
    "__version__",
]
