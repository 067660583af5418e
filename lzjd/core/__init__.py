"""Sketch construction, serialization and similarity."""

from .errors import (
    LZJDError,
    SourceIOError,
    DigestDecodeError,
    DigestParseError,
    ConfigurationError,
    WorkerPoolError,
)
from .hashers import (
    RollingHasher,
    HasherFactory,
    CRC32Hasher,
    Murmur3Hasher,
    get_hasher_factory,
)
from .sketch import LZDict, SKETCH_SIZE
from .builders import (
    SketchBuilder,
    StreamingSketchBuilder,
    LZ78SketchBuilder,
    get_builder,
    build_streaming,
    build_lz78,
)
from .similarity import (
    intersection_len,
    jaccard_similarity,
    similarity,
    distance,
    similarity_score,
)
from .digest import (
    DigestRecord,
    ComparisonResult,
    parse_digest_line,
    parse_digests,
    read_digests,
    write_digests,
    write_comparisons,
)

__all__ = [
    "LZJDError",
    "SourceIOError",
    "DigestDecodeError",
    "DigestParseError",
    "ConfigurationError",
    "WorkerPoolError",
    "RollingHasher",
    "HasherFactory",
    "CRC32Hasher",
    "Murmur3Hasher",
    "get_hasher_factory",
    "LZDict",
    "SKETCH_SIZE",
    "SketchBuilder",
    "StreamingSketchBuilder",
    "LZ78SketchBuilder",
    "get_builder",
    "build_streaming",
    "build_lz78",
    "intersection_len",
    "jaccard_similarity",
    "similarity",
    "distance",
    "similarity_score",
    "DigestRecord",
    "ComparisonResult",
    "parse_digest_line",
    "parse_digests",
    "read_digests",
    "write_digests",
    "write_comparisons",
]
