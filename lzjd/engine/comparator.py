"""
Batch digest generation and thresholded all-pairs comparison.

Both axes of work are data parallel and run on a ParallelExecutor:

- hash_sources(): one sketch per source, results in input order
- compare_all(): rows of the first collection are spread across workers,
  each worker collects its matches privately and the partial lists are
  concatenated. When both collections are the same object only the strict
  upper triangle (i < j) is evaluated.
"""

import time
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..core.builders import SketchBuilder, get_builder
from ..core.digest import ComparisonResult, DigestRecord, read_digests
from ..core.errors import ConfigurationError
from ..core.hashers import get_hasher_factory
from ..core.similarity import similarity_score
from ..performance.parallel import ParallelExecutor
from ..sources import Source
from ..utils.logging_setup import get_logger, log_operation

logger = get_logger(__name__)


def validate_threshold(threshold: int) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, int) or not 0 <= threshold <= 100:
        raise ConfigurationError(
            f"Threshold must be an integer between 0 and 100, got {threshold!r}",
            details={'threshold': threshold}
        )
    return threshold


def _digest_source(builder: SketchBuilder, source: Source) -> DigestRecord:
    logger.debug(f"Hashing {source.name}")
    return DigestRecord(source.name, builder.build(source.read_bytes()))


def _compare_rows(set_a: Sequence[DigestRecord],
                  set_b: Sequence[DigestRecord],
                  same: bool,
                  threshold: int,
                  row_groups: Sequence[range]) -> List[ComparisonResult]:
    matches: List[ComparisonResult] = []
    len_b = len(set_b)
    for rows in row_groups:
        for i in rows:
            record_a = set_a[i]
            sketch_a = record_a.sketch
            for j in range(i + 1 if same else 0, len_b):
                record_b = set_b[j]
                score = similarity_score(sketch_a, record_b.sketch)
                if score >= threshold:
                    matches.append(ComparisonResult(record_a.name, record_b.name, score))
    return matches


def _concat(left: List[ComparisonResult], right: List[ComparisonResult]) -> List[ComparisonResult]:
    return left + right


class BatchComparator:
    """
    Parallel digest generator and comparator.

    Owns a sketch builder and a worker pool; use as a context manager (or
    call close()) to release the pool.
    """

    def __init__(self, builder: SketchBuilder,
                 executor: Optional[ParallelExecutor] = None):
        self.builder = builder
        self.executor = executor or ParallelExecutor()

    @classmethod
    def create(cls, hasher: str = "murmur3", strategy: str = "streaming",
               workers: Optional[int] = None, use_processes: bool = False) -> "BatchComparator":
        """Build a comparator from hasher/strategy names and pool settings."""
        builder = get_builder(strategy, get_hasher_factory(hasher))
        return cls(builder, ParallelExecutor(max_workers=workers, use_processes=use_processes))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.executor.shutdown()

    def hash_sources(self, sources: Sequence[Source],
                     progress: Optional[Callable[[int], None]] = None) -> List[DigestRecord]:
        """
        Build one digest per source, in parallel.

        Returns:
            Digest records in the same order as `sources`
        """
        log_operation(logger, "hash_sources", count=len(sources), builder=repr(self.builder))
        start = time.time()
        records = self.executor.map(partial(_digest_source, self.builder), list(sources),
                                    progress=progress)
        logger.info(f"Hashed {len(records)} sources in {time.time() - start:.2f}s")
        return records

    def compare_all(self, set_a: Sequence[DigestRecord],
                    set_b: Sequence[DigestRecord],
                    threshold: int) -> List[ComparisonResult]:
        """
        Compare every digest of set_a with every digest of set_b.

        If set_a and set_b are the same object, only pairs (i, j) with
        i < j are compared. Results below `threshold` are dropped. The order
        of the returned list is unspecified.
        """
        validate_threshold(threshold)
        same = set_a is set_b
        n = len(set_a)
        if n == 0 or len(set_b) == 0:
            return []

        # Strided row groups keep triangular work balanced across workers
        parts = min(self.executor.max_workers, n)
        row_groups = [range(p, n, parts) for p in range(parts)]

        log_operation(logger, "compare_all", rows=n, cols=len(set_b), same=same, threshold=threshold)
        start = time.time()
        results = self.executor.fold(
            partial(_compare_rows, set_a, set_b, same, threshold),
            _concat,
            row_groups,
            [],
            partitions=len(row_groups),
        )
        logger.info(f"Compared {n}x{len(set_b)} digests in {time.time() - start:.2f}s, "
                    f"{len(results)} results >= {threshold}")
        return results

    def generate_and_compare(self, sources: Sequence[Source], threshold: int,
                             progress: Optional[Callable[[int], None]] = None) -> List[ComparisonResult]:
        """Hash all sources, then compare every unordered pair of them."""
        validate_threshold(threshold)
        records = self.hash_sources(sources, progress=progress)
        return self.compare_all(records, records, threshold)

    def compare_digest_files(self, paths: Sequence[Union[str, Path]],
                             threshold: int) -> List[ComparisonResult]:
        """
        Compare the digests of one file against themselves, or of two files
        against each other.

        Raises:
            ConfigurationError: not one or two paths
        """
        if not paths or len(paths) > 2:
            raise ConfigurationError(
                "Can only compare at most two indexes at a time!",
                details={'inputs': [str(p) for p in paths]}
            )
        validate_threshold(threshold)
        digests_a = read_digests(paths[0])
        digests_b = read_digests(paths[1]) if len(paths) == 2 else digests_a
        return self.compare_all(digests_a, digests_b, threshold)
