"""
Parallel processing utilities.

A fixed-size worker pool over concurrent.futures with ordered mapping and
partition-local fold/merge. Tasks share no mutable state; any task error
is re-raised to the caller once the pool has been told to stop.
"""

import os
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor, as_completed, Future
from typing import List, Dict, Any, Optional, Callable, Sequence, TypeVar
import logging

from ..core.errors import WorkerPoolError

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')
A = TypeVar('A')


def default_worker_count() -> int:
    """Number of logical cores on this host."""
    return os.cpu_count() or 1


def _apply_chunk(func: Callable, chunk: List) -> List:
    """Process a chunk of items."""
    return [func(item) for item in chunk]


def partition(items: Sequence[T], parts: int) -> List[Sequence[T]]:
    """Split items into at most `parts` contiguous, non-empty slices."""
    n = len(items)
    if n == 0:
        return []
    parts = max(1, min(parts, n))
    size, extra = divmod(n, parts)
    slices = []
    start = 0
    for p in range(parts):
        end = start + size + (1 if p < extra else 0)
        slices.append(items[start:end])
        start = end
    return slices


class ParallelExecutor:
    """
    Fixed-size worker pool backed by threads or processes.

    Functions and items handed to a process pool must be picklable
    (module-level functions, plain data).
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        use_processes: bool = False,
        chunk_size: Optional[int] = None
    ):
        """
        Initialize parallel executor.

        Args:
            max_workers: Number of workers (default: logical core count)
            use_processes: Use processes instead of threads
            chunk_size: Default chunk size for map()

        Raises:
            WorkerPoolError: max_workers is not a positive integer
        """
        if max_workers is None:
            max_workers = default_worker_count()
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise WorkerPoolError(
                f"ThreadPoolBuild error: worker count must be a positive integer, got {max_workers!r}",
                workers=max_workers
            )
        self.max_workers = max_workers
        self.use_processes = use_processes
        self.chunk_size = chunk_size

        self._executor: Optional[Any] = None
        self._shutdown = False

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()

    def start(self):
        """Start the executor."""
        if self._executor is None:
            if self.use_processes:
                self._executor = ProcessPoolExecutor(max_workers=self.max_workers)
            else:
                self._executor = ThreadPoolExecutor(max_workers=self.max_workers)
            self._shutdown = False
            logger.debug(
                f"Started {'process' if self.use_processes else 'thread'} pool "
                f"with {self.max_workers} workers"
            )

    def shutdown(self, wait: bool = True):
        """Shutdown the executor."""
        if self._executor and not self._shutdown:
            self._executor.shutdown(wait=wait)
            self._executor = None
            self._shutdown = True

    def _collect(self, futures: Dict[Future, int], on_done: Callable[[int, Any], None]) -> None:
        """Wait for futures; cancel the rest and re-raise on the first failure."""
        try:
            for future in as_completed(futures):
                on_done(futures[future], future.result())
        except Exception as e:
            logger.error(f"Task failed: {e}")
            for pending in futures:
                pending.cancel()
            raise

    def map(
        self,
        func: Callable[[T], R],
        items: Sequence[T],
        chunk_size: Optional[int] = None,
        progress: Optional[Callable[[int], None]] = None
    ) -> List[R]:
        """
        Map function over items in parallel.

        Args:
            func: Function to apply
            items: Items to process
            chunk_size: Items per submitted task
            progress: Called with the number of items finished by each task

        Returns:
            List of results in original order
        """
        if not items:
            return []

        self.start()
        chunk_size = chunk_size or self.chunk_size or 1

        futures: Dict[Future, int] = {}
        for i in range(0, len(items), chunk_size):
            chunk = list(items[i:i + chunk_size])
            future = self._executor.submit(_apply_chunk, func, chunk)
            futures[future] = i

        results: List[Any] = [None] * len(items)

        def store(idx: int, chunk_results: List[R]) -> None:
            for j, r in enumerate(chunk_results):
                results[idx + j] = r
            if progress is not None:
                progress(len(chunk_results))

        self._collect(futures, store)
        return results

    def fold(
        self,
        fold_func: Callable[[Sequence[T]], A],
        merge_func: Callable[[A, A], A],
        items: Sequence[T],
        initial: A,
        partitions: Optional[int] = None
    ) -> A:
        """
        Partition-local fold followed by a merge of the partial results.

        Each partition is folded by one task into a private accumulator;
        the accumulators are merged in completion order, so merge_func
        should be associative and order-insensitive for the caller's
        purposes.

        Args:
            fold_func: Reduces one partition to a partial result
            merge_func: Combines two partial results
            items: Items to partition
            initial: Result for empty input and merge seed
            partitions: Number of partitions (default: max_workers)

        Returns:
            Merged result
        """
        if not items:
            return initial

        self.start()
        slices = partition(items, partitions or self.max_workers)
        futures: Dict[Future, int] = {
            self._executor.submit(fold_func, part): idx for idx, part in enumerate(slices)
        }

        merged = [initial]

        def merge(_idx: int, partial: A) -> None:
            merged[0] = merge_func(merged[0], partial)

        self._collect(futures, merge)
        return merged[0]

