"""
Tests for the parallel executor.
"""

import threading

import pytest

from lzjd.core.errors import WorkerPoolError
from lzjd.performance.parallel import (
    ParallelExecutor,
    partition,
)


def square(x):
    return x * x


def fail_on_three(x):
    if x == 3:
        raise ValueError("boom")
    return x


def total(part):
    return sum(part)


def add(a, b):
    return a + b


class TestPartition:
    """Test contiguous partitioning."""

    def test_even_split(self):
        assert partition(list(range(6)), 3) == [[0, 1], [2, 3], [4, 5]]

    def test_uneven_split(self):
        parts = partition(list(range(7)), 3)
        assert [len(p) for p in parts] == [3, 2, 2]
        assert [x for p in parts for x in p] == list(range(7))

    def test_more_parts_than_items(self):
        assert partition([1, 2], 5) == [[1], [2]]

    def test_empty(self):
        assert partition([], 4) == []


class TestParallelExecutor:
    """Test mapping, folding and error handling."""

    def test_map_preserves_order(self):
        with ParallelExecutor(max_workers=4) as executor:
            assert executor.map(square, list(range(50))) == [x * x for x in range(50)]

    def test_map_with_chunks(self):
        with ParallelExecutor(max_workers=3, chunk_size=4) as executor:
            assert executor.map(square, list(range(10))) == [x * x for x in range(10)]

    def test_map_empty(self):
        with ParallelExecutor(max_workers=2) as executor:
            assert executor.map(square, []) == []

    def test_map_progress(self):
        seen = []
        lock = threading.Lock()

        def progress(n):
            with lock:
                seen.append(n)

        with ParallelExecutor(max_workers=2) as executor:
            executor.map(square, list(range(9)), chunk_size=2, progress=progress)
        assert sum(seen) == 9

    def test_map_propagates_errors(self):
        with ParallelExecutor(max_workers=2) as executor:
            with pytest.raises(ValueError, match="boom"):
                executor.map(fail_on_three, list(range(6)))

    def test_fold(self):
        with ParallelExecutor(max_workers=4) as executor:
            assert executor.fold(total, add, list(range(101)), 0) == 5050

    def test_fold_empty_returns_initial(self):
        with ParallelExecutor(max_workers=4) as executor:
            assert executor.fold(total, add, [], 0) == 0

    def test_process_pool(self):
        with ParallelExecutor(max_workers=2, use_processes=True) as executor:
            assert executor.map(abs, [-1, 2, -3]) == [1, 2, 3]

    @pytest.mark.parametrize("workers", [0, -1, True, 2.5])
    def test_invalid_worker_count(self, workers):
        with pytest.raises(WorkerPoolError, match="ThreadPoolBuild error") as exc_info:
            ParallelExecutor(max_workers=workers)
        assert exc_info.value.workers == workers

    def test_default_worker_count(self):
        assert ParallelExecutor().max_workers >= 1

    def test_restart_after_shutdown(self):
        executor = ParallelExecutor(max_workers=2)
        assert executor.map(square, [2]) == [4]
        executor.shutdown()
        assert executor.map(square, [3]) == [9]
        executor.shutdown()

