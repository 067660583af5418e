"""Worker pool utilities."""

from .parallel import ParallelExecutor, partition, default_worker_count

__all__ = ["ParallelExecutor", "partition", "default_worker_count"]
