"""Batch digest generation and comparison."""

from .comparator import BatchComparator, validate_threshold

__all__ = ["BatchComparator", "validate_threshold"]
