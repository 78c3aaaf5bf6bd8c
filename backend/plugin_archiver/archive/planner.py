"""Deterministic partitioning of discovered files into chunks."""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

DEFAULT_CHUNK_SIZE = 10


def plan(files: Sequence[object], chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Number of chunks needed to cover ``files`` at ``chunk_size`` per chunk."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    return math.ceil(len(files) / chunk_size)


def effective_chunk_size(file_count: int, total_chunks: int) -> int:
    """Chunk size that spreads ``file_count`` files over exactly ``total_chunks`` chunks.

    Processing calls use the caller-supplied total rather than the discovery-time
    constant, so every index in ``[0, total_chunks)`` addresses the same partition
    the caller was told about.
    """
    if total_chunks < 1:
        raise ValueError("total_chunks must be at least 1")
    return math.ceil(file_count / total_chunks)


def chunk_bounds(file_count: int, chunk_index: int, total_chunks: int) -> tuple[int, int]:
    """Half-open ``[start, end)`` bounds of a chunk, clamped to the file count."""
    if chunk_index < 0:
        raise ValueError("chunk_index must not be negative")
    size = effective_chunk_size(file_count, total_chunks)
    start = min(chunk_index * size, file_count)
    end = min((chunk_index + 1) * size, file_count)
    return start, end


def slice_chunk(files: Sequence[T], chunk_index: int, total_chunks: int) -> list[T]:
    """Files belonging to ``chunk_index``; out-of-range indices give an empty list."""
    start, end = chunk_bounds(len(files), chunk_index, total_chunks)
    return list(files[start:end])


__all__ = ["DEFAULT_CHUNK_SIZE", "plan", "effective_chunk_size", "chunk_bounds", "slice_chunk"]
