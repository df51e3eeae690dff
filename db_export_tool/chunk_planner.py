"""
Splitting a table into fixed-size LIMIT/OFFSET pages.
"""

import math
from typing import Iterator

from .models import ChunkDescriptor


def chunk_count(total_rows: int, chunk_size: int) -> int:
    """Number of chunks needed to cover total_rows."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if total_rows < 0:
        raise ValueError(f"total_rows must not be negative, got {total_rows}")
    return math.ceil(total_rows / chunk_size)


def plan_chunks(total_rows: int, chunk_size: int) -> Iterator[ChunkDescriptor]:
    """
    Yield chunk descriptors covering [0, total_rows).

    Every chunk requests chunk_size rows; the server returns fewer for the
    last one. Call again for a fresh sequence.
    """
    # Validate eagerly rather than on first next()
    count = chunk_count(total_rows, chunk_size)
    return (
        ChunkDescriptor(index=i, offset=i * chunk_size, limit=chunk_size)
        for i in range(count)
    )
