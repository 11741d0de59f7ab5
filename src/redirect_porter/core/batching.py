"""Order-preserving partition of records into request-sized chunks."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from redirect_porter.core.models import Chunk


def split_into_chunks(
    records: Sequence[Any],
    max_chunk_size: int,
) -> list[Chunk]:
    """Partition *records* into consecutive chunks of *max_chunk_size*.

    The last chunk holds the remainder and may be shorter.  Concatenating
    the chunks in order reproduces *records* exactly; an empty input
    yields no chunks.

    Raises
    ------
    ValueError
        If *max_chunk_size* is smaller than 1.
    """
    if max_chunk_size < 1:
        raise ValueError(f"max_chunk_size must be >= 1, got {max_chunk_size}")

    return [
        Chunk(index=index, items=tuple(records[start:start + max_chunk_size]))
        for index, start in enumerate(range(0, len(records), max_chunk_size))
    ]
