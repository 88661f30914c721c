"""Helpers for chunking long documents into provider friendly sizes."""

from __future__ import annotations

from .types import Chunk


def chunk_text(content: str, limit: int) -> list[Chunk]:
    """Split *content* into consecutive, non-overlapping windows of *limit* characters.

    The final window may be shorter. Offsets refer to positions in *content*,
    which is not stripped so that offsets stay stable.
    """

    if limit <= 0:
        raise ValueError("Chunk limit must be positive")

    return [
        Chunk(sequence_index=index, source_offset=offset, text=content[offset : offset + limit])
        for index, offset in enumerate(range(0, len(content), limit))
    ]


__all__ = ("chunk_text",)
