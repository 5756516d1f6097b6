"""
Bulk chunking of an in-memory buffer.
"""

import logging
from typing import Union

from robin_chunking.core.base import ChunkRecord, ChunkSet
from robin_chunking.core.config import ChunkerConfig
from robin_chunking.core.digest import digest_key
from robin_chunking.core.scanner import ByteCursor, iter_cuts

logger = logging.getLogger(__name__)


class BufferCursor(ByteCursor):
    """Cursor over a fully materialized buffer."""

    def __init__(self, data: bytes):
        self.buffer = data
        self.start = 0

    def fill(self, needed: int) -> int:
        return len(self.buffer) - self.start


def chunk(src: Union[bytes, bytearray, memoryview], config: ChunkerConfig) -> ChunkSet:
    """
    Split a buffer into content-defined chunks.

    Never fails structurally: input shorter than ``min_size`` (empty input
    included) becomes a single chunk with checksum 0, and in the worst case
    the whole input is cut purely by ``max_size``.

    Args:
        src: Bytes to chunk; non-``bytes`` input is copied first
        config: Chunker configuration

    Returns:
        ChunkSet whose records own their data
    """
    data = src if isinstance(src, bytes) else bytes(src)

    if len(data) < config.min_size:
        return ChunkSet([ChunkRecord(data, 0, digest_key(data))])

    cursor = BufferCursor(data)
    records = []
    for cut in iter_cuts(cursor, config):
        piece = cursor.view(cut.length)
        records.append(ChunkRecord(piece, cut.checksum, digest_key(piece), cut.natural))

    logger.debug(f"Chunked {len(data)} bytes into {len(records)} chunks")
    return ChunkSet(records)
