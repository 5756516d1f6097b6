"""
Streaming chunking of an incrementally read byte source.

The source is pulled block by block into a reusable buffer, so the input
never has to fit in memory or be seekable. Chunks are delivered one at a
time, either to a handler callback as borrowed views (chunk_stream) or as
owned ChunkRecord copies (iter_stream). Boundaries, checksums and keys are
identical to bulk chunking of the same bytes, whatever the read size.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Iterable, Iterator, Optional, Union

from robin_chunking.core.base import ChunkRecord
from robin_chunking.core.config import ChunkerConfig
from robin_chunking.core.digest import digest_key
from robin_chunking.core.scanner import ByteCursor, iter_cuts

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE = 64 * 1024  # 64KB reads

ByteSource = Union[BinaryIO, Iterable[bytes]]
ChunkHandler = Callable[[memoryview, int, str], Any]


@dataclass
class StreamingProgress:
    """Progress of a streaming chunking run."""

    bytes_read: int
    bytes_emitted: int
    chunks_emitted: int
    elapsed_time: float
    natural_boundaries: int = 0

    @property
    def throughput_mbps(self) -> float:
        """Emitted megabytes per second."""
        if self.elapsed_time <= 0:
            return 0.0
        return self.bytes_emitted / (1024 * 1024) / self.elapsed_time


ProgressCallback = Callable[[StreamingProgress], None]


class StreamCursor(ByteCursor):
    """
    Cursor over a buffer refilled from a reader or an iterable of blocks.

    Emitted bytes are dropped from the front of the buffer on the next
    refill, so it never holds much more than ``max_size + read_size`` bytes.
    Compaction rebinds ``buffer`` to a new bytearray instead of resizing the
    old one in place.
    """

    def __init__(self, source: ByteSource, read_size: int = DEFAULT_READ_SIZE):
        if read_size <= 0:
            raise ValueError(f"read_size must be positive, got {read_size}")

        self.buffer = bytearray()
        self.start = 0
        self.bytes_read = 0
        self.exhausted = False
        self._read_size = read_size

        if hasattr(source, "read"):
            self._reader = source
            self._blocks = None
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self._reader = None
            self._blocks = iter([source])
        else:
            self._reader = None
            self._blocks = iter(source)

    def _read_block(self) -> bytes:
        if self._reader is not None:
            block = self._reader.read(self._read_size)
            if block is None:
                # Non-blocking raw reader with no data ready
                raise BlockingIOError(
                    "source returned no data without reaching end of stream; "
                    "non-blocking sources are not supported"
                )
            return block
        for block in self._blocks:
            if block:
                return block
        return b""

    def fill(self, needed: int) -> int:
        available = len(self.buffer) - self.start
        while available < needed and not self.exhausted:
            block = self._read_block()
            if not block:
                self.exhausted = True
                break
            if self.start:
                self.buffer = self.buffer[self.start:]
                self.start = 0
            self.buffer += block
            self.bytes_read += len(block)
            available = len(self.buffer)
        return available


def chunk_stream(
    source: ByteSource,
    handler: ChunkHandler,
    config: ChunkerConfig,
    read_size: int = DEFAULT_READ_SIZE,
    progress_callback: Optional[ProgressCallback] = None,
) -> None:
    """
    Chunk a byte source and call ``handler(data, checksum, key)`` per chunk.

    ``data`` is a memoryview into the internal buffer. It is released as soon
    as the handler returns and the buffer may be overwritten afterwards, so
    the handler must finish with it (write it out, hash it, or copy it with
    ``bytes(data)``) before returning. Touching a retained view raises
    ``ValueError``.

    Args:
        source: Blocking object with ``read(n)`` returning bytes (empty at
            end of stream), or an iterable of bytes-like blocks. A ``read``
            returning None raises BlockingIOError.
        handler: Per-chunk callback
        config: Chunker configuration
        read_size: Bytes requested per read
        progress_callback: Optional callback receiving StreamingProgress
            after every chunk

    Raises:
        Any exception raised by ``handler`` or by the source's ``read``,
        unchanged. Chunking stops immediately and no further reads happen.
    """
    cursor = StreamCursor(source, read_size)
    start_time = time.time()
    chunks_emitted = 0
    bytes_emitted = 0
    natural_boundaries = 0

    cuts = iter_cuts(cursor, config)
    try:
        for cut in cuts:
            end = cursor.start + cut.length
            with memoryview(cursor.buffer) as whole, whole[cursor.start:end] as data:
                handler(data, cut.checksum, digest_key(data))

            chunks_emitted += 1
            bytes_emitted += cut.length
            if cut.natural:
                natural_boundaries += 1
            if progress_callback:
                progress_callback(StreamingProgress(
                    bytes_read=cursor.bytes_read,
                    bytes_emitted=bytes_emitted,
                    chunks_emitted=chunks_emitted,
                    elapsed_time=time.time() - start_time,
                    natural_boundaries=natural_boundaries,
                ))
    finally:
        cuts.close()

    logger.debug(
        f"Streamed {bytes_emitted} bytes into {chunks_emitted} chunks "
        f"in {time.time() - start_time:.3f}s"
    )


def iter_stream(
    source: ByteSource,
    config: ChunkerConfig,
    read_size: int = DEFAULT_READ_SIZE,
) -> Iterator[ChunkRecord]:
    """
    Chunk a byte source lazily, yielding owned ChunkRecord copies.

    Each chunk costs one extra copy compared to chunk_stream(), in exchange
    for records that may be kept indefinitely.
    """
    cursor = StreamCursor(source, read_size)
    for cut in iter_cuts(cursor, config):
        piece = bytes(cursor.view(cut.length))
        yield ChunkRecord(piece, cut.checksum, digest_key(piece), cut.natural)
