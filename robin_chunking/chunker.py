"""
RobinChunker: the main entry point of the library.

Wraps one immutable ChunkerConfig and exposes bulk, streaming and file
chunking with per-instance statistics and logging.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from robin_chunking.core.base import ChunkRecord, ChunkSet
from robin_chunking.core.bulk import chunk as bulk_chunk
from robin_chunking.core.config import ChunkerConfig
from robin_chunking.core.streaming import (
    DEFAULT_READ_SIZE,
    ByteSource,
    ChunkHandler,
    ProgressCallback,
    StreamingProgress,
    chunk_stream,
    iter_stream,
)
from robin_chunking.logging_config import metrics_log, performance_log

logger = logging.getLogger(__name__)


class RobinChunker:
    """
    Content-defined chunker driven by a window-weighted polynomial checksum.

    Examples:
        Bulk:
        ```python
        chunker = RobinChunker()            # prime=3, min=512, max=2048, avg=1024, win=31
        chunk_set = chunker.chunk(payload)
        ```

        Streaming with a handler:
        ```python
        def store(data, checksum, key):
            backend.put(key, bytes(data))   # data is only valid during the call

        with open("disk.img", "rb") as f:
            chunker.chunk_stream(f, store)
        ```

        Custom parameters:
        ```python
        chunker = RobinChunker({"min_size": 2048, "max_size": 16384, "avg_size": 4096})
        ```
    """

    def __init__(
        self,
        config: Optional[Union[Dict[str, Any], ChunkerConfig]] = None,
        read_size: int = DEFAULT_READ_SIZE,
        enable_statistics: bool = True,
        **kwargs
    ):
        """
        Initialize the chunker.

        Args:
            config: ChunkerConfig, or a mapping of configuration fields
            read_size: Bytes requested per read in streaming mode
            enable_statistics: Keep running statistics
            **kwargs: Configuration fields merged over ``config`` when it is a mapping

        Raises:
            ConfigError: If the parameters are invalid
        """
        if isinstance(config, ChunkerConfig):
            self.config = config
        else:
            config = dict(config or {})
            config.update(kwargs)
            self.config = ChunkerConfig.from_dict(config)

        self.read_size = read_size
        self.stats = self._empty_stats() if enable_statistics else None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"Robin chunker initialized: {self.config.to_dict()}")

    def chunk(self, content: Union[str, bytes, bytearray, memoryview]) -> ChunkSet:
        """
        Chunk an in-memory buffer.

        Args:
            content: Bytes to chunk; text is encoded as UTF-8

        Returns:
            ChunkSet in stream order
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        start_time = time.time()
        chunk_set = bulk_chunk(content, self.config)
        duration = time.time() - start_time

        for record in chunk_set:
            self._record(record.size, record.natural)
        performance_log("bulk_chunk", duration, bytes=len(content), chunks=len(chunk_set))
        return chunk_set

    def chunk_stream(
        self,
        source: ByteSource,
        handler: ChunkHandler,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Chunk a byte source, calling ``handler(data, checksum, key)`` per chunk.

        ``data`` is a borrowed memoryview that is invalid once the handler
        returns. Exceptions from the handler or the source propagate
        unchanged and stop chunking.
        """
        # One progress update follows every successful handler call
        counted = StreamingProgress(0, 0, 0, 0.0)

        def counting_callback(progress: StreamingProgress) -> None:
            nonlocal counted
            self._record(progress.bytes_emitted - counted.bytes_emitted,
                         progress.natural_boundaries > counted.natural_boundaries)
            counted = progress
            if progress_callback:
                progress_callback(progress)

        start_time = time.time()
        chunk_stream(source, handler, self.config, self.read_size, counting_callback)
        performance_log("stream_chunk", time.time() - start_time)

    def iter_stream(self, source: ByteSource) -> Iterator[ChunkRecord]:
        """Chunk a byte source lazily, yielding owned ChunkRecord copies."""
        for record in iter_stream(source, self.config, self.read_size):
            self._record(record.size, record.natural)
            yield record

    def chunk_file(self, file_path: Union[str, Path], stream: bool = True) -> ChunkSet:
        """
        Chunk a file.

        Args:
            file_path: Path of the file
            stream: Read the file block-wise instead of loading it at once

        Returns:
            ChunkSet with owned records

        Raises:
            OSError: If the file cannot be opened or read
        """
        file_path = Path(file_path)
        self.logger.debug(f"Chunking file {file_path} ({'stream' if stream else 'bulk'} mode)")

        with open(file_path, "rb") as f:
            if stream:
                return ChunkSet(self.iter_stream(f))
            content = f.read()
        return self.chunk(content)

    def _record(self, size: int, natural: bool) -> None:
        if self.stats is None:
            return
        self.stats["chunks_created"] += 1
        self.stats["bytes_processed"] += size
        if natural:
            self.stats["boundary_hits"] += 1
        else:
            self.stats["forced_cuts"] += 1
        self.stats["avg_chunk_size"] = self.stats["bytes_processed"] / self.stats["chunks_created"]

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            "chunks_created": 0,
            "bytes_processed": 0,
            "boundary_hits": 0,
            "forced_cuts": 0,
            "avg_chunk_size": 0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Running statistics (empty when statistics are disabled)."""
        if self.stats is None:
            return {}
        metrics_log(self.stats, chunker="robin")
        return dict(self.stats)

    def reset_stats(self) -> None:
        """Clear running statistics."""
        if self.stats is not None:
            self.stats = self._empty_stats()

    def describe(self) -> str:
        """Describe the algorithm and current parameters."""
        c = self.config
        return f"""
        Window-weighted polynomial content-defined chunking

        Prime: {c.prime}
        Window Size: {c.window_size} bytes
        Size Range: {c.min_size} - {c.max_size} bytes
        Boundary Test: checksum mod {c.avg_size} == {c.residue}

        Each window checksum weights the first byte by prime^{c.window_size}
        and the last by prime^1. The first window tested ends min_size bytes
        into a chunk; chunks without a natural boundary are cut at max_size.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config.to_dict()})"
