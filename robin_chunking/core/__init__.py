"""
Core components of the content-defined chunking engine.

This package contains:
- Chunker configuration and the precomputed weight table
- Window checksum and boundary test
- The shared boundary loop
- Bulk and streaming chunking entry points
- Chunk records and chunk sets
"""

from robin_chunking.core.base import ChunkRecord, ChunkSet
from robin_chunking.core.boundary import RollingWeightedSum, is_boundary, weighted_sum
from robin_chunking.core.bulk import chunk
from robin_chunking.core.config import ChunkerConfig, configure, default_config, load_config
from robin_chunking.core.digest import digest_key
from robin_chunking.core.exceptions import (
    ChunkIndexError,
    ChunkingError,
    ConfigError,
    WindowTooLargeError,
)
from robin_chunking.core.streaming import StreamingProgress, chunk_stream, iter_stream

__all__ = [
    "ChunkRecord",
    "ChunkSet",
    "RollingWeightedSum",
    "is_boundary",
    "weighted_sum",
    "chunk",
    "ChunkerConfig",
    "configure",
    "default_config",
    "load_config",
    "digest_key",
    "ChunkIndexError",
    "ChunkingError",
    "ConfigError",
    "WindowTooLargeError",
    "StreamingProgress",
    "chunk_stream",
    "iter_stream",
]
