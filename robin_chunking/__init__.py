"""
Robin Chunking Library

Content-defined chunking driven by a window-weighted polynomial checksum.
Boundaries depend only on nearby content, so inserting or deleting bytes
changes only the chunks around the edit. That is what deduplication,
backup and incremental sync systems build on.

Public API Examples:

Bulk:
    from robin_chunking import configure, chunk
    config = configure(prime=3, min_size=512, max_size=2048, avg_size=1024, window_size=31)
    chunk_set = chunk(payload, config)
    for record in chunk_set:
        print(record.key, record.checksum, record.size)

Streaming:
    from robin_chunking import chunk_stream
    with open("large.bin", "rb") as f:
        chunk_stream(f, lambda data, checksum, key: sink.write(key, data), config)

Chunker object:
    from robin_chunking import RobinChunker
    chunker = RobinChunker(min_size=2048, max_size=16384, avg_size=4096)
    chunk_set = chunker.chunk_file("disk.img")
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
from robin_chunking.chunker import RobinChunker
from robin_chunking.utils.diff import ChunkSetDiff, compare_chunk_sets
from robin_chunking.utils.validation import ChunkSetValidator, ValidationError

from robin_chunking.logging_config import (
    configure_logging,
    LogConfig,
    LogLevel,
    get_logger,
    enable_debug_mode,
    user_info,
    user_success,
    user_warning,
    user_error,
    debug_operation,
    performance_log,
    metrics_log
)

# Sensible defaults for Python import usage; configure_logging() overrides them
configure_logging(
    level=LogLevel.NORMAL,
    console_output=True,
    file_output=False,
    collect_performance=False,
    collect_metrics=False
)

# Version info
__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ChunkerConfig",
    "configure",
    "default_config",
    "load_config",

    # Boundary detection
    "weighted_sum",
    "is_boundary",
    "RollingWeightedSum",
    "digest_key",

    # Chunking
    "chunk",
    "chunk_stream",
    "iter_stream",
    "StreamingProgress",
    "RobinChunker",

    # Results
    "ChunkRecord",
    "ChunkSet",
    "ChunkSetDiff",
    "compare_chunk_sets",
    "ChunkSetValidator",

    # Errors
    "ChunkingError",
    "ConfigError",
    "WindowTooLargeError",
    "ChunkIndexError",
    "ValidationError",

    # Logging
    "configure_logging",
    "LogConfig",
    "LogLevel",
    "get_logger",
    "enable_debug_mode",
    "user_info",
    "user_success",
    "user_warning",
    "user_error",
    "debug_operation",
    "performance_log",
    "metrics_log",

    # Version
    "__version__",
]
