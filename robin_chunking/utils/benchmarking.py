"""
Benchmarking utilities for bulk and streaming chunking.

Measures throughput of both modes on the same content and checks that they
agree chunk for chunk.
"""

import io
import logging
import statistics
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Union

import psutil

from robin_chunking.core.base import ChunkSet
from robin_chunking.core.bulk import chunk
from robin_chunking.core.config import ChunkerConfig
from robin_chunking.core.streaming import DEFAULT_READ_SIZE, iter_stream

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results from benchmarking one input."""

    content_size: int
    runs: int
    bulk_time: float                  # mean seconds per run
    stream_time: float                # mean seconds per run
    bulk_throughput_mbps: float
    stream_throughput_mbps: float
    chunk_count: int
    natural_boundaries: int
    avg_chunk_size: float
    chunk_size_stdev: float
    memory_usage_mb: Optional[float]  # resident set size after the runs
    modes_agree: bool
    parameters: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


def _throughput(size: int, seconds: float) -> float:
    if seconds <= 0:
        return 0.0
    return size / (1024 * 1024) / seconds


def _memory_usage_mb() -> Optional[float]:
    try:
        return psutil.Process().memory_info().rss / (1024 * 1024)
    except psutil.Error as e:
        logger.debug(f"Could not read process memory: {e}")
        return None


def benchmark(
    content: Union[bytes, bytearray],
    config: ChunkerConfig,
    runs: int = 3,
    read_size: int = DEFAULT_READ_SIZE
) -> BenchmarkResult:
    """
    Benchmark bulk and streaming chunking on ``content``.

    Args:
        content: Input bytes
        config: Chunker configuration
        runs: Number of timed runs per mode
        read_size: Read size for the streaming mode

    Returns:
        BenchmarkResult
    """
    if runs < 1:
        raise ValueError("runs must be at least 1")

    content = bytes(content)
    bulk_times: List[float] = []
    stream_times: List[float] = []
    bulk_result = stream_result = None

    for _ in range(runs):
        start = time.perf_counter()
        bulk_result = chunk(content, config)
        bulk_times.append(time.perf_counter() - start)

        start = time.perf_counter()
        stream_result = ChunkSet(iter_stream(io.BytesIO(content), config, read_size))
        stream_times.append(time.perf_counter() - start)

    sizes = [record.size for record in bulk_result]
    # Bulk chunking emits one chunk for empty input, streaming emits none
    modes_agree = bulk_result == stream_result or (not content and len(stream_result) == 0)

    result = BenchmarkResult(
        content_size=len(content),
        runs=runs,
        bulk_time=statistics.mean(bulk_times),
        stream_time=statistics.mean(stream_times),
        bulk_throughput_mbps=_throughput(len(content), statistics.mean(bulk_times)),
        stream_throughput_mbps=_throughput(len(content), statistics.mean(stream_times)),
        chunk_count=len(bulk_result),
        natural_boundaries=sum(1 for record in bulk_result if record.natural),
        avg_chunk_size=statistics.mean(sizes) if sizes else 0.0,
        chunk_size_stdev=statistics.pstdev(sizes) if sizes else 0.0,
        memory_usage_mb=_memory_usage_mb(),
        modes_agree=modes_agree,
        parameters=config.to_dict(),
    )

    if not modes_agree:
        logger.warning("Bulk and streaming chunking produced different chunks")
    logger.debug(f"Benchmark: {result.to_dict()}")
    return result
