"""
Utility modules built on top of the chunking core.

This package provides chunk set validation, comparison of two chunk sets,
and benchmarking of the bulk and streaming modes.
"""

from robin_chunking.utils.benchmarking import BenchmarkResult, benchmark
from robin_chunking.utils.diff import ChunkSetDiff, compare_chunk_sets
from robin_chunking.utils.validation import ChunkSetValidator, ValidationError

__all__ = [
    "BenchmarkResult",
    "benchmark",
    "ChunkSetDiff",
    "compare_chunk_sets",
    "ChunkSetValidator",
    "ValidationError",
]
