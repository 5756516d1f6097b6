"""
Pytest configuration and shared fixtures for the test suite.

This module provides seeded payload generators, the reference chunker
configuration and small hand-checkable configurations.
"""

import io
import random
from typing import Callable, List, Tuple

import pytest

from robin_chunking.core.config import ChunkerConfig, configure, to_int64


@pytest.fixture(scope="session")
def reference_config() -> ChunkerConfig:
    """prime=3, min=512, max=2048, avg=1024, win=31."""
    return configure(prime=3, min_size=512, max_size=2048, avg_size=1024, window_size=31)


@pytest.fixture(scope="session")
def tiny_config() -> ChunkerConfig:
    """
    Small configuration that is easy to follow by hand.

    weights = [1, 2, 4], checksum = 4 * window[0] + 2 * window[1],
    boundary when checksum mod 5 == 2.
    """
    return configure(prime=2, min_size=4, max_size=8, avg_size=5, window_size=2)


@pytest.fixture(scope="session")
def small_config() -> ChunkerConfig:
    """Frequent boundaries on random data, to exercise many chunks on small inputs."""
    return configure(prime=7, min_size=64, max_size=512, avg_size=64, window_size=16, residue=5)


@pytest.fixture(scope="session")
def zero_residue_config() -> ChunkerConfig:
    """Residue 0: an all-zero window is a boundary with checksum 0."""
    return configure(prime=3, min_size=64, max_size=512, avg_size=64, window_size=16, residue=0)


@pytest.fixture
def make_payload()-> Callable[[int, int], bytes]:
    """Factory for seeded pseudo-random payloads."""
    def _make(size: int, seed: int = 1234) -> bytes:
        return random.Random(seed).randbytes(size)
    return _make


@pytest.fixture
def collecting_handler() -> Tuple[Callable, List[Tuple[bytes, int, str]]]:
    """Streaming handler that copies every chunk into a list."""
    collected: List[Tuple[bytes, int, str]] = []

    def handler(data, checksum, key):
        collected.append((bytes(data), checksum, key))

    return handler, collected


def reference_weighted_sum(window: bytes, prime: int) -> int:
    """Checksum computed step by step with 64-bit wraparound after every operation."""
    window_size = len(window)
    weights = [1]
    for _ in range(window_size):
        weights.append(to_int64(weights[-1] * prime))

    total = 0
    for i, byte in enumerate(window):
        total = to_int64(total + to_int64(byte * weights[window_size - i]))
    return total


class BlockReader(io.RawIOBase):
    """Reader returning at most ``block`` bytes per read, counting reads."""

    def __init__(self, data: bytes, block: int):
        self._data = data
        self._block = block
        self._pos = 0
        self.reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        n = self._block if size < 0 else min(size, self._block)
        piece = self._data[self._pos:self._pos + n]
        self._pos += len(piece)
        return piece
