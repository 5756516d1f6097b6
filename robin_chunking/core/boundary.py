"""
Boundary detection.

The checksum of a window is a weighted sum in which the first byte of the
window carries the highest weight (``prime ** window_size``) and the last byte
the lowest (``prime ** 1``)::

    checksum = sum(window[i] * prime ** (window_size - i) for i in range(window_size))

All arithmetic follows signed 64-bit integer semantics (wraparound on
overflow), and the boundary test uses a modulo that truncates toward zero, so
checksums and boundaries are stable across implementations.
"""

from typing import Union

from robin_chunking.core.config import ChunkerConfig, UINT64_MASK, to_int64

BytesLike = Union[bytes, bytearray, memoryview]


def weighted_sum(window: BytesLike, config: ChunkerConfig) -> int:
    """
    Compute the checksum of one window.

    Args:
        window: Exactly ``config.window_size`` bytes
        config: Chunker configuration

    Returns:
        Signed 64-bit checksum
    """
    window_size = config.window_size
    if len(window) != window_size:
        raise ValueError(f"window must be {window_size} bytes, got {len(window)}")

    weights = config.weights
    total = 0
    for i, byte in enumerate(window):
        total += byte * weights[window_size - i]
    return to_int64(total)


def truncated_mod(value: int, modulus: int) -> int:
    """Remainder with the sign of the dividend, as in C or Go."""
    remainder = abs(value) % abs(modulus)
    return -remainder if value < 0 else remainder


def is_boundary(checksum: int, config: ChunkerConfig) -> bool:
    """True when the checksum marks a chunk boundary."""
    return truncated_mod(checksum, config.avg_size) == config.residue


class RollingWeightedSum:
    """
    Incrementally maintained window checksum.

    Sliding the window one byte to the right is O(1)::

        S' = (S - outgoing * prime ** window_size) * prime + incoming * prime

    which yields exactly the value weighted_sum() computes for the shifted
    window.
    """

    def __init__(self, config: ChunkerConfig):
        self.config = config
        self._multiplier = config.weights[1] & UINT64_MASK
        self._leading_weight = config.weights[config.window_size] & UINT64_MASK
        self._state = 0

    def reset(self, window: BytesLike) -> int:
        """Start over from a full window and return its checksum."""
        self._state = weighted_sum(window, self.config) & UINT64_MASK
        return self.value

    def roll(self, outgoing: int, incoming: int) -> int:
        """Drop ``outgoing`` from the front, append ``incoming`` and return the new checksum."""
        self._state = (
            (self._state - outgoing * self._leading_weight) * self._multiplier
            + incoming * self._multiplier
        ) & UINT64_MASK
        return self.value

    @property
    def value(self) -> int:
        """Current checksum as a signed 64-bit integer."""
        return to_int64(self._state)
