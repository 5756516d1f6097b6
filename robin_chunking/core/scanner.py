"""
The chunk boundary loop shared by bulk and streaming chunking.

The loop only sees a ByteCursor: the bytes of the pending chunk starting at
``cursor.start`` and a way to ask for more of them. BufferCursor backs the
cursor with the whole input, StreamCursor with a buffer refilled from a
reader. Because both run this exact loop, identical bytes produce identical
chunks in either mode.

Size rules for each chunk, with ``offset`` the window start relative to the
chunk start:

1. the first window tested ends exactly ``min_size`` bytes into the chunk;
2. if the window end reaches the end of input, everything left is the final
   chunk (checksum 0);
3. if the window end reaches ``max_size``, the chunk is cut at ``max_size``
   (checksum 0);
4. if the window checksum satisfies the boundary test, the chunk ends with
   the window;
5. otherwise the window slides one byte.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, NamedTuple, Union

from robin_chunking.core.boundary import RollingWeightedSum, truncated_mod
from robin_chunking.core.config import ChunkerConfig

logger = logging.getLogger(__name__)


class Cut(NamedTuple):
    """A chunk boundary found by the scanner."""

    length: int
    checksum: int
    natural: bool  # False for max_size and end-of-input cuts


class ByteCursor(ABC):
    """
    Bytes available from the start of the pending chunk.

    ``buffer[start:]`` holds the bytes read so far that belong to the pending
    chunk or later ones.
    """

    buffer: Union[bytes, bytearray, memoryview]
    start: int = 0

    @abstractmethod
    def fill(self, needed: int) -> int:
        """
        Make ``needed`` bytes past ``start`` available if the input allows.

        Returns:
            Number of bytes available past ``start``. Less than ``needed``
            only once the input is exhausted.
        """
        raise NotImplementedError("Cursors must implement fill()")

    def view(self, length: int) -> Union[bytes, bytearray, memoryview]:
        """Bytes of the next ``length``-byte chunk."""
        return self.buffer[self.start:self.start + length]

    def advance(self, length: int) -> None:
        """Move the chunk start past an emitted chunk."""
        self.start += length


def iter_cuts(cursor: ByteCursor, config: ChunkerConfig) -> Iterator[Cut]:
    """
    Yield one Cut per chunk, in stream order.

    While the generator is suspended on a yield, the chunk's bytes are
    ``cursor.view(cut.length)``; the cursor moves past them when the
    generator resumes. Nothing is yielded for empty input.
    """
    window_size = config.window_size
    first_offset = config.min_size - window_size
    max_size = config.max_size
    avg_size = config.avg_size
    residue = config.residue
    rolling = RollingWeightedSum(config)

    available = cursor.fill(1)
    while available > 0:
        offset = first_offset
        checksum = None

        while True:
            end = offset + window_size

            if end >= available:
                available = cursor.fill(end + 1)
                if end >= available:
                    yield Cut(available, 0, False)
                    cursor.advance(available)
                    break

            if end >= max_size:
                yield Cut(max_size, 0, False)
                cursor.advance(max_size)
                break

            buffer = cursor.buffer
            base = cursor.start
            if checksum is None:
                checksum = rolling.reset(buffer[base + offset:base + end])

            if truncated_mod(checksum, avg_size) == residue:
                yield Cut(end, checksum, True)
                cursor.advance(end)
                break

            checksum = rolling.roll(buffer[base + offset], buffer[base + end])
            offset += 1

        available = cursor.fill(1)
