"""
Chunk records and the chunk set produced by bulk chunking.

A ChunkSet is built once, in stream order, by a single bulk chunking pass and
is read-only afterwards, so it can be shared between threads for reading.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple

from robin_chunking.core.exceptions import ChunkIndexError

logger = logging.getLogger(__name__)

ChunkVisitor = Callable[[bytes, int, str], Any]


@dataclass(frozen=True)
class ChunkRecord:
    """
    One chunk of the input.

    Attributes:
        data: Raw chunk bytes, owned by the record
        checksum: Window checksum at the natural boundary that ended the
            chunk, or 0 when the chunk was cut at max_size or at end of input
        key: Hex digest of ``data``
        natural: True when the chunk ended at a boundary found by the
            boundary test rather than at max_size or end of input. A natural
            boundary can have checksum 0 when the residue is a multiple of
            avg_size, so count boundaries with this flag, not the checksum.
    """

    data: bytes
    checksum: int
    key: str
    natural: bool = False

    @property
    def size(self) -> int:
        """Chunk length in bytes."""
        return len(self.data)

    def to_dict(self, include_data: bool = False) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary; data is emitted as hex when requested."""
        result = {
            "key": self.key,
            "checksum": self.checksum,
            "size": self.size,
            "natural": self.natural,
        }
        if include_data:
            result["data"] = self.data.hex()
        return result


class ChunkSet:
    """
    Ordered, read-only sequence of ChunkRecord.

    Examples:
        ```python
        chunk_set = chunk(payload, configure())
        for record in chunk_set:
            store.put(record.key, record.data)

        # chunk-by-chunk comparison with another chunk set
        same = all(
            other.equal(i, record.checksum, record.key)
            for i, record in enumerate(chunk_set)
        )
        ```
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[ChunkRecord] = ()):
        self._records: Tuple[ChunkRecord, ...] = tuple(records)

    def count(self) -> int:
        """Number of chunks."""
        return len(self._records)

    def at(self, index: int) -> ChunkRecord:
        """
        Return the chunk at ``index``.

        Raises:
            ChunkIndexError: If ``index`` is negative or ``>= count()``
        """
        if index < 0 or index >= len(self._records):
            raise ChunkIndexError(index, len(self._records))
        return self._records[index]

    def visit(self, visitor: ChunkVisitor) -> None:
        """
        Call ``visitor(data, checksum, key)`` for every chunk in order.

        The first exception raised by the visitor stops the walk and is
        propagated unchanged.
        """
        for record in self._records:
            visitor(record.data, record.checksum, record.key)

    # Name used by other implementations of this chunk set interface
    range = visit

    def equal(self, index: int, checksum: int, key: str) -> bool:
        """True when the chunk at ``index`` has exactly this checksum and key."""
        if index < 0 or index >= len(self._records):
            return False
        record = self._records[index]
        return record.checksum == checksum and record.key == key

    def keys(self) -> List[str]:
        """Chunk keys in stream order."""
        return [record.key for record in self._records]

    @property
    def total_size(self) -> int:
        """Sum of all chunk lengths."""
        return sum(record.size for record in self._records)

    def to_dict(self, include_data: bool = False) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "total_chunks": len(self._records),
            "total_size": self.total_size,
            "chunks": [record.to_dict(include_data) for record in self._records],
        }

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ChunkRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> ChunkRecord:
        return self.at(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChunkSet):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"ChunkSet(count={len(self._records)}, total_size={self.total_size})"
