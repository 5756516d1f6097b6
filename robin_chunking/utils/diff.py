"""
Comparison of two independently produced chunk sets.

Typical use is deciding which chunks of a new version of a file must be
transferred when an older version is already stored.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from robin_chunking.core.base import ChunkSet

logger = logging.getLogger(__name__)


@dataclass
class ChunkSetDiff:
    """Result of comparing a base chunk set with a target chunk set."""

    base_chunks: int
    target_chunks: int
    positional_matches: List[int] = field(default_factory=list)  # same index, checksum and key
    reused_chunks: List[int] = field(default_factory=list)       # target chunks whose key is in base
    new_chunks: List[int] = field(default_factory=list)          # target chunks missing from base
    reused_bytes: int = 0
    new_bytes: int = 0

    @property
    def similarity(self) -> float:
        """Share of target bytes already present in base."""
        total = self.reused_bytes + self.new_bytes
        if total == 0:
            return 1.0
        return self.reused_bytes / total

    @property
    def identical(self) -> bool:
        return (self.base_chunks == self.target_chunks
                and len(self.positional_matches) == self.target_chunks)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["similarity"] = self.similarity
        result["identical"] = self.identical
        return result


def compare_chunk_sets(base: ChunkSet, target: ChunkSet) -> ChunkSetDiff:
    """
    Compare ``target`` against ``base`` chunk by chunk.

    Positional matches use ChunkSet.equal, so no digest is recomputed.
    Reuse is decided by key regardless of position.
    """
    diff = ChunkSetDiff(base_chunks=len(base), target_chunks=len(target))
    base_keys = set(base.keys())

    for i, record in enumerate(target):
        if base.equal(i, record.checksum, record.key):
            diff.positional_matches.append(i)

        if record.key in base_keys:
            diff.reused_chunks.append(i)
            diff.reused_bytes += record.size
        else:
            diff.new_chunks.append(i)
            diff.new_bytes += record.size

    logger.debug(
        f"Compared {len(base)} base chunks with {len(target)} target chunks: "
        f"{len(diff.reused_chunks)} reused, {len(diff.new_chunks)} new"
    )
    return diff
