"""
Validation utilities for chunk sets.

Checks that a chunk set is consistent with the configuration that produced
it and, when the original input is available, that it reconstructs the input.
"""

import logging
from typing import List, Optional, Union

from robin_chunking.core.base import ChunkSet
from robin_chunking.core.boundary import is_boundary
from robin_chunking.core.config import ChunkerConfig
from robin_chunking.core.digest import digest_key

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised by ChunkSetValidator.validate_or_raise."""

    def __init__(self, issues: List[str]):
        self.issues = issues
        super().__init__(f"{len(issues)} validation issue(s): " + "; ".join(issues[:3]))


class ChunkSetValidator:
    """
    Validator for chunk sets.

    Checks performed:
    - every chunk but the last is within ``[min_size, max_size]``
    - natural boundaries carry a checksum that passes the boundary test
    - each key is the digest of its chunk's data
    - concatenated data equals the original input (when given)
    """

    def __init__(self, config: ChunkerConfig):
        """
        Initialize validator.

        Args:
            config: Configuration the chunk set was produced with
        """
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.ChunkSetValidator")

    def validate(
        self,
        chunk_set: ChunkSet,
        original: Optional[Union[bytes, bytearray, memoryview]] = None
    ) -> List[str]:
        """
        Validate a chunk set.

        Args:
            chunk_set: Chunk set to validate
            original: Input the chunk set was produced from

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []
        last_index = len(chunk_set) - 1

        for i, record in enumerate(chunk_set):
            if record.key != digest_key(record.data):
                issues.append(f"Chunk {i}: key does not match data digest")

            if i < last_index:
                if record.size < self.config.min_size:
                    issues.append(
                        f"Chunk {i}: size {record.size} below min_size {self.config.min_size}"
                    )
                if record.size > self.config.max_size:
                    issues.append(
                        f"Chunk {i}: size {record.size} above max_size {self.config.max_size}"
                    )

            if (record.natural or record.checksum) and not is_boundary(record.checksum, self.config):
                issues.append(f"Chunk {i}: checksum {record.checksum} is not a boundary value")

        if original is not None:
            total = chunk_set.total_size
            if total != len(original):
                issues.append(f"Total size mismatch: chunks={total}, original={len(original)}")
            elif b"".join(record.data for record in chunk_set) != bytes(original):
                issues.append("Concatenated chunk data does not reproduce the original")

        if issues:
            self.logger.debug(f"Validation found {len(issues)} issue(s)")
        return issues

    def validate_or_raise(
        self,
        chunk_set: ChunkSet,
        original: Optional[Union[bytes, bytearray, memoryview]] = None
    ) -> None:
        """Validate and raise ValidationError if any issue is found."""
        issues = self.validate(chunk_set, original)
        if issues:
            raise ValidationError(issues)
