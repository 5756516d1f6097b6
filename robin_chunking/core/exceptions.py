"""
Exception types raised by the chunking engine.

Errors raised by a streaming source or by a chunk handler are not listed here:
they propagate to the caller unchanged.
"""


class ChunkingError(Exception):
    """Base class for errors raised by robin_chunking."""
    pass


class ConfigError(ChunkingError, ValueError):
    """Invalid chunker construction parameters or configuration file."""
    pass


class WindowTooLargeError(ConfigError):
    """The boundary window does not fit inside the minimum chunk size."""

    def __init__(self, min_size: int, window_size: int):
        self.min_size = min_size
        self.window_size = window_size
        super().__init__(
            f"min_size ({min_size}) must be greater than window_size ({window_size})"
        )


class ChunkIndexError(ChunkingError, IndexError):
    """Out-of-range access on a ChunkSet."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"chunk index {index} out of range (count={count})")
