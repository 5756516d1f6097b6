"""
Integration tests for bulk and streaming chunking of files.

Both modes must yield the same chunk sequence for the same bytes, across
configurations, read sizes and the kinds of content found in real files.
"""

import pytest

from robin_chunking import RobinChunker, compare_chunk_sets
from robin_chunking.core.bulk import chunk
from robin_chunking.core.config import configure
from robin_chunking.core.streaming import iter_stream
from robin_chunking.utils.validation import ChunkSetValidator

CONFIGS = {
    "reference": dict(prime=3, min_size=512, max_size=2048, avg_size=1024, window_size=31),
    "large": dict(prime=3, min_size=2048, max_size=16384, avg_size=4096, window_size=48),
    "wrapping": dict(prime=257, min_size=256, max_size=4096, avg_size=512, window_size=64, residue=17),
}


def text_payload(size: int) -> bytes:
    line = b"2026-01-01T00:00:00Z INFO request handled path=/api/v1/chunks status=200\n"
    return (line * (size // len(line) + 1))[:size]


@pytest.fixture(params=sorted(CONFIGS))
def config(request):
    return configure(**CONFIGS[request.param])


class TestFileChunking:
    """Test chunking files in both modes."""

    @pytest.mark.parametrize("read_size", [511, 4096, 65536])
    def test_random_file(self, config, make_payload, tmp_path, read_size):
        data = make_payload(300_000, seed=read_size)
        path = tmp_path / "random.bin"
        path.write_bytes(data)

        bulk = chunk(data, config)
        with open(path, "rb") as f:
            streamed = list(iter_stream(f, config, read_size=read_size))

        assert streamed == list(bulk)
        assert ChunkSetValidator(config).validate(bulk, data) == []

    def test_repetitive_text(self, config, tmp_path):
        """Test low-entropy content, where most cuts are forced at max_size."""
        data = text_payload(200_000)
        path = tmp_path / "log.txt"
        path.write_bytes(data)

        chunker = RobinChunker(config, read_size=3000)
        assert chunker.chunk_file(path, stream=True) == chunker.chunk_file(path, stream=False)

    def test_zero_filled(self, config, tmp_path):
        data = bytes(100_000)
        path = tmp_path / "zeros.bin"
        path.write_bytes(data)

        result = RobinChunker(config).chunk_file(path)
        assert all(record.checksum == 0 for record in result)
        assert all(record.size == config.max_size for record in list(result)[:-1])
        assert result == chunk(data, config)

    def test_mixed_content(self, config, make_payload, tmp_path):
        data = text_payload(50_000) + make_payload(50_000) + bytes(20_000) + make_payload(30_000, seed=2)
        path = tmp_path / "mixed.bin"
        path.write_bytes(data)

        chunker = RobinChunker(config, read_size=1234)
        streamed = chunker.chunk_file(path, stream=True)
        assert streamed == chunk(data, config)
        assert compare_chunk_sets(chunk(data, config), streamed).identical
