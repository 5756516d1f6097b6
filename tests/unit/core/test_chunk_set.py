"""
Tests for ChunkRecord and ChunkSet.
"""

import pytest

from robin_chunking.core.base import ChunkRecord, ChunkSet
from robin_chunking.core.bulk import chunk
from robin_chunking.core.digest import digest_key
from robin_chunking.core.exceptions import ChunkIndexError


def make_record(data: bytes, checksum: int = 0) -> ChunkRecord:
    return ChunkRecord(data, checksum, digest_key(data))


@pytest.fixture
def sample_set():
    return ChunkSet([
        make_record(b"first chunk", 1027),
        make_record(b"second chunk", 0),
        make_record(b"third", 2051),
    ])


class TestChunkRecord:
    """Test ChunkRecord."""

    def test_size(self):
        assert make_record(b"12345").size == 5

    def test_to_dict(self):
        record = make_record(b"\x00\xff", 3)
        assert record.to_dict() == {"key": digest_key(b"\x00\xff"), "checksum": 3, "size": 2,
                                    "natural": False}
        assert record.to_dict(include_data=True)["data"] == "00ff"

    def test_frozen(self):
        record = make_record(b"data")
        with pytest.raises(AttributeError):
            record.checksum = 5


class TestChunkSetAccess:
    """Test count, at, iteration and indexing."""

    def test_count(self, sample_set):
        assert sample_set.count() == 3
        assert len(sample_set) == 3
        assert ChunkSet().count() == 0

    def test_at(self, sample_set):
        assert sample_set.at(0).data == b"first chunk"
        assert sample_set.at(2).checksum == 2051
        assert sample_set[1].data == b"second chunk"

    def test_at_out_of_range(self, sample_set):
        """Test that at(count()) fails with an IndexError."""
        with pytest.raises(ChunkIndexError):
            sample_set.at(sample_set.count())
        with pytest.raises(IndexError):
            sample_set.at(100)
        with pytest.raises(ChunkIndexError):
            sample_set.at(-1)
        with pytest.raises(IndexError):
            ChunkSet().at(0)

    def test_iteration_order(self, sample_set):
        assert [record.data for record in sample_set] == [b"first chunk", b"second chunk", b"third"]

    def test_keys_and_total_size(self, sample_set):
        assert sample_set.keys() == [digest_key(b"first chunk"), digest_key(b"second chunk"),
                                     digest_key(b"third")]
        assert sample_set.total_size == 11 + 12 + 5

    def test_read_only(self, sample_set):
        assert not hasattr(sample_set, "append")
        with pytest.raises(TypeError):
            sample_set[0] = make_record(b"replacement")

    def test_to_dict(self, sample_set):
        data = sample_set.to_dict()
        assert data["total_chunks"] == 3
        assert data["total_size"] == 28
        assert data["chunks"][2]["checksum"] == 2051

    def test_equality(self, sample_set):
        same = ChunkSet(list(sample_set))
        assert same == sample_set
        assert ChunkSet(list(sample_set)[:2]) != sample_set


class TestChunkSetVisit:
    """Test visit()."""

    def test_visits_in_order(self, sample_set):
        seen = []
        sample_set.visit(lambda data, checksum, key: seen.append((data, checksum, key)))
        assert seen == [(r.data, r.checksum, r.key) for r in sample_set]

    def test_stops_on_first_error(self, sample_set):
        """Test that the visitor's exception stops the walk and propagates."""
        seen = []
        error = RuntimeError("stop here")

        def visitor(data, checksum, key):
            seen.append(data)
            if len(seen) == 2:
                raise error

        with pytest.raises(RuntimeError) as exc_info:
            sample_set.visit(visitor)
        assert exc_info.value is error
        assert seen == [b"first chunk", b"second chunk"]

    def test_empty_set(self):
        calls = []
        ChunkSet().visit(lambda *args: calls.append(args))
        assert calls == []

    def test_range_alias(self, sample_set):
        """Test that range() walks the chunks exactly like visit()."""
        assert ChunkSet.range is ChunkSet.visit
        seen = []
        sample_set.range(lambda data, checksum, key: seen.append(key))
        assert seen == sample_set.keys()


class TestChunkSetEqual:
    """Test equal()."""

    def test_matching(self, sample_set):
        record = sample_set.at(1)
        assert sample_set.equal(1, record.checksum, record.key)

    def test_wrong_checksum(self, sample_set):
        record = sample_set.at(0)
        assert not sample_set.equal(0, record.checksum + 1, record.key)

    def test_wrong_key(self, sample_set):
        record = sample_set.at(0)
        assert not sample_set.equal(0, record.checksum, digest_key(b"other"))

    def test_out_of_range(self, sample_set):
        record = sample_set.at(0)
        assert not sample_set.equal(3, record.checksum, record.key)
        assert not sample_set.equal(-1, record.checksum, record.key)

    def test_diff_two_chunk_sets(self, reference_config, make_payload):
        """Test comparing independently produced chunk sets without recomputing digests."""
        data = make_payload(50_000)
        first = chunk(data, reference_config)
        second = chunk(bytes(data), reference_config)
        assert all(second.equal(i, r.checksum, r.key) for i, r in enumerate(first))
