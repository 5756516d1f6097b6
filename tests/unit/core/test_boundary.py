"""
Tests for the window checksum and the boundary test.
"""

import random

import pytest

from robin_chunking.core.boundary import (
    RollingWeightedSum,
    is_boundary,
    truncated_mod,
    weighted_sum,
)
from robin_chunking.core.config import configure
from robin_chunking.core.digest import digest_key
from tests.conftest import reference_weighted_sum


class TestWeightedSum:
    """Test weighted_sum()."""

    def test_first_byte_weighted_highest(self, tiny_config):
        """Test the asymmetric weighting: window[0] * p^2 + window[1] * p^1."""
        assert weighted_sum(bytes([1, 0]), tiny_config) == 4
        assert weighted_sum(bytes([0, 1]), tiny_config) == 2
        assert weighted_sum(bytes([3, 5]), tiny_config) == 3 * 4 + 5 * 2

    def test_reference_config_values(self, reference_config):
        """Test single-byte contributions with the reference configuration."""
        window = bytearray(31)
        window[0] = 1
        assert weighted_sum(bytes(window), reference_config) == 3 ** 31
        window[0] = 0
        window[30] = 1
        assert weighted_sum(bytes(window), reference_config) == 3

    def test_all_ones_window(self, reference_config):
        """Test sum of p^1..p^31 for a window of 0x01 bytes."""
        expected = sum(3 ** i for i in range(1, 32))
        assert weighted_sum(b"\x01" * 31, reference_config) == expected

    def test_max_bytes_do_not_overflow_reference_config(self, reference_config):
        """Test that 0xFF windows stay exact with the reference configuration."""
        expected = 255 * sum(3 ** i for i in range(1, 32))
        assert expected < 2 ** 63
        assert weighted_sum(b"\xff" * 31, reference_config) == expected

    @pytest.mark.parametrize("prime", [3, 31, 257, 65537, 2 ** 61 - 1])
    def test_matches_stepwise_wraparound(self, prime):
        """Test agreement with a step-by-step 64-bit reference computation."""
        config = configure(prime=prime, min_size=64, max_size=1024, avg_size=512, window_size=48)
        rng = random.Random(prime)
        for _ in range(20):
            window = rng.randbytes(48)
            assert weighted_sum(window, config) == reference_weighted_sum(window, prime)

    def test_accepts_memoryview(self, reference_config):
        data = bytes(range(31))
        assert weighted_sum(memoryview(data), reference_config) == weighted_sum(data, reference_config)

    def test_wrong_window_length(self, reference_config):
        with pytest.raises(ValueError, match="window must be 31 bytes"):
            weighted_sum(b"short", reference_config)


class TestBoundaryTest:
    """Test is_boundary() and its truncating modulo."""

    def test_truncated_mod(self):
        """Test that the remainder takes the sign of the dividend."""
        assert truncated_mod(7, 5) == 2
        assert truncated_mod(-7, 5) == -2
        assert truncated_mod(7, -5) == 2
        assert truncated_mod(-10, 5) == 0
        assert -7 % 5 == 3  # Python's floor modulo differs

    def test_is_boundary(self, tiny_config):
        """Test checksum mod avg_size == residue."""
        assert is_boundary(2, tiny_config)
        assert is_boundary(12, tiny_config)
        assert not is_boundary(3, tiny_config)
        assert not is_boundary(0, tiny_config)

    def test_negative_checksums(self):
        """Test that negative checksums use truncated remainders."""
        config = configure(prime=3, min_size=64, max_size=256, avg_size=5, window_size=8)
        assert not is_boundary(-7, config)   # -7 mod 5 == -2, not 3
        assert is_boundary(8, config)

        negative_residue = configure(prime=3, min_size=64, max_size=256, avg_size=5,
                                     window_size=8, residue=-2)
        assert is_boundary(-7, negative_residue)
        assert not is_boundary(3, negative_residue)


class TestRollingWeightedSum:
    """Test the incremental checksum."""

    @pytest.mark.parametrize("prime", [2, 3, 257, 2 ** 40 + 15])
    def test_roll_matches_full_recompute(self, prime):
        """Test that every shifted checksum equals a full recomputation."""
        config = configure(prime=prime, min_size=64, max_size=1024, avg_size=512, window_size=31)
        data = random.Random(99).randbytes(2000)
        rolling = RollingWeightedSum(config)

        checksum = rolling.reset(data[0:31])
        assert checksum == weighted_sum(data[0:31], config)
        for offset in range(1, len(data) - 31):
            checksum = rolling.roll(data[offset - 1], data[offset + 30])
            assert checksum == weighted_sum(data[offset:offset + 31], config)

    def test_reset_discards_state(self, tiny_config):
        rolling = RollingWeightedSum(tiny_config)
        rolling.reset(b"\xff\xff")
        rolling.roll(255, 255)
        assert rolling.reset(b"\x00\x01") == 2
        assert rolling.value == 2


class TestDigestKey:
    """Test digest_key()."""

    def test_known_digest(self):
        assert digest_key(b"") == "d41d8cd98f00b204e9800998ecf8427e"
        assert digest_key(b"abc") == "900150983cd24fb0d6963f7d28e17f72"

    def test_stable_and_distinct(self, make_payload):
        data = make_payload(4096)
        assert digest_key(data) == digest_key(bytes(data))
        assert digest_key(data) != digest_key(data[:-1])
        assert len(digest_key(data)) == 32

    def test_memoryview_and_bytearray(self):
        data = b"content addressed"
        assert digest_key(memoryview(data)) == digest_key(data)
        assert digest_key(bytearray(data)) == digest_key(data)
