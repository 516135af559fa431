"""Tests for memocache.cache.sizing: size estimates and byte formatting."""

from datetime import datetime

import pytest

from memocache.cache.sizing import (
    ENTRY_OVERHEAD_BYTES,
    estimate_entry_size,
    estimate_size,
    format_bytes,
)


class TestEstimateSize:
    def test_json_length(self):
        assert estimate_size("abc") == len('"abc"')
        assert estimate_size({"a": 1}) == len('{"a": 1}')

    def test_utf8_multibyte(self):
        assert estimate_size("ã") == len('"\\u00e3"')

    def test_non_json_values_use_str(self):
        assert estimate_size(datetime(2024, 1, 1)) > 0

    def test_circular_value_falls_back(self):
        value: list = []
        value.append(value)
        assert estimate_size(value) > 0

    def test_entry_size_includes_key_and_overhead(self):
        assert estimate_entry_size("k", 1) == 1 + 1 + ENTRY_OVERHEAD_BYTES


class TestFormatBytes:
    @pytest.mark.parametrize(
        ("num_bytes", "expected"),
        [
            (0, "0 B"),
            (-5, "0 B"),
            (512, "512 B"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5 MB"),
            (3 * 1024**3, "3 GB"),
        ],
    )
    def test_formats(self, num_bytes, expected):
        assert format_bytes(num_bytes) == expected
