"""Tests for write timeout parsing."""

import pytest

from storage_gateway.core.timeouts import parse_timeout
from storage_gateway.exceptions import BadInputError


class TestParseTimeout:
    def test_none_means_no_timeout(self):
        assert parse_timeout(None) is None

    def test_blank_means_no_timeout(self):
        assert parse_timeout("  ") is None

    def test_plain_seconds(self):
        assert parse_timeout("30") == 30.0

    def test_fractional_seconds(self):
        assert parse_timeout("1.5") == 1.5

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("500ms", 0.5), ("20s", 20.0), ("2m", 120.0), ("1h", 3600.0), ("10M", 600.0)],
    )
    def test_unit_suffixes(self, raw, expected):
        assert parse_timeout(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["abc", "10x", "-5", "1.2.3", "s"])
    def test_malformed_raises(self, raw):
        with pytest.raises(BadInputError, match="Invalid timeout"):
            parse_timeout(raw)

    def test_zero_raises(self):
        with pytest.raises(BadInputError, match="must be positive"):
            parse_timeout("0s")
