"""
Unit tests for display formatting helpers.
"""

import pytest

from onyx_terminal.formatters import format_compact, format_pct, format_time, format_usd


class TestFormatUsd:
    """Test USD formatting."""

    @pytest.mark.parametrize("value,expected", [
        (65000, "$65,000.00"),
        (145.5, "$145.50"),
        (0.6, "$0.6000"),
        (0.1234, "$0.1234"),
        (None, "$-"),
    ])
    def test_format_usd(self, value, expected):
        assert format_usd(value) == expected


class TestFormatCompact:
    """Test compact number formatting."""

    @pytest.mark.parametrize("value,expected", [
        (1_230_000, "1.23M"),
        (1500, "1.5K"),
        (2_000_000_000, "2B"),
        (3.2e12, "3.2T"),
        (950, "950"),
        (12.5, "12.5"),
        (None, "0"),
    ])
    def test_format_compact(self, value, expected):
        assert format_compact(value) == expected

    def test_negative_values(self):
        assert format_compact(-2500) == "-2.5K"


class TestFormatTime:
    """Test timestamp formatting."""

    def test_utc_hours_minutes(self):
        assert format_time(0) == "00:00"
        assert format_time(3_660_000) == "01:01"


class TestFormatPct:
    """Test signed percent formatting."""

    def test_positive_has_plus(self):
        assert format_pct(1.234) == "+1.23%"

    def test_negative(self):
        assert format_pct(-0.5) == "-0.50%"

    def test_zero(self):
        assert format_pct(0.0, decimals=1) == "+0.0%"
