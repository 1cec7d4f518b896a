"""Unit tests for token unit helpers."""

import pytest

from uniyield.vault.units import format_rate_bps, format_units, parse_units


class TestParseUnits:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("100.00", 100_000_000),
            ("100", 100_000_000),
            ("0.000001", 1),
            (" 1000.5 ", 1_000_500_000),
            ("0", 0),
        ],
    )
    def test_valid(self, amount, expected):
        assert parse_units(amount) == expected

    def test_custom_decimals(self):
        assert parse_units("1.5", 18) == 1_500_000_000_000_000_000

    def test_no_float_rounding(self):
        """0.1 + 0.2 style artifacts cannot appear."""
        assert parse_units("0.3") == 300_000

    @pytest.mark.parametrize("amount", ["", "abc", "-1", "NaN", "Infinity", "1,000"])
    def test_invalid(self, amount):
        with pytest.raises(ValueError, match="Invalid token amount"):
            parse_units(amount)

    def test_too_many_decimals(self):
        with pytest.raises(ValueError, match="decimal places"):
            parse_units("1.0000001")


class TestFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1_000_000_000, "1,000.000000"),
            (5, "0.000005"),
            (0, "0.000000"),
            (1_234_567_890_123, "1,234,567.890123"),
        ],
    )
    def test_format_units(self, value, expected):
        assert format_units(value) == expected

    def test_format_units_without_decimals(self):
        assert format_units(1234, 0) == "1,234"

    @pytest.mark.parametrize(("bps", "expected"), [(388, "3.88%"), (0, "0.00%"), (1000, "10.00%")])
    def test_format_rate_bps(self, bps, expected):
        assert format_rate_bps(bps) == expected
