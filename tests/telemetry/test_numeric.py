"""Tests for runwatch.telemetry.numeric – lenient number coercion."""

import math

import pytest

from runwatch.telemetry.numeric import normalize_ts_ms, to_number


class TestToNumber:

    @pytest.mark.parametrize("value", [0, 1, -3, 2.5, 1e-9, 123456789.125])
    def test_finite_numbers_pass_through(self, value):
        assert to_number(value) == value

    @pytest.mark.parametrize("value", [0.1, -42.75, 1700000000000.0, 3.14159, 1e21])
    def test_string_form_round_trips(self, value):
        assert to_number(str(value)) == value
        assert to_number(repr(value)) == value

    def test_string_with_whitespace(self):
        assert to_number("  12.5 ") == 12.5

    @pytest.mark.parametrize(
        "value",
        ["NaN", "nan", "Infinity", "-Infinity", "inf", "", "   ", "12abc", "1,5", "1_000"],
    )
    def test_rejects_unparseable_or_non_finite_strings(self, value):
        assert to_number(value) is None

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite_floats(self, value):
        assert to_number(value) is None

    @pytest.mark.parametrize("value", [None, {}, [], [1], object(), True, False, b"1"])
    def test_rejects_other_types(self, value):
        assert to_number(value) is None

    def test_huge_int_overflow_is_absent(self):
        assert to_number(10 ** 400) is None


class TestNormalizeTs:

    def test_milliseconds_are_unchanged(self):
        assert normalize_ts_ms(1700000000000) == 1700000000000

    def test_seconds_are_scaled(self):
        assert normalize_ts_ms(1700000000) == 1700000000000

    def test_idempotent(self):
        once = normalize_ts_ms(1700000000)
        assert normalize_ts_ms(once) == once

    def test_fractional_seconds(self):
        assert normalize_ts_ms(1700000000.5) == 1700000000500

    def test_threshold_boundary(self):
        assert normalize_ts_ms(9_999_999_999) == 9_999_999_999_000
        assert normalize_ts_ms(10_000_000_000) == 10_000_000_000

    def test_returns_int(self):
        assert isinstance(normalize_ts_ms(1700000000.0), int)
