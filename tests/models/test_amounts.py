from decimal import Decimal

import pytest

from dealdesk.models import format_ils, parse_ils, to_decimal_or_zero


class TestToDecimalOrZero:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, Decimal(0)),
            ("", Decimal(0)),
            ("abc", Decimal(0)),
            ("12abc", Decimal(12)),
            ("  -3.5 ", Decimal("-3.5")),
            (".5", Decimal("0.5")),
            ("1e3", Decimal(1000)),
            ("1,000", Decimal(1)),
            (250, Decimal(250)),
            (0.1, Decimal("0.1")),
            (Decimal("7.25"), Decimal("7.25")),
        ],
    )
    def test_values(self, value, expected):
        assert to_decimal_or_zero(value) == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN"), True, [], {}])
    def test_unreadable_is_zero(self, value):
        assert to_decimal_or_zero(value) == 0


class TestFormatIls:
    def test_thousands(self):
        assert format_ils(Decimal("1234.5")) == "₪1,234.50"

    def test_negative(self):
        assert format_ils(-350000) == "-₪350,000.00"

    def test_zero(self):
        assert format_ils(0) == "₪0.00"

    def test_custom_symbol(self):
        assert format_ils("99.999", "$") == "$100.00"

    def test_garbage_is_zero(self):
        assert format_ils("n/a") == "₪0.00"


class TestParseIls:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1234", Decimal("1234")),
            ("1234.50", Decimal("1234.50")),
            ("1,234.50", Decimal("1234.50")),
            ("₪1,234", Decimal("1234")),
            (" ₪ 50 ", Decimal("50")),
            ("-20", Decimal("-20")),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_ils(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12abc", "NaN", "Infinity", "₪"])
    def test_invalid(self, text):
        assert parse_ils(text) is None


class TestOutOfRangeAmounts:
    @pytest.mark.parametrize(
        "value",
        ["1e999999999", "-9e9999999", "1e-999999999", Decimal("1E+999999"), Decimal("-1E+999990")],
    )
    def test_unrepresentable_exponent_is_zero(self, value):
        assert to_decimal_or_zero(value) == 0

    def test_exponent_far_beyond_any_context(self):
        assert to_decimal_or_zero("5e99999999999999999999") == 0

    def test_large_but_representable(self):
        assert to_decimal_or_zero("1e100") == Decimal("1e100")
        assert to_decimal_or_zero(1.5e308) == Decimal("1.5e308")

    def test_sum_of_largest_accepted_values_does_not_overflow(self):
        biggest = to_decimal_or_zero("9e999980")
        assert biggest != 0
        assert sum([biggest] * 1000, Decimal(0)) > 0

    def test_format_out_of_range(self):
        assert format_ils("1e999999999") == "₪0.00"

    def test_parse_out_of_range(self):
        assert parse_ils("1e999999999") is None
