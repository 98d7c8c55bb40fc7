"""
Money Helper Tests

Run with: pytest backend/core_backend/tests/test_money.py -v
"""
from decimal import Decimal

import pytest

from core_backend.utils.money import currency_exponent, percent_of, quantize, to_decimal


class TestToDecimal:
    def test_floats_go_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_strings_and_ints(self):
        assert to_decimal(" 12.50 ") == Decimal("12.50")
        assert to_decimal(7) == Decimal("7")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", None])
    def test_invalid_values_rejected(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)


class TestQuantize:
    """Test banker's rounding to the currency's minor unit"""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            ("10.125", Decimal("10.12")),
            ("10.135", Decimal("10.14")),
            ("10.126", Decimal("10.13")),
            ("-10.125", Decimal("-10.12")),
        ],
    )
    def test_half_even(self, amount, expected):
        assert quantize("THB", amount) == expected

    def test_zero_decimal_currency(self):
        assert currency_exponent("jpy") == 0
        assert quantize("JPY", "102.5") == Decimal("102")

    def test_unknown_currency_uses_two_places(self):
        assert currency_exponent("XYZ") == 2

    def test_percent_of(self):
        assert percent_of("THB", "200", "7") == Decimal("14.00")
        assert percent_of("THB", "198", "7") == Decimal("13.86")
