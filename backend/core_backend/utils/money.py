"""
Monetary precision helpers.

All ledger amounts are Decimals quantized to the currency's minor unit with
banker's rounding (ROUND_HALF_EVEN). Floats never enter the ledger; values
coming from JSON or the cart are converted through str() first.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Union

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "THB": 2,  # Thai Baht (satang)
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "SGD": 2,
    "MYR": 2,
    # Zero-decimal currencies
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
}

Number = Union[Decimal, str, int, float]


def currency_exponent(currency: str) -> int:
    """
    Number of decimal places for a currency, 2 when unknown.

    >>> currency_exponent("THB")
    2
    >>> currency_exponent("JPY")
    0
    """
    return CURRENCY_EXPONENT.get((currency or "").upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    return Decimal(10) ** -currency_exponent(currency)


def to_decimal(amount: Number) -> Decimal:
    """
    Convert any numeric input to Decimal without float artefacts.

    Raises ValueError for values that are not finite numbers.
    """
    if isinstance(amount, Decimal):
        value = amount
    else:
        if isinstance(amount, float):
            amount = str(amount)
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError):
            raise ValueError(f"Not a valid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Not a valid amount: {amount!r}")
    return value


def quantize(currency: str, amount: Number) -> Decimal:
    """
    Round to currency decimals using banker's rounding.

    >>> quantize("THB", "10.125")
    Decimal('10.12')
    >>> quantize("THB", "10.135")
    Decimal('10.14')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def percent_of(currency: str, amount: Number, percentage: Number) -> Decimal:
    """
    Percentage of an amount, quantized.

    >>> percent_of("THB", "200", "7")
    Decimal('14.00')
    """
    return quantize(currency, to_decimal(amount) * to_decimal(percentage) / HUNDRED)
