"""
Order-level discounts.

Cashier input ("10%", "50", 50, {"type": "percent", "value": 10}) is parsed
once at the boundary into a PercentDiscount or FixedDiscount; the rest of the
ledger never sees the raw string.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union
import logging

from core_backend.exceptions import LedgerValidationError
from core_backend.utils.money import HUNDRED, ZERO, quantize, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PercentDiscount:
    percent: Decimal

    kind = "percent"

    def amount(self, subtotal: Decimal, currency: str) -> Decimal:
        return quantize(currency, subtotal * self.percent / HUNDRED)

    def __str__(self):
        return f"{self.percent.normalize():f}%"


@dataclass(frozen=True)
class FixedDiscount:
    value: Decimal

    kind = "fixed"

    def amount(self, subtotal: Decimal, currency: str) -> Decimal:
        return quantize(currency, self.value)

    def __str__(self):
        return f"{self.value.normalize():f}"


Discount = Union[PercentDiscount, FixedDiscount]


def parse_discount(raw) -> Optional[Discount]:
    """
    Parse cashier discount input. Empty input means no discount.

    Raises LedgerValidationError for input that is not a number or percentage.
    """
    if raw is None or isinstance(raw, (PercentDiscount, FixedDiscount)):
        return raw

    try:
        if isinstance(raw, dict):
            kind = raw.get("type")
            value = to_decimal(raw.get("value"))
            if kind == PercentDiscount.kind:
                return PercentDiscount(value)
            if kind == FixedDiscount.kind:
                return FixedDiscount(value)
            raise ValueError(f"Unknown discount type {kind!r}")

        text = str(raw).strip()
        if not text:
            return None
        if text.endswith("%"):
            return PercentDiscount(to_decimal(text[:-1]))
        return FixedDiscount(to_decimal(text))
    except (TypeError, ValueError) as e:
        raise LedgerValidationError(
            f"Invalid discount {raw!r}. Use an amount (e.g. 50) or a percentage (e.g. 10%).",
            details={"discount": str(raw), "error": str(e)},
        )


def clamp_discount(discount: Optional[Discount], subtotal: Decimal) -> Tuple[Optional[Discount], Optional[str]]:
    """
    Keep a discount within [0, subtotal].

    Returns the corrected discount and a warning message when a correction
    was made. Percentages are capped at 100%, fixed amounts at the subtotal.
    """
    if discount is None:
        return None, None

    if isinstance(discount, PercentDiscount):
        if discount.percent > HUNDRED:
            return PercentDiscount(HUNDRED), f"Discount {discount} exceeds 100%; corrected to 100%."
        if discount.percent < 0:
            return PercentDiscount(ZERO), f"Discount {discount} is negative; corrected to 0%."
        return discount, None

    if discount.value > subtotal:
        return FixedDiscount(subtotal), f"Discount {discount} exceeds the subtotal; corrected to {subtotal}."
    if discount.value < 0:
        return FixedDiscount(ZERO), f"Discount {discount} is negative; corrected to 0."
    return discount, None
