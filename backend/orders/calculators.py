"""
Order financial calculator.

A pure pipeline from cart lines to the order's money fields:

    subtotal
    - discount              (clamped to [0, subtotal])
    = discounted subtotal
    + service charge        (percent of discounted subtotal, if enabled)
    + VAT                   (percent of discounted subtotal + service charge, if enabled)
    = total                 (never negative)

Every component is quantized before it is summed, so
total == max(0, subtotal - discount + service charge + tax) holds exactly.

Usage:
    from orders.calculators import OrderCalculator
    totals = OrderCalculator(lines, discount=parse_discount("10%"), vat_enabled=True).calculate_totals()
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
import logging

from core_backend.exceptions import EmptyCartError, LedgerValidationError
from core_backend.utils.money import ZERO, percent_of, quantize, to_decimal
from settings.config import app_settings
from .discounts import Discount, clamp_discount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    name: str
    price: Decimal
    quantity: int
    menu_item_id: str = ""

    @property
    def total_price(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount_value: Decimal
    service_charge_value: Decimal
    tax: Decimal
    total: Decimal
    vat_rate: Decimal
    discount: Optional[Discount] = None
    warnings: Tuple[str, ...] = field(default_factory=tuple)


def build_cart_lines(cart: Iterable) -> List[CartLine]:
    """
    Copy cart input (CartLine instances or dicts) into validated CartLines.
    The caller's cart is left untouched so it can be retried.
    """
    lines = []
    for index, raw in enumerate(cart or []):
        if isinstance(raw, CartLine):
            raw = {
                "name": raw.name,
                "price": raw.price,
                "quantity": raw.quantity,
                "menu_item_id": raw.menu_item_id,
            }
        try:
            name = str(raw["name"]).strip()
            price = to_decimal(raw["price"])
            quantity = raw.get("quantity", 1)
            if isinstance(quantity, bool) or int(quantity) != quantity:
                raise ValueError("quantity must be a whole number")
            quantity = int(quantity)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise LedgerValidationError(
                f"Cart line {index + 1} is invalid: {e}", details={"line": index + 1}
            )
        if not name:
            raise LedgerValidationError(f"Cart line {index + 1} has no name.", details={"line": index + 1})
        if price < 0:
            raise LedgerValidationError(
                f"Cart line {index + 1} has a negative price.", details={"line": index + 1}
            )
        if quantity < 1:
            raise LedgerValidationError(
                f"Cart line {index + 1} must have a quantity of at least 1.", details={"line": index + 1}
            )
        menu_item_id = raw.get("menu_item_id") or raw.get("id") or ""
        lines.append(CartLine(name=name, price=price, quantity=quantity, menu_item_id=str(menu_item_id)))

    if not lines:
        raise EmptyCartError("Cannot place an order with an empty cart.")
    return lines


class OrderCalculator:
    """
    Calculates the money fields of an order from its lines.

    Rates default to the store settings; pass them explicitly to preview an
    order under different settings.
    """

    def __init__(
        self,
        lines: List[CartLine],
        discount: Optional[Discount] = None,
        vat_enabled: Optional[bool] = None,
        vat_rate_percent: Optional[Decimal] = None,
        service_charge_enabled: Optional[bool] = None,
        service_charge_rate_percent: Optional[Decimal] = None,
        currency: Optional[str] = None,
    ):
        self.lines = lines
        self.discount = discount
        self.vat_enabled = app_settings.vat_enabled_by_default if vat_enabled is None else vat_enabled
        self.vat_rate_percent = (
            app_settings.vat_rate_percent if vat_rate_percent is None else to_decimal(vat_rate_percent)
        )
        self.service_charge_enabled = (
            app_settings.service_charge_enabled if service_charge_enabled is None else service_charge_enabled
        )
        self.service_charge_rate_percent = (
            app_settings.service_charge_rate_percent
            if service_charge_rate_percent is None
            else to_decimal(service_charge_rate_percent)
        )
        self.currency = currency or app_settings.currency

    def calculate_subtotal(self) -> Decimal:
        return quantize(self.currency, sum((line.total_price for line in self.lines), ZERO))

    def calculate_totals(self) -> OrderTotals:
        subtotal = self.calculate_subtotal()

        discount, warning = clamp_discount(self.discount, subtotal)
        warnings = ()
        if warning:
            logger.warning(warning)
            warnings = (warning,)
        discount_value = discount.amount(subtotal, self.currency) if discount else ZERO
        # A percentage can round a hair above the subtotal
        discount_value = min(discount_value, subtotal)
        discounted_subtotal = subtotal - discount_value

        service_charge_value = ZERO
        if self.service_charge_enabled:
            service_charge_value = percent_of(self.currency, discounted_subtotal, self.service_charge_rate_percent)

        vat_rate = self.vat_rate_percent if self.vat_enabled else ZERO
        tax = percent_of(self.currency, discounted_subtotal + service_charge_value, vat_rate)

        total = max(ZERO, subtotal - discount_value + service_charge_value + tax)

        return OrderTotals(
            subtotal=subtotal,
            discount_value=quantize(self.currency, discount_value),
            service_charge_value=quantize(self.currency, service_charge_value),
            tax=quantize(self.currency, tax),
            total=quantize(self.currency, total),
            vat_rate=vat_rate,
            discount=discount,
            warnings=warnings,
        )
