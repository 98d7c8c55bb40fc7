from datetime import date
from typing import Iterable, Optional
import logging

from django.db import transaction
from django.utils import timezone

from core_backend.audit import AuditLog, ledger_operation
from core_backend.exceptions import (
    InvalidTransitionError,
    LedgerValidationError,
    OrderNotFoundError,
)
from core_backend.utils.money import quantize
from orders.calculators import OrderCalculator, build_cart_lines
from orders.discounts import parse_discount
from orders.models import REVERSAL_PREFIX, Order, OrderItem
from reports.services import DailySummaryService
from settings.config import app_settings
from shifts.services import CashDrawerService, ShiftService
from sync.models import SyncRun
from sync.services import OrderSyncService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order ledger: placement, kitchen lifecycle, completion and cancellation.

    Every write runs in one transaction with the OPEN shift row locked, so the
    order, its drawer activity and the daily summary commit together or not
    at all.
    """

    # Forward-only kitchen lifecycle. Cancellation has its own path.
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.COOKING: [Order.OrderStatus.READY, Order.OrderStatus.COMPLETED],
        Order.OrderStatus.READY: [Order.OrderStatus.COMPLETED],
        Order.OrderStatus.COMPLETED: [],
        Order.OrderStatus.CANCELLED: [],
    }

    @staticmethod
    def get_order(order_id: str, for_update: bool = False) -> Order:
        qs = Order.objects.all()
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=order_id)
        except Order.DoesNotExist:
            raise OrderNotFoundError(f"Order {order_id} does not exist.", details={"order_id": order_id})

    @staticmethod
    def allocate_order_id(day: date) -> str:
        """
        Next day-scoped id, e.g. "20261019-0007".

        Must be called inside the placing transaction while the OPEN shift is
        locked, otherwise two placements could read the same count.
        """
        prefix = f"{day:%Y%m%d}-"
        issued = Order.objects.filter(id__startswith=prefix).count()
        return f"{prefix}{issued + 1:04d}"

    @staticmethod
    @ledger_operation("place_order")
    def place_order(
        cart: Iterable,
        payment_method: str,
        cash_received=None,
        discount=None,
        vat_enabled: Optional[bool] = None,
    ) -> Order:
        """
        Place and pay for an order in the open shift.

        Args:
            cart: CartLine instances or dicts with name, price, quantity and optional menu_item_id.
                  Never modified, so the caller can retry with the same cart.
            payment_method: "cash" or "qr"
            cash_received: cash handed over by the customer (cash payments)
            discount: "10%", "50", a number or a parsed PercentDiscount/FixedDiscount
            vat_enabled: overrides the store default for this order
        """
        lines = build_cart_lines(cart)
        if payment_method not in Order.PaymentMethod.values:
            raise LedgerValidationError(
                f"'{payment_method}' is not a valid payment method.",
                details={"payment_method": payment_method},
            )
        parsed_discount = parse_discount(discount)
        currency = app_settings.currency
        if cash_received is not None:
            try:
                cash_received = quantize(currency, cash_received)
            except (TypeError, ValueError):
                raise LedgerValidationError("cash_received must be a number.")

        with transaction.atomic():
            shift = ShiftService.require_open_shift(for_update=True)

            totals = OrderCalculator(lines, discount=parsed_discount, vat_enabled=vat_enabled).calculate_totals()

            if payment_method == Order.PaymentMethod.CASH:
                if cash_received is None:
                    cash_received = totals.total
                elif cash_received < totals.total:
                    raise LedgerValidationError(
                        f"Cash received {cash_received} is less than the total {totals.total}.",
                        details={"cash_received": cash_received, "total": totals.total},
                    )

            now = timezone.now()
            order = Order(
                id=OrderService.allocate_order_id(timezone.localdate(now)),
                shift=shift,
                timestamp=now,
                subtotal=totals.subtotal,
                discount_value=totals.discount_value,
                service_charge_value=totals.service_charge_value,
                tax=totals.tax,
                total=totals.total,
                vat_rate=totals.vat_rate,
                payment_method=payment_method,
                cash_received=cash_received,
                status=Order.OrderStatus.COOKING,
                sync_status=Order.SyncStatus.PENDING,
            )
            order.save(force_insert=True)
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        menu_item_id=line.menu_item_id,
                        name=line.name,
                        price=line.price,
                        quantity=line.quantity,
                    )
                    for line in lines
                ]
            )

            CashDrawerService.record_sale(shift, order)
            DailySummaryService.record_sale(order)
            OrderSyncService.schedule_sync(SyncRun.Trigger.ORDER_PLACED)

        logger.info(f"Order {order.id} placed: {order.total} ({order.payment_method}) in shift {shift.id}")
        details = {"total": order.total, "payment_method": order.payment_method}
        if totals.discount is not None:
            details["discount"] = str(totals.discount)
        if totals.warnings:
            details["warnings"] = list(totals.warnings)
            AuditLog.warn(totals.warnings[0], details={"discount": str(discount)}, order_id=order.id)
        AuditLog.action("Order placed", details=details, order_id=order.id, shift_id=shift.id)
        return order

    @staticmethod
    @ledger_operation("advance_status")
    def advance_status(order_id: str, new_status: str) -> Order:
        """
        Move an order forward in the kitchen lifecycle (cooking -> ready -> completed).
        Setting the status it already has is a no-op.
        """
        if new_status not in Order.OrderStatus.values:
            raise LedgerValidationError(
                f"'{new_status}' is not a valid order status.", details={"order_id": order_id}
            )
        with transaction.atomic():
            shift = ShiftService.get_current_shift(for_update=True)
            order = OrderService.get_order(order_id, for_update=True)
            if order.status == new_status:
                return order
            if new_status == Order.OrderStatus.COMPLETED:
                return OrderService._complete(order, shift)
            if new_status not in OrderService.VALID_STATUS_TRANSITIONS.get(order.status, []):
                raise InvalidTransitionError(
                    f"Cannot move order {order.id} from {order.status} to {new_status}.",
                    details={"order_id": order.id, "from": order.status, "to": new_status},
                )
            order.status = new_status
            order.save(update_fields=["status"])

        logger.info(f"Order {order.id} is now {new_status}")
        return order

    @staticmethod
    @ledger_operation("complete_order")
    def complete_order(order_id: str) -> Order:
        """
        Mark an order completed and record its preparation time.

        Orders placed before the drawer ledger existed have no SALE activity;
        one is appended to the open shift here so the sale is counted once.
        """
        with transaction.atomic():
            shift = ShiftService.get_current_shift(for_update=True)
            order = OrderService.get_order(order_id, for_update=True)
            return OrderService._complete(order, shift)

    @staticmethod
    def _complete(order: Order, shift) -> Order:
        """Complete a locked order. `shift` is the locked open shift, if any."""
        if order.is_reversal or (
            Order.OrderStatus.COMPLETED not in OrderService.VALID_STATUS_TRANSITIONS.get(order.status, [])
        ):
            raise InvalidTransitionError(
                f"Order {order.id} is {order.status} and cannot be completed.",
                details={"order_id": order.id, "status": order.status},
            )

        now = timezone.now()
        order.status = Order.OrderStatus.COMPLETED
        order.ready_at = now
        order.preparation_time_seconds = max(0, int((now - order.timestamp).total_seconds()))
        order.save(update_fields=["status", "ready_at", "preparation_time_seconds"])

        backfilled = False
        if not CashDrawerService.has_sale_activity(order):
            if shift is not None:
                CashDrawerService.record_sale(shift, order)
                DailySummaryService.record_sale(order)
                backfilled = True
            else:
                logger.warning(f"Order {order.id} has no SALE activity and no shift is open to record it")

        OrderSyncService.schedule_sync(SyncRun.Trigger.ORDER_COMPLETED)

        logger.info(
            f"Order {order.id} completed after {order.preparation_time_seconds}s"
            + (" (sale recorded retroactively)" if backfilled else "")
        )
        AuditLog.action(
            "Order completed",
            details={"preparation_time_seconds": order.preparation_time_seconds, "sale_backfilled": backfilled},
            order_id=order.id,
        )
        return order

    @staticmethod
    @ledger_operation("cancel_order")
    def cancel_order(order_id: str) -> Order:
        """
        Cancel a completed order by reversal.

        The original is kept and marked cancelled; a reversal order
        "R-<id>" with every quantity and amount negated is inserted and the
        refund is recorded in the open shift's drawer. Returns the reversal.
        """
        with transaction.atomic():
            shift = ShiftService.require_open_shift(for_update=True)
            order = OrderService.get_order(order_id, for_update=True)

            if order.is_reversal:
                raise InvalidTransitionError(
                    f"Order {order.id} is a reversal and cannot be cancelled.", details={"order_id": order.id}
                )
            if order.status != Order.OrderStatus.COMPLETED:
                raise InvalidTransitionError(
                    f"Only completed orders can be cancelled; order {order.id} is {order.status}.",
                    details={"order_id": order.id, "status": order.status},
                )
            if order.total <= 0:
                raise InvalidTransitionError(
                    f"Order {order.id} has no positive total to refund.",
                    details={"order_id": order.id, "total": order.total},
                )

            now = timezone.now()
            order.status = Order.OrderStatus.CANCELLED
            order.cancelled_at = now
            order.save(update_fields=["status", "cancelled_at"])

            reversal = Order(
                id=f"{REVERSAL_PREFIX}{order.id}",
                shift=shift,
                timestamp=now,
                subtotal=-order.subtotal,
                discount_value=-order.discount_value,
                service_charge_value=-order.service_charge_value,
                tax=-order.tax,
                total=-order.total,
                vat_rate=order.vat_rate,
                payment_method=order.payment_method,
                cash_received=None,
                status=Order.OrderStatus.COMPLETED,
                sync_status=Order.SyncStatus.PENDING,
                reversal_of=order,
            )
            reversal.save(force_insert=True)
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=reversal,
                        menu_item_id=item.menu_item_id,
                        name=item.name,
                        price=item.price,
                        quantity=-item.quantity,
                    )
                    for item in order.items.all()
                ]
            )

            CashDrawerService.record_refund(shift, order)
            DailySummaryService.record_cancellation(order)
            OrderSyncService.schedule_sync(SyncRun.Trigger.ORDER_CANCELLED)

        logger.info(f"Order {order.id} cancelled by reversal {reversal.id} ({order.total} refunded, {order.payment_method})")
        AuditLog.action(
            "Order cancelled",
            details={"reversal_id": reversal.id, "refund": order.total, "payment_method": order.payment_method},
            order_id=order.id,
            shift_id=shift.id,
        )
        return reversal
