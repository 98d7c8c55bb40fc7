"""
Order Ledger Tests

Tests placing, advancing, completing and cancelling orders, and that every
ledger write commits the order, its drawer activity and the daily summary
together or not at all.

Run with: pytest backend/orders/tests/test_order_ledger.py -v
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone

from core_backend.exceptions import (
    EmptyCartError,
    InvalidTransitionError,
    InvariantViolation,
    LedgerValidationError,
    NoOpenShiftError,
    OrderNotFoundError,
    StorageError,
)
from core_backend.models import SystemLog
from orders.models import Order, OrderItem
from orders.services import OrderService
from reports.models import DailySummary
from shifts.models import CashDrawerActivity
from shifts.services import ShiftService


# ============================================================================
# PLACING ORDERS
# ============================================================================

@pytest.mark.django_db
class TestPlaceOrder:
    """Test placing and paying for orders"""

    def test_place_cash_order(self, open_shift, cart):
        """
        CRITICAL: A placed order is cooking, pending sync, and has exactly
        one SALE activity in the open shift.
        """
        order = OrderService.place_order(cart, "cash", cash_received=Decimal("250"))

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.COOKING
        assert order.sync_status == Order.SyncStatus.PENDING
        assert order.shift_id == open_shift.id
        assert order.subtotal == Decimal("200.00")
        assert order.total == Decimal("200.00")
        assert order.cash_received == Decimal("250.00")
        assert order.change_due == Decimal("50.00")
        assert order.items.count() == 2

        sales = CashDrawerActivity.objects.filter(order=order, type=CashDrawerActivity.ActivityType.SALE)
        assert sales.count() == 1
        assert sales.get().amount == Decimal("200.00")
        assert sales.get().payment_method == "cash"

    def test_cart_not_modified(self, open_shift, cart):
        snapshot = [dict(line) for line in cart]
        OrderService.place_order(cart, "qr")
        assert cart == snapshot

    def test_order_ids_are_sequential_per_day(self, place_order):
        """
        IMPORTANT: Ids are day-scoped and strictly increasing.

        Value: YYYYMMDD-0001, YYYYMMDD-0002, YYYYMMDD-0003
        """
        ids = [place_order(Decimal("10.00")).id for _ in range(3)]

        prefix = f"{timezone.localdate():%Y%m%d}-"
        assert ids == [f"{prefix}0001", f"{prefix}0002", f"{prefix}0003"]

    def test_cash_received_defaults_to_total(self, place_order):
        order = place_order(Decimal("75.50"), "cash")
        assert order.cash_received == Decimal("75.50")
        assert order.change_due == Decimal("0.00")

    def test_qr_order_has_no_cash_received(self, place_order):
        order = place_order(Decimal("75.50"), "qr")
        assert order.cash_received is None
        assert order.change_due is None

    def test_insufficient_cash_rejected(self, place_order):
        with pytest.raises(LedgerValidationError):
            place_order(Decimal("100.00"), "cash", cash_received=Decimal("50"))

        assert Order.objects.count() == 0

    def test_empty_cart_rejected(self, open_shift):
        with pytest.raises(EmptyCartError):
            OrderService.place_order([], "cash")

        assert Order.objects.count() == 0

    def test_invalid_payment_method_rejected(self, open_shift, cart):
        with pytest.raises(LedgerValidationError):
            OrderService.place_order(cart, "card")

    def test_no_open_shift_rejected(self, store_settings, cart):
        """
        CRITICAL: Orders can only be placed while a shift is open.
        The rejection is audited.
        """
        with pytest.raises(NoOpenShiftError):
            OrderService.place_order(cart, "cash")

        assert Order.objects.count() == 0
        assert SystemLog.objects.filter(
            type=SystemLog.LogType.ERROR, message__startswith="place_order rejected"
        ).exists()

    def test_vat_and_service_charge_from_settings(self, store_settings, open_shift, cart):
        store_settings.vat_enabled_by_default = True
        store_settings.service_charge_enabled = True
        store_settings.save()

        order = OrderService.place_order(cart, "qr")

        assert order.service_charge_value == Decimal("20.00")
        assert order.tax == Decimal("15.40")
        assert order.total == Decimal("235.40")
        assert order.vat_rate == Decimal("7.00")

    def test_vat_override_per_order(self, store_settings, open_shift, cart):
        order = OrderService.place_order(cart, "qr", vat_enabled=True)
        assert order.tax == Decimal("14.00")
        assert order.total == Decimal("214.00")

    def test_oversized_discount_is_clamped_and_audited(self, open_shift, cart):
        """
        Scenario: subtotal 200 with discount "150%"
        Value: discount 200, total 0, a WARN audit entry for the correction
        """
        order = OrderService.place_order(cart, "qr", discount="150%")

        assert order.discount_value == Decimal("200.00")
        assert order.total == Decimal("0.00")
        assert SystemLog.objects.filter(level=SystemLog.Level.WARN, order_id=order.id).exists()

    def test_invalid_discount_rejected(self, open_shift, cart):
        with pytest.raises(LedgerValidationError):
            OrderService.place_order(cart, "cash", discount="lots")

    def test_storage_failure_rolls_back_everything(self, open_shift, cart):
        """
        CRITICAL: A failure after the order row is written leaves no order,
        no items and no SALE activity behind.
        """
        with patch(
            "orders.services.order_service.DailySummaryService.record_sale",
            side_effect=DatabaseError("disk I/O error"),
        ):
            with pytest.raises(StorageError):
                OrderService.place_order(cart, "cash")

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
        assert not CashDrawerActivity.objects.filter(type=CashDrawerActivity.ActivityType.SALE).exists()
        assert SystemLog.objects.filter(
            type=SystemLog.LogType.ERROR, level=SystemLog.Level.CRITICAL
        ).exists()


# ============================================================================
# STATUS LIFECYCLE
# ============================================================================

@pytest.mark.django_db
class TestOrderLifecycle:
    """Test advancing and completing orders"""

    def test_advance_cooking_to_ready(self, place_order):
        order = place_order(Decimal("50.00"))

        order = OrderService.advance_status(order.id, Order.OrderStatus.READY)

        assert order.status == Order.OrderStatus.READY

    def test_advance_to_same_status_is_noop(self, place_order):
        order = place_order(Decimal("50.00"))
        OrderService.advance_status(order.id, Order.OrderStatus.READY)

        order = OrderService.advance_status(order.id, Order.OrderStatus.READY)

        assert order.status == Order.OrderStatus.READY

    def test_cannot_move_backwards(self, place_order):
        order = place_order(Decimal("50.00"))
        OrderService.advance_status(order.id, Order.OrderStatus.READY)

        with pytest.raises(InvalidTransitionError):
            OrderService.advance_status(order.id, Order.OrderStatus.COOKING)

    def test_cannot_advance_to_cancelled(self, place_order):
        order = place_order(Decimal("50.00"))
        with pytest.raises(InvalidTransitionError):
            OrderService.advance_status(order.id, Order.OrderStatus.CANCELLED)

    def test_unknown_status_rejected(self, place_order):
        order = place_order(Decimal("50.00"))
        with pytest.raises(LedgerValidationError):
            OrderService.advance_status(order.id, "served")

    def test_complete_records_preparation_time(self, place_order):
        order = place_order(Decimal("50.00"))

        order = OrderService.complete_order(order.id)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.COMPLETED
        assert order.ready_at is not None
        assert order.preparation_time_seconds >= 0

    def test_advance_to_completed_completes(self, place_order):
        order = place_order(Decimal("50.00"))
        order = OrderService.advance_status(order.id, Order.OrderStatus.COMPLETED)
        assert order.ready_at is not None

    def test_complete_does_not_double_count_sale(self, place_order):
        """
        CRITICAL: Completion must not add a second SALE for an order that
        already has one.
        """
        order = place_order(Decimal("50.00"))
        OrderService.complete_order(order.id)

        assert CashDrawerActivity.objects.filter(
            order_id=order.id, type=CashDrawerActivity.ActivityType.SALE
        ).count() == 1
        assert DailySummary.objects.get(date=timezone.localdate()).transaction_count == 1

    def test_complete_backfills_missing_sale(self, open_shift):
        """
        Scenario: an order with no SALE activity (placed before the drawer
        ledger existed) is completed while a shift is open
        Value: one SALE appended to the open shift and counted in the daily summary
        """
        order = Order.objects.create(
            id="legacy-0001", total=Decimal("45.00"), subtotal=Decimal("45.00"), payment_method="cash"
        )

        OrderService.complete_order(order.id)

        sale = CashDrawerActivity.objects.get(order=order, type=CashDrawerActivity.ActivityType.SALE)
        assert sale.shift_id == open_shift.id
        assert sale.amount == Decimal("45.00")
        assert DailySummary.objects.get(date=timezone.localdate()).total_sales == Decimal("45.00")

    def test_complete_twice_rejected(self, completed_order):
        with pytest.raises(InvalidTransitionError):
            OrderService.complete_order(completed_order.id)

    def test_unknown_order(self, open_shift):
        with pytest.raises(OrderNotFoundError):
            OrderService.complete_order("19990101-0001")

    def test_backfill_failure_rolls_back_completion(self, open_shift):
        """
        CRITICAL: The status change and the retroactive SALE are one unit;
        if the daily summary cannot be written the order stays as it was.
        """
        order = Order.objects.create(
            id="legacy-0002", total=Decimal("45.00"), subtotal=Decimal("45.00"), payment_method="cash"
        )

        with patch(
            "orders.services.order_service.DailySummaryService.record_sale",
            side_effect=DatabaseError("disk I/O error"),
        ):
            with pytest.raises(StorageError):
                OrderService.complete_order(order.id)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.COOKING
        assert order.ready_at is None
        assert not CashDrawerActivity.objects.filter(order=order).exists()
        assert not DailySummary.objects.exists()


# ============================================================================
# CANCELLATION BY REVERSAL
# ============================================================================

@pytest.mark.django_db
class TestCancelOrder:
    """Test cancelling completed orders with a reversal order"""

    def test_cancel_creates_reversal(self, completed_order, open_shift):
        """
        CRITICAL: Cancelling keeps the original, marks it cancelled and adds
        a negated reversal "R-<id>" plus a REFUND of the original total.

        Scenario: completed cash order O1 with total 100.00
        Value: O1 cancelled; R-O1 total -100.00; REFUND 100.00 (cash) for O1
        """
        reversal = OrderService.cancel_order(completed_order.id)

        original = Order.objects.get(pk=completed_order.id)
        assert original.status == Order.OrderStatus.CANCELLED
        assert original.cancelled_at is not None
        assert original.total == Decimal("100.00")

        assert reversal.id == f"R-{completed_order.id}"
        assert reversal.reversal_of_id == completed_order.id
        assert reversal.total == Decimal("-100.00")
        assert reversal.subtotal == Decimal("-100.00")
        assert reversal.status == Order.OrderStatus.COMPLETED
        assert reversal.sync_status == Order.SyncStatus.PENDING
        assert reversal.shift_id == open_shift.id
        assert [item.quantity for item in reversal.items.all()] == [-1]

        refund = CashDrawerActivity.objects.get(type=CashDrawerActivity.ActivityType.REFUND)
        assert refund.amount == Decimal("100.00")
        assert refund.payment_method == "cash"
        assert refund.order_id == completed_order.id

    def test_cancel_reduces_expected_cash(self, completed_order, open_shift):
        assert ShiftService.shift_summary().expected_cash == Decimal("600.00")

        OrderService.cancel_order(completed_order.id)

        assert ShiftService.shift_summary().expected_cash == Decimal("500.00")

    def test_cancel_twice_rejected(self, completed_order):
        OrderService.cancel_order(completed_order.id)

        with pytest.raises(InvalidTransitionError):
            OrderService.cancel_order(completed_order.id)

        assert Order.objects.filter(reversal_of__isnull=False).count() == 1

    def test_cancel_reversal_rejected(self, completed_order):
        reversal = OrderService.cancel_order(completed_order.id)

        with pytest.raises(InvalidTransitionError):
            OrderService.cancel_order(reversal.id)

    def test_cancel_requires_completed_order(self, place_order):
        order = place_order(Decimal("100.00"))

        with pytest.raises(InvalidTransitionError):
            OrderService.cancel_order(order.id)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.COOKING

    def test_cancel_zero_total_rejected(self, place_order):
        order = place_order(Decimal("0.00"), "qr")
        OrderService.complete_order(order.id)

        with pytest.raises(InvalidTransitionError):
            OrderService.cancel_order(order.id)

    def test_cancel_requires_open_shift(self, completed_order):
        ShiftService.end_shift(Decimal("600.00"))

        with pytest.raises(NoOpenShiftError):
            OrderService.cancel_order(completed_order.id)

    def test_refund_failure_rolls_back_cancellation(self, completed_order):
        """
        CRITICAL: Cancellation is all-or-nothing. If the REFUND cannot be
        appended there is no reversal and the original stays completed.
        """
        with patch(
            "orders.services.order_service.CashDrawerService.record_refund",
            side_effect=DatabaseError("disk I/O error"),
        ):
            with pytest.raises(StorageError):
                OrderService.cancel_order(completed_order.id)

        original = Order.objects.get(pk=completed_order.id)
        assert original.status == Order.OrderStatus.COMPLETED
        assert not Order.objects.filter(pk=f"R-{completed_order.id}").exists()
        assert not CashDrawerActivity.objects.filter(type=CashDrawerActivity.ActivityType.REFUND).exists()
        assert DailySummary.objects.get(date=timezone.localdate()).total_sales == Decimal("100.00")

    def test_cancelled_order_is_frozen(self, completed_order):
        OrderService.cancel_order(completed_order.id)
        original = Order.objects.get(pk=completed_order.id)

        original.total = Decimal("1.00")
        with pytest.raises(InvariantViolation):
            original.save()

    def test_orders_are_never_deleted(self, completed_order):
        with pytest.raises(InvariantViolation):
            completed_order.delete()
