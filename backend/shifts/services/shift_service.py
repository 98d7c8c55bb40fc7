from datetime import date
from decimal import Decimal
from typing import Optional
import logging

from django.db import transaction
from django.utils import timezone

from core_backend.audit import AuditLog, ledger_operation
from core_backend.exceptions import (
    LedgerValidationError,
    NoOpenShiftError,
    ShiftAlreadyOpenError,
    ShiftLimitReachedError,
)
from core_backend.utils.money import ZERO, quantize
from settings.config import app_settings
from shifts.models import CashDrawerActivity, Shift
from .cash_drawer_service import CashDrawerService, DrawerSummary

logger = logging.getLogger(__name__)

ActivityType = CashDrawerActivity.ActivityType
PaymentMethod = CashDrawerActivity.PaymentMethod

# Shift columns written when the shift closes. last_activity_at is maintained
# by CashDrawerService.append and must not be overwritten with a stale value.
CLOSE_FIELDS = [
    "status",
    "end_time",
    "closing_cash_counted",
    "cash_for_next_shift",
    "expected_cash_in_drawer",
    "cash_over_short",
    "cash_to_deposit",
    "total_sales",
    "total_cash_sales",
    "total_qr_sales",
    "total_paid_in",
    "total_paid_out",
    "total_refunds",
]


def _money(value, field: str) -> Decimal:
    try:
        amount = quantize(app_settings.currency, value)
    except (TypeError, ValueError):
        raise LedgerValidationError(f"{field} must be a number.", details={field: str(value)})
    if amount < 0:
        raise LedgerValidationError(f"{field} must not be negative.", details={field: str(amount)})
    return amount


class ShiftService:
    """
    Shift lifecycle: NO_SHIFT -> OPEN -> CLOSED.

    The OPEN shift row doubles as the ledger mutex: every write that depends
    on a value read from the ledger locks it with select_for_update() first.
    """

    @staticmethod
    def get_current_shift(for_update: bool = False) -> Optional[Shift]:
        qs = Shift.objects.filter(status=Shift.ShiftStatus.OPEN)
        if for_update:
            qs = qs.select_for_update()
        return qs.first()

    @staticmethod
    def require_open_shift(for_update: bool = True) -> Shift:
        shift = ShiftService.get_current_shift(for_update=for_update)
        if shift is None:
            raise NoOpenShiftError("No shift is open. Start a shift first.")
        return shift

    @staticmethod
    def shifts_started_on(day: date) -> int:
        return Shift.objects.filter(id__startswith=f"{day:%Y%m%d}-S").count()

    @staticmethod
    @ledger_operation("start_shift")
    def start_shift(opening_float) -> Shift:
        """
        Open a new shift with the given opening float and record SHIFT_START.
        """
        opening_float = _money(opening_float, "opening_float")

        with transaction.atomic():
            current = ShiftService.get_current_shift(for_update=True)
            if current is not None:
                raise ShiftAlreadyOpenError(
                    f"Shift {current.id} is already open.", details={"shift_id": current.id}
                )

            today = timezone.localdate()
            started_today = ShiftService.shifts_started_on(today)
            limit = app_settings.max_shifts_per_day
            if started_today >= limit:
                raise ShiftLimitReachedError(
                    f"The maximum of {limit} shifts per day has been reached.",
                    details={"date": today.isoformat(), "limit": limit},
                )

            shift = Shift(
                id=f"{today:%Y%m%d}-S{started_today + 1}",
                status=Shift.ShiftStatus.OPEN,
                start_time=timezone.now(),
                opening_float_amount=opening_float,
            )
            shift.save(force_insert=True)

            CashDrawerService.append(
                shift,
                ActivityType.SHIFT_START,
                amount=opening_float,
                payment_method=PaymentMethod.CASH,
                description="Opening float",
            )

        logger.info(f"Shift {shift.id} started with opening float {opening_float}")
        AuditLog.action(
            f"Shift {shift.id} started",
            details={"opening_float": opening_float},
            shift_id=shift.id,
        )
        return shift

    @staticmethod
    @ledger_operation("end_shift")
    def end_shift(counted_cash, cash_for_next_shift=ZERO) -> Shift:
        """
        Close the open shift, freezing its reconciliation.

        cash_over_short = counted - expected; cash_to_deposit = counted - next shift float.
        """
        counted = _money(counted_cash, "closing_cash_counted")
        next_float = _money(cash_for_next_shift, "cash_for_next_shift")
        if next_float > counted:
            raise LedgerValidationError(
                "Cash left for the next shift cannot exceed the counted cash.",
                details={"closing_cash_counted": counted, "cash_for_next_shift": next_float},
            )

        with transaction.atomic():
            shift = ShiftService.require_open_shift(for_update=True)
            summary = CashDrawerService.summarize(shift)

            closing = CashDrawerService.append(
                shift,
                ActivityType.SHIFT_END,
                amount=counted,
                payment_method=PaymentMethod.CASH,
                description="Closing count",
            )
            shift.last_activity_at = closing.timestamp

            shift.end_time = timezone.now()
            shift.closing_cash_counted = counted
            shift.cash_for_next_shift = next_float
            shift.expected_cash_in_drawer = summary.expected_cash
            shift.cash_over_short = counted - summary.expected_cash
            shift.cash_to_deposit = counted - next_float
            shift.total_sales = summary.total_sales
            shift.total_cash_sales = summary.cash_sales
            shift.total_qr_sales = summary.qr_sales
            shift.total_paid_in = summary.paid_in
            shift.total_paid_out = summary.paid_out
            shift.total_refunds = summary.total_refunds
            shift.status = Shift.ShiftStatus.CLOSED
            shift.save(update_fields=CLOSE_FIELDS)

        if shift.cash_over_short != 0:
            logger.warning(
                f"Shift {shift.id} closed {'over' if shift.cash_over_short > 0 else 'short'} "
                f"by {abs(shift.cash_over_short)} (expected {shift.expected_cash_in_drawer}, counted {counted})"
            )
        else:
            logger.info(f"Shift {shift.id} closed, drawer balanced at {counted}")
        AuditLog.action(
            f"Shift {shift.id} ended",
            details={
                "expected_cash": shift.expected_cash_in_drawer,
                "counted": counted,
                "over_short": shift.cash_over_short,
                "cash_to_deposit": shift.cash_to_deposit,
            },
            shift_id=shift.id,
        )
        return shift

    @staticmethod
    @ledger_operation("paid_in_out")
    def paid_in_out(activity_type: str, amount, description: str = "") -> CashDrawerActivity:
        """Record cash put into (PAID_IN) or taken out of (PAID_OUT) the drawer."""
        if activity_type not in (ActivityType.PAID_IN, ActivityType.PAID_OUT):
            raise LedgerValidationError(
                f"'{activity_type}' is not a paid in/out type.",
                details={"type": activity_type},
            )
        amount = _money(amount, "amount")
        if amount == 0:
            raise LedgerValidationError("Amount must be greater than zero.")

        with transaction.atomic():
            shift = ShiftService.require_open_shift(for_update=True)
            activity = CashDrawerService.append(
                shift,
                activity_type,
                amount=amount,
                payment_method=PaymentMethod.CASH,
                description=description,
            )
            from sync.services import OrderSyncService

            OrderSyncService.schedule_sync(trigger=activity_type.lower())

        logger.info(f"{activity.get_type_display()} {amount} recorded in shift {shift.id}: {description}")
        AuditLog.action(
            f"{activity.get_type_display()} {amount}",
            details={"description": description},
            shift_id=shift.id,
        )
        return activity

    @staticmethod
    @ledger_operation("manual_drawer_open")
    def manual_drawer_open(description: str = "") -> CashDrawerActivity:
        """Log a no-sale drawer open. Moves no money."""
        with transaction.atomic():
            shift = ShiftService.require_open_shift(for_update=True)
            activity = CashDrawerService.append(
                shift,
                ActivityType.MANUAL_OPEN,
                amount=ZERO,
                payment_method=PaymentMethod.NONE,
                description=description or "Manual drawer open",
            )

        logger.info(f"Manual drawer open in shift {shift.id}")
        AuditLog.warn("Cash drawer opened manually", details={"description": description}, shift_id=shift.id)
        return activity

    @staticmethod
    def shift_summary(shift: Optional[Shift] = None) -> DrawerSummary:
        if shift is None:
            shift = ShiftService.require_open_shift(for_update=False)
        return CashDrawerService.summarize(shift)

    @staticmethod
    def shift_history(day: Optional[date] = None):
        qs = Shift.objects.all()
        if day is not None:
            qs = qs.filter(id__startswith=f"{day:%Y%m%d}-S")
        return qs.order_by("-start_time")
