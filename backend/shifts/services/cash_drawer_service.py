from dataclasses import dataclass, asdict
from decimal import Decimal
import logging

from django.db import transaction
from django.db.models import Max, Sum
from django.utils import timezone

from core_backend.exceptions import InvariantViolation, LedgerValidationError
from core_backend.utils.money import ZERO, to_decimal
from shifts.models import CashDrawerActivity, Shift

logger = logging.getLogger(__name__)

ActivityType = CashDrawerActivity.ActivityType
PaymentMethod = CashDrawerActivity.PaymentMethod


@dataclass(frozen=True)
class DrawerSummary:
    """Point-in-time rollup of one shift's drawer ledger."""

    shift_id: str
    opening_float: Decimal
    cash_sales: Decimal
    qr_sales: Decimal
    total_sales: Decimal
    paid_in: Decimal
    paid_out: Decimal
    cash_refunds: Decimal
    qr_refunds: Decimal
    total_refunds: Decimal
    net_sales: Decimal
    expected_cash: Decimal
    activity_count: int

    def as_dict(self):
        return asdict(self)


class CashDrawerService:
    """
    The only write path into the cash drawer ledger.

    Every append re-locks the shift row, so callers may pass a shift instance
    they read earlier; the status check always runs against the database.
    """

    @staticmethod
    @transaction.atomic
    def append(
        shift: Shift,
        activity_type: str,
        amount=ZERO,
        payment_method: str = PaymentMethod.NONE,
        description: str = "",
        order=None,
    ) -> CashDrawerActivity:
        amount = to_decimal(amount)
        if amount < 0:
            raise LedgerValidationError(
                "Drawer activity amounts must not be negative.",
                details={"shift_id": shift.pk, "amount": str(amount)},
            )

        locked = Shift.objects.select_for_update().get(pk=shift.pk)
        if not locked.is_open:
            raise InvariantViolation(
                f"Shift {shift.pk} is closed; no further drawer activity can be recorded.",
                details={"shift_id": shift.pk},
            )

        last = locked.activities.aggregate(last=Max("sequence"))["last"] or 0
        now = timezone.now()
        activity = CashDrawerActivity.objects.create(
            shift=locked,
            sequence=last + 1,
            timestamp=now,
            type=activity_type,
            amount=amount,
            payment_method=payment_method,
            description=description,
            order=order,
        )
        Shift.objects.filter(pk=locked.pk).update(last_activity_at=now)

        logger.debug(
            f"Drawer activity {activity.type} {activity.amount} ({activity.payment_method}) "
            f"appended to shift {locked.pk} as #{activity.sequence}"
        )
        return activity

    @staticmethod
    def record_sale(shift: Shift, order) -> CashDrawerActivity:
        return CashDrawerService.append(
            shift,
            ActivityType.SALE,
            amount=order.total,
            payment_method=order.payment_method,
            description=f"Order {order.id}",
            order=order,
        )

    @staticmethod
    def record_refund(shift: Shift, order) -> CashDrawerActivity:
        """Refund activity for a cancelled order; `order` is the original."""
        return CashDrawerService.append(
            shift,
            ActivityType.REFUND,
            amount=order.total,
            payment_method=order.payment_method,
            description=f"Cancelled order {order.id}",
            order=order,
        )

    @staticmethod
    def has_sale_activity(order) -> bool:
        return CashDrawerActivity.objects.filter(order=order, type=ActivityType.SALE).exists()

    @staticmethod
    def _totals(shift: Shift) -> dict:
        rows = (
            CashDrawerActivity.objects.filter(shift=shift)
            .values("type", "payment_method")
            .annotate(total=Sum("amount"))
            .order_by()
        )
        return {(row["type"], row["payment_method"]): row["total"] or ZERO for row in rows}

    @staticmethod
    def expected_cash(shift: Shift) -> Decimal:
        """
        Opening float + cash sales + paid in - paid out - cash refunds.

        SHIFT_START and SHIFT_END are bookkeeping entries and MANUAL_OPEN
        moves no money, so none of them count.
        """
        return CashDrawerService.summarize(shift).expected_cash

    @staticmethod
    def summarize(shift: Shift) -> DrawerSummary:
        totals = CashDrawerService._totals(shift)

        def total(activity_type, method=None):
            if method is not None:
                return totals.get((activity_type, method), ZERO)
            return sum(
                (value for (t, _m), value in totals.items() if t == activity_type), ZERO
            )

        cash_sales = total(ActivityType.SALE, PaymentMethod.CASH)
        qr_sales = total(ActivityType.SALE, PaymentMethod.QR)
        total_sales = total(ActivityType.SALE)
        paid_in = total(ActivityType.PAID_IN)
        paid_out = total(ActivityType.PAID_OUT)
        cash_refunds = total(ActivityType.REFUND, PaymentMethod.CASH)
        qr_refunds = total(ActivityType.REFUND, PaymentMethod.QR)
        total_refunds = total(ActivityType.REFUND)
        opening_float = to_decimal(shift.opening_float_amount)

        return DrawerSummary(
            shift_id=shift.pk,
            opening_float=opening_float,
            cash_sales=cash_sales,
            qr_sales=qr_sales,
            total_sales=total_sales,
            paid_in=paid_in,
            paid_out=paid_out,
            cash_refunds=cash_refunds,
            qr_refunds=qr_refunds,
            total_refunds=total_refunds,
            net_sales=total_sales - total_refunds,
            expected_cash=opening_float + cash_sales + paid_in - paid_out - cash_refunds,
            activity_count=CashDrawerActivity.objects.filter(shift=shift).count(),
        )
