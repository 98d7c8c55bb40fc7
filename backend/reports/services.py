from datetime import date, datetime, time, timedelta
from decimal import Decimal
import logging

from django.db import transaction
from django.db.models import Count, F, Sum
from django.utils import timezone

from core_backend.audit import AuditLog
from core_backend.utils.money import ZERO
from orders.models import Order
from settings.config import app_settings
from settings.models import DailySummaryMode
from .models import DailySummary

logger = logging.getLogger(__name__)


def local_day_bounds(day: date):
    """Aware [start, end) datetimes covering one local calendar day."""
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    end = timezone.make_aware(datetime.combine(day + timedelta(days=1), time.min), tz)
    return start, end


class DailySummaryService:
    """
    Maintains the DailySummary rows.

    record_sale/record_cancellation run inside the caller's ledger
    transaction, so the rollup cannot drift from committed orders.
    """

    @staticmethod
    def _apply(day: date, amount: Decimal, count: int) -> None:
        DailySummary.objects.get_or_create(date=day)
        DailySummary.objects.filter(pk=day).update(
            total_sales=F("total_sales") + amount,
            transaction_count=F("transaction_count") + count,
            updated_at=timezone.now(),
        )

    @staticmethod
    @transaction.atomic
    def record_sale(order: Order) -> None:
        if order.is_reversal or order.status == Order.OrderStatus.CANCELLED:
            return
        DailySummaryService._apply(order.business_date, order.total, 1)
        logger.debug(f"Daily summary {order.business_date} += {order.total} (order {order.id})")

    @staticmethod
    @transaction.atomic
    def record_cancellation(order: Order) -> None:
        """
        Net a cancelled order out of its day's row. Only in "net" mode; the
        default "gross" mode keeps cancelled sales in the total.
        """
        if app_settings.daily_summary_mode != DailySummaryMode.NET or order.is_reversal:
            return
        DailySummaryService._apply(order.business_date, -order.total, -1)
        logger.debug(f"Daily summary {order.business_date} -= {order.total} (cancelled order {order.id})")

    @staticmethod
    def orders_for_day(day: date):
        start, end = local_day_bounds(day)
        qs = Order.objects.filter(
            timestamp__gte=start, timestamp__lt=end, reversal_of__isnull=True
        )
        if app_settings.daily_summary_mode == DailySummaryMode.NET:
            qs = qs.exclude(status=Order.OrderStatus.CANCELLED)
        return qs

    @staticmethod
    @transaction.atomic
    def rebuild(day: date) -> DailySummary:
        """
        Recompute one day's row from the orders table.
        """
        totals = DailySummaryService.orders_for_day(day).aggregate(
            total=Sum("total"), count=Count("id")
        )
        total = totals["total"] or ZERO
        count = totals["count"] or 0

        previous = DailySummary.objects.filter(pk=day).first()
        summary, _created = DailySummary.objects.update_or_create(
            date=day, defaults={"total_sales": total, "transaction_count": count}
        )

        if previous and (previous.total_sales != total or previous.transaction_count != count):
            logger.warning(
                f"Daily summary {day} drifted: stored {previous.total_sales}/{previous.transaction_count}, "
                f"rebuilt {total}/{count}"
            )
            AuditLog.warn(
                f"Daily summary {day} rebuilt with corrections",
                details={
                    "stored_total": previous.total_sales,
                    "stored_count": previous.transaction_count,
                    "total": total,
                    "count": count,
                },
            )
        else:
            logger.info(f"Daily summary {day} rebuilt: {total} ({count} orders)")
        return summary

    @staticmethod
    def rebuild_range(start: date, end: date):
        """Rebuild every day in [start, end]."""
        summaries = []
        day = start
        while day <= end:
            summaries.append(DailySummaryService.rebuild(day))
            day += timedelta(days=1)
        return summaries
