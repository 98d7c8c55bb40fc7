from decimal import Decimal

from django.db import models


class DailySummary(models.Model):
    """
    Per-calendar-day sales rollup.

    A cache over the orders table, maintained in the same transaction as the
    order writes and recomputable with DailySummaryService.rebuild(). Never
    use it as the source of truth for reconciliation.
    """

    date = models.DateField(primary_key=True)
    total_sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    transaction_count = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        verbose_name_plural = "Daily summaries"

    def __str__(self):
        return f"{self.date.isoformat()}: {self.total_sales} ({self.transaction_count} orders)"
