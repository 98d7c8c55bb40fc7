import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Range queries over the indexed timestamp and (status, timestamp) columns.
    """

    start = django_filters.IsoDateTimeFilter(field_name="timestamp", lookup_expr="gte")
    end = django_filters.IsoDateTimeFilter(field_name="timestamp", lookup_expr="lt")
    date = django_filters.DateFilter(method="filter_date")
    is_reversal = django_filters.BooleanFilter(field_name="reversal_of", lookup_expr="isnull", exclude=True)

    class Meta:
        model = Order
        fields = ["status", "sync_status", "payment_method", "shift", "start", "end", "date", "is_reversal"]

    def filter_date(self, queryset, name, value):
        from reports.services import local_day_bounds

        start, end = local_day_bounds(value)
        return queryset.filter(timestamp__gte=start, timestamp__lt=end)
