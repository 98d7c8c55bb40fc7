import django_filters

from .models import DailySummary


class DailySummaryFilter(django_filters.FilterSet):
    start_date = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="date", lookup_expr="lte")

    class Meta:
        model = DailySummary
        fields = ["start_date", "end_date"]
