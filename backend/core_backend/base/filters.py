import django_filters
from django.db import models
from django.utils import timezone
from datetime import datetime, time


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """
    A DateTimeFilter that intelligently handles date-only inputs.

    When a date-only value like "2025-11-11" is provided:
    - For 'gte'/'gt' lookups: Uses start of day (00:00:00)
    - For 'lte'/'lt' lookups: Uses end of day (23:59:59.999999)

    When a full datetime is provided (e.g., "2025-11-11T10:30:00Z"):
    - Uses the exact time as specified
    """

    def filter(self, qs, value):
        # A value at exactly midnight was most likely parsed from a date-only string
        if isinstance(value, datetime) and value.time() == time(0, 0, 0) and self.lookup_expr in ['lte', 'lt']:
            value = datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)
            if timezone.is_naive(value):
                value = timezone.make_aware(value)
        return super().filter(qs, value)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with common filtering patterns.

    Automatically uses FlexibleDateTimeFilter for all DateTimeField filters,
    allowing date-only inputs like "2025-11-11" to work intuitively as full-day ranges.
    """

    # Common date range filters
    created_after = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_before = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    @classmethod
    def filter_for_field(cls, field, field_name, lookup_expr='exact'):
        """
        Override filter_for_field to use FlexibleDateTimeFilter for DateTimeFields.
        This method is called by django-filters when auto-generating filters.
        """
        if isinstance(field, models.DateTimeField):
            return FlexibleDateTimeFilter(field_name=field_name, lookup_expr=lookup_expr)
        return super().filter_for_field(field, field_name, lookup_expr)
