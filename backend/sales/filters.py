import django_filters
from cart.entities import FulfillmentMode
from core_backend.base.filters import BaseFilterSet
from .models import Sale


class SaleFilter(BaseFilterSet):
    """
    Sale history filters.

    created_after / created_before accept either a date ("2025-11-11",
    whole day) or a full datetime.
    """

    status = django_filters.ChoiceFilter(choices=Sale.SaleStatus.choices)
    payment_method = django_filters.ChoiceFilter(choices=Sale.PaymentMethod.choices)
    fulfillment_mode = django_filters.ChoiceFilter(choices=FulfillmentMode.choices)
    store_location = django_filters.NumberFilter(field_name="store_location_id")
    cashier = django_filters.NumberFilter(field_name="cashier_id")

    class Meta:
        model = Sale
        fields = ["status", "payment_method", "fulfillment_mode", "store_location", "cashier"]
