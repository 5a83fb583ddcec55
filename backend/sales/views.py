from core_backend.base import ReadOnlyBaseViewSet
from .filters import SaleFilter
from .models import Sale
from .serializers import SaleListSerializer, SaleSerializer


class SaleViewSet(ReadOnlyBaseViewSet):
    """
    Sale history for the authenticated user's tenant.

    Sales are written only by the checkout; the API never creates or
    changes them.
    """

    queryset = Sale.objects.all()
    serializer_class = SaleSerializer
    filterset_class = SaleFilter
    search_fields = ["sale_number", "customer__name", "notes"]
    ordering_fields = ["created_at", "grand_total", "sale_number"]
    ordering = ["-created_at"]

    def get_serializer_class(self):
        if self.action == "list":
            return SaleListSerializer
        return SaleSerializer
