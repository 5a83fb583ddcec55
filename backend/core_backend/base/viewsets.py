from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from .mixins import OptimizedQuerysetMixin
from .permissions import IsTenantMember
from ..pagination import StandardPagination


class ReadOnlyBaseViewSet(OptimizedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    """
    Base ViewSet for read-only endpoints.

    Features:
    - Automatic query optimization
    - Standard pagination and filtering
    - Tenant-scoped querysets

    Usage:
        class SaleViewSet(ReadOnlyBaseViewSet):
            queryset = Sale.objects.all()
            serializer_class = SaleSerializer
    """

    pagination_class = StandardPagination
    permission_classes = [IsTenantMember]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    ordering = ['-id']

    def get_queryset(self):
        """
        Re-evaluate queryset at request time for tenant context.

        The class-level queryset attribute is evaluated at import time (before
        tenant context exists), so Model.objects is called again here to get a
        fresh queryset with tenant filtering.
        """
        if getattr(self, 'queryset', None) is not None:
            return self.optimize_queryset(self.queryset.model.objects.all())
        return super().get_queryset()
