"""
Core backend base components.

This package provides foundational classes and utilities that should be used
throughout the Django application for consistency and maintainability.
"""

from .viewsets import ReadOnlyBaseViewSet
from .serializers import BaseModelSerializer
from .mixins import OptimizedQuerysetMixin
from .filters import BaseFilterSet
from .permissions import IsTenantMember

__all__ = [
    # ViewSets
    'ReadOnlyBaseViewSet',

    # Serializers
    'BaseModelSerializer',

    # Mixins
    'OptimizedQuerysetMixin',

    # Filters
    'BaseFilterSet',

    # Permissions
    'IsTenantMember',
]
