"""
Permissions shared by the tenant-scoped API.
"""

from rest_framework.permissions import BasePermission


class IsTenantMember(BasePermission):
    """
    Authenticated staff that belong to an active tenant.

    TenantMiddleware has already put the user's tenant on the request;
    without one every TenantManager query would come back empty, so the
    request is refused outright.
    """

    message = "You must belong to an active tenant to access this resource."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return getattr(request, 'tenant', None) is not None

    def has_object_permission(self, request, view, obj):
        return getattr(obj, 'tenant_id', None) == request.tenant.id
