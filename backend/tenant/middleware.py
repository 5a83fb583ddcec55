import logging

from .managers import set_current_tenant

logger = logging.getLogger(__name__)


class TenantMiddleware:
    """
    Resolves tenant from request and attaches to request.tenant.

    Registers are operated by signed-in staff, so the tenant is the one
    the authenticated user belongs to. Anonymous requests and the Django
    admin run without tenant context (TenantManager then fails closed).

    Must be placed after AuthenticationMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        tenant = self.get_tenant_from_request(request)
        request.tenant = tenant

        # CRITICAL: Set thread-local context for TenantManager
        set_current_tenant(tenant)
        try:
            return self.get_response(request)
        finally:
            # Never leak tenant context into the next request on this thread
            set_current_tenant(None)

    def get_tenant_from_request(self, request):
        if request.path.startswith('/admin/'):
            return None

        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None

        tenant = getattr(user, 'tenant', None)
        if tenant is not None and not tenant.is_active:
            logger.warning(f"Request for inactive tenant {tenant.slug} by user {user.pk}")
            return None
        return tenant
