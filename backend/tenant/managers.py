from django.db import models
from threading import local

# Thread-local storage for current tenant
_thread_locals = local()


def set_current_tenant(tenant):
    """
    Set the current tenant for this thread.

    Args:
        tenant: Tenant instance or None to clear

    This is called by TenantMiddleware and Celery tasks to establish
    tenant context for the current request/task.
    """
    _thread_locals.tenant = tenant


def get_current_tenant():
    """
    Get the current tenant for this thread.

    Returns:
        Tenant instance or None if no tenant context is set
    """
    return getattr(_thread_locals, 'tenant', None)


class TenantManager(models.Manager):
    """
    Automatically filters querysets by current tenant.

    FAILS CLOSED: Returns empty queryset if no tenant context is set.
    This prevents accidental data leakage across tenants.

    Usage:
        class Product(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE)

            objects = TenantManager()  # Default manager (tenant-filtered)
            all_objects = models.Manager()  # Bypass filter for services that pass tenant explicitly

        products = Product.objects.all()  # Filtered by the current tenant
        products = Product.all_objects.filter(tenant=tenant)  # Explicit tenant
    """

    def get_queryset(self):
        tenant = get_current_tenant()

        if tenant:
            return super().get_queryset().filter(tenant=tenant)

        # FAIL CLOSED: Return empty queryset if no tenant context
        return super().get_queryset().none()
