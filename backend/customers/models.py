import uuid
from django.db import models

from tenant.managers import TenantManager


class Customer(models.Model):
    """
    A shopper known to the store. Optional on a sale: walk-in sales have
    no customer attached.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='customers'
    )
    name = models.CharField(max_length=255, help_text="Customer's display name")
    phone_number = models.CharField(
        max_length=20,
        blank=True,
        help_text="Customer's phone number"
    )
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant', 'phone_number'], name='customer_tenant_phone_idx'),
        ]

    def __str__(self):
        return self.name

    def as_ref(self):
        """Snapshot used by the in-memory cart."""
        from cart.entities import CustomerRef
        return CustomerRef(id=self.id, name=self.name, phone=self.phone_number)
