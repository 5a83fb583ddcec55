import uuid
from django.db import models


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each retail business using the platform is a tenant; every store
    location, product, stock row and sale belongs to exactly one tenant.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the tenant (e.g., Kofi's Mini Mart)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier for the tenant"
    )

    # Business details
    business_name = models.CharField(max_length=255, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)

    # Status
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot access the system"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active'], name='tenants_is_active_idx'),
        ]

    def __str__(self):
        return self.name
