from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from tenant.managers import TenantManager


class StoreLocation(models.Model):
    """
    PRIMARY source of truth for location-specific operations.

    Every register session, stock row and sale is bound to one location.
    The location decides the currency prices are expressed in and the
    sales tax rate applied at checkout.

    Architecture: Tenant (Isolation) → StoreLocation (Operations) → Data
    """

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='store_locations'
    )
    name = models.CharField(
        max_length=100,
        help_text="Location name (e.g., 'Osu Branch', 'Airport Kiosk')"
    )

    # === CONTACT INFORMATION ===
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(
        blank=True,
        help_text="Receives low-stock alerts for this location"
    )

    # === LOCATION-SPECIFIC SETTINGS ===
    currency = models.CharField(
        max_length=3,
        default='USD',
        help_text="ISO 4217 currency code used for prices and sales at this location"
    )
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('1'))],
        help_text="This location's tax rate as a fraction (e.g., 0.05 for 5% sales tax)."
    )
    low_stock_threshold = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('10.00'),
        help_text="Default quantity at or below which stock counts as low"
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'name'],
                name='unique_location_name_per_tenant'
            ),
        ]

    def __str__(self):
        return self.name

    def get_effective_tax_rate(self):
        """
        Get tax rate for this location.

        Returns:
            Decimal: This location's tax rate, or 0.00 if not set
        """
        return self.tax_rate if self.tax_rate is not None else Decimal('0.00')
