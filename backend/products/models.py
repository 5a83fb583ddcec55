from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from decimal import Decimal

from tenant.managers import TenantManager


class Product(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='products'
    )
    name = models.CharField(max_length=200, help_text=_("Name of the product."))
    sku = models.CharField(max_length=64, blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("The selling price of the product."),
    )
    track_inventory = models.BooleanField(
        default=False,
        help_text=_(
            "Whether to track inventory levels for this product. When enabled, "
            "every sale decrements stock at the selling location."
        ),
    )
    is_active = models.BooleanField(
        default=True,
        help_text=_("Inactive products cannot be added to a cart."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="product_tenant_active_idx"),
            models.Index(fields=["tenant", "sku"], name="product_tenant_sku_idx"),
        ]

    def __str__(self):
        return self.name


class ProductVariant(models.Model):
    """A sellable variation (size, colour, pack) with an optional price override."""

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='product_variants'
    )
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="variants"
    )
    name = models.CharField(max_length=100)
    sku = models.CharField(max_length=64, blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Overrides the product price when set."),
    )
    is_active = models.BooleanField(default=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["product", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "name"],
                name="unique_variant_name_per_product",
            ),
        ]

    def __str__(self):
        return f"{self.product.name} - {self.name}"
