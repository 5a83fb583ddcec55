from decimal import Decimal
from django.db import models
from django.utils.translation import gettext_lazy as _
from products.models import Product
from tenant.managers import TenantManager


class InventoryStock(models.Model):
    """
    Units of one product on hand at one store location.

    Shared by every register of the location. Quantity is only ever changed
    through InventoryService with single-statement F() updates, and the
    database refuses to store a negative quantity.
    """

    tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE, related_name='inventory_stocks')
    store_location = models.ForeignKey(
        'settings.StoreLocation', on_delete=models.PROTECT, related_name='stock_levels'
    )
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="stock_levels")
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Units on hand at this location. Never negative."),
    )
    low_stock_threshold = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Alert when quantity falls to this level. Empty uses the store location's default."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Inventory Stock")
        verbose_name_plural = _("Inventory Stocks")
        constraints = [
            models.UniqueConstraint(
                fields=['store_location', 'product'],
                name='unique_stock_per_location_product'
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='inventory_stock_non_negative'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'store_location', 'product'], name='inventory_ten_loc_prod_idx'),
            models.Index(fields=['tenant', 'quantity'], name='inventory_tenant_qty_idx'),
        ]

    def __str__(self):
        return f"{self.product.name} at {self.store_location.name}: {self.quantity}"

    @property
    def effective_low_stock_threshold(self) -> Decimal:
        if self.low_stock_threshold is not None:
            return self.low_stock_threshold
        return self.store_location.low_stock_threshold

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.effective_low_stock_threshold


class StockHistoryEntry(models.Model):
    """
    One row per stock movement: initial receipt, later receipts, and each
    sale deduction (reference_id holds the sale number).

    Written in the same transaction as the movement, so a rolled-back
    checkout leaves no history behind.
    """

    class Operation(models.TextChoices):
        CREATED = 'CREATED', _('Initial Stock')
        ADJUSTED_ADD = 'ADJUSTED_ADD', _('Stock Received')
        SALE_DEDUCTION = 'SALE_DEDUCTION', _('Sold')

    tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE, related_name='stock_history_entries')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="stock_history")
    store_location = models.ForeignKey(
        'settings.StoreLocation', on_delete=models.PROTECT, related_name="stock_history"
    )
    user = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_operations",
        help_text=_("Cashier or staff member who caused the movement"),
    )
    operation_type = models.CharField(max_length=20, choices=Operation.choices)
    quantity_change = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Signed change: positive when stock is received, negative when sold"),
    )
    new_quantity = models.DecimalField(
        max_digits=10, decimal_places=2, help_text=_("Units on hand right after this movement")
    )
    reference_id = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Sale number or receiving reference this movement belongs to"),
    )
    timestamp = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Stock History Entry")
        verbose_name_plural = _("Stock History Entries")
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['tenant', 'product', 'timestamp'], name='stock_hist_ten_prod_time_idx'),
            models.Index(fields=['tenant', 'reference_id'], name='stock_hist_ten_reference_idx'),
        ]

    def __str__(self):
        return f"{self.get_operation_type_display()}: {self.product.name} ({self.quantity_change:+.2f})"
