import re
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.db.models import Max
from django.db.models.functions import Cast, Substr
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from cart.entities import FulfillmentMode
from payments.money import quantize
from tenant.managers import TenantManager


class Sale(models.Model):
    """
    A committed checkout.

    Created exactly once per checkout (guarded by the tenant-unique
    idempotency_key) together with its items and the matching stock
    decrements, all in one database transaction.
    """

    class SaleStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        VOIDED = "voided", _("Voided")
        REFUNDED = "refunded", _("Refunded")

    class PaymentMethod(models.TextChoices):
        CASH = "cash", _("Cash")
        CARD = "card", _("Card")
        MOMO = "momo", _("Mobile Money")
        TRANSFER = "transfer", _("Bank Transfer")
        CREDIT = "credit", _("Store Credit")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='sales'
    )
    store_location = models.ForeignKey(
        'settings.StoreLocation',
        on_delete=models.PROTECT,
        related_name='sales',
        help_text='Store location where this sale was rung up'
    )
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )
    cashier = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_as_cashier",
    )

    sale_number = models.CharField(max_length=20, blank=True)
    idempotency_key = models.CharField(
        max_length=64,
        help_text=_("Client-generated key; a retried checkout with the same key returns this sale."),
    )

    status = models.CharField(
        max_length=10, choices=SaleStatus.choices, default=SaleStatus.COMPLETED
    )
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PAID
    )
    fulfillment_mode = models.CharField(
        max_length=10, choices=FulfillmentMode.choices, default=FulfillmentMode.PICKUP
    )

    # --- Financial Fields ---
    currency = models.CharField(max_length=3, default='USD')
    subtotal = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal("0.000"))
    discount_total = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal("0.000"))
    tax_total = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal("0.000"))
    grand_total = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal("0.000"))

    item_count = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["-created_at", "sale_number"]
        verbose_name = _("Sale")
        verbose_name_plural = _("Sales")
        indexes = [
            models.Index(fields=['tenant', 'status'], name='sale_tenant_stat_idx'),
            models.Index(fields=['tenant', 'created_at'], name='sale_tenant_created_idx'),
            models.Index(fields=['tenant', 'cashier'], name='sale_tenant_cashier_idx'),
            models.Index(fields=['tenant', 'store_location', '-created_at'], name='sale_loc_created_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "idempotency_key"],
                name="unique_sale_idempotency_key_per_tenant",
            ),
            models.UniqueConstraint(
                fields=["tenant", "store_location", "sale_number"],
                name="unique_sale_number_per_location",
            ),
        ]

    def __str__(self):
        return f"Sale {self.sale_number or self.pk} - {quantize(self.currency, self.grand_total)} {self.currency}"

    def save(self, *args, **kwargs):
        # Generate sale_number only if it's not already set
        if self.sale_number:
            super().save(*args, **kwargs)
            return

        max_retries = 5  # Prevent infinite loop in extreme race conditions
        for _attempt in range(max_retries):
            self.sale_number = self._generate_sequential_sale_number()
            try:
                # Savepoint so a collision does not abort the caller's transaction
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                if not self._sale_number_taken():
                    raise
                # Another register took the number, retry
        self.sale_number = ""
        raise IntegrityError("Failed to generate a unique sale number after multiple retries.")

    def _sale_number_taken(self):
        return Sale.all_objects.filter(
            tenant_id=self.tenant_id,
            store_location_id=self.store_location_id,
            sale_number=self.sale_number,
        ).exists()

    def _generate_sequential_sale_number(self):
        """
        Generates the next sequential sale number PER LOCATION.

        The highest existing number is found numerically, so SALE-100000
        follows SALE-99999 even though it sorts lower as text.

        Example:
            Osu:      SALE-00001, SALE-00002
            Airport:  SALE-00001
        """
        prefix = settings.POS.get("SALE_NUMBER_PREFIX", "SALE-")
        last_number = (
            Sale.all_objects.filter(
                tenant_id=self.tenant_id,
                store_location_id=self.store_location_id,
                sale_number__regex=rf"^{re.escape(prefix)}[0-9]+$",
            )
            .annotate(
                sequence=Cast(Substr("sale_number", len(prefix) + 1), models.BigIntegerField())
            )
            .aggregate(highest=Max("sequence"))["highest"]
        )

        next_number = (last_number or 0) + 1
        return f"{prefix}{next_number:05d}"


class SaleItem(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='sale_items'
    )
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        'products.Product', on_delete=models.PROTECT, related_name="sale_items"
    )
    variant = models.ForeignKey(
        'products.ProductVariant',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sale_items",
    )
    product_name = models.CharField(
        max_length=255, help_text=_("Product (and variant) name at the time of sale.")
    )
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text=_("Price of the product at the time of sale."),
    )
    discount = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal("0.000"))
    total = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text=_("quantity * unit_price - discount"),
    )

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Sale Item")
        verbose_name_plural = _("Sale Items")
        ordering = ['id']
        indexes = [
            models.Index(fields=['tenant', 'sale'], name='saleitem_tenant_sale_idx'),
            models.Index(fields=['tenant', 'product'], name='saleitem_tenant_product_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.product_name} in Sale {self.sale.sale_number}"
