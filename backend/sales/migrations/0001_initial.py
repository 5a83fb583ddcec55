import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenant", "0001_initial"),
        ("settings", "0001_initial"),
        ("customers", "0001_initial"),
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sale_number", models.CharField(blank=True, max_length=20)),
                ("idempotency_key", models.CharField(help_text="Client-generated key; a retried checkout with the same key returns this sale.", max_length=64)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("completed", "Completed"), ("voided", "Voided"), ("refunded", "Refunded")], default="completed", max_length=10)),
                ("payment_method", models.CharField(choices=[("cash", "Cash"), ("card", "Card"), ("momo", "Mobile Money"), ("transfer", "Bank Transfer"), ("credit", "Store Credit")], max_length=10)),
                ("payment_status", models.CharField(choices=[("pending", "Pending"), ("paid", "Paid"), ("failed", "Failed"), ("refunded", "Refunded")], default="paid", max_length=10)),
                ("fulfillment_mode", models.CharField(choices=[("pickup", "Pickup"), ("delivery", "Delivery"), ("dine_in", "Dine-In")], default="pickup", max_length=10)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("subtotal", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=14)),
                ("discount_total", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=14)),
                ("tax_total", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=14)),
                ("grand_total", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=14)),
                ("item_count", models.PositiveIntegerField(default=0)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cashier", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sales_as_cashier", to=settings.AUTH_USER_MODEL)),
                ("customer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sales", to="customers.customer")),
                ("store_location", models.ForeignKey(help_text="Store location where this sale was rung up", on_delete=django.db.models.deletion.PROTECT, related_name="sales", to="settings.storelocation")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sales", to="tenant.tenant")),
            ],
            options={
                "verbose_name": "Sale",
                "verbose_name_plural": "Sales",
                "ordering": ["-created_at", "sale_number"],
                "indexes": [
                    models.Index(fields=["tenant", "status"], name="sale_tenant_stat_idx"),
                    models.Index(fields=["tenant", "created_at"], name="sale_tenant_created_idx"),
                    models.Index(fields=["tenant", "cashier"], name="sale_tenant_cashier_idx"),
                    models.Index(fields=["tenant", "store_location", "-created_at"], name="sale_loc_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant", "idempotency_key"), name="unique_sale_idempotency_key_per_tenant"),
                    models.UniqueConstraint(fields=("tenant", "store_location", "sale_number"), name="unique_sale_number_per_location"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(help_text="Product (and variant) name at the time of sale.", max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", models.DecimalField(decimal_places=3, help_text="Price of the product at the time of sale.", max_digits=14)),
                ("discount", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=14)),
                ("total", models.DecimalField(decimal_places=3, help_text="quantity * unit_price - discount", max_digits=14)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sale_items", to="products.product")),
                ("sale", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.sale")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sale_items", to="tenant.tenant")),
                ("variant", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="sale_items", to="products.productvariant")),
            ],
            options={
                "verbose_name": "Sale Item",
                "verbose_name_plural": "Sale Items",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["tenant", "sale"], name="saleitem_tenant_sale_idx"),
                    models.Index(fields=["tenant", "product"], name="saleitem_tenant_product_idx"),
                ],
            },
        ),
    ]
