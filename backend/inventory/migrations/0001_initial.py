from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenant", "0001_initial"),
        ("settings", "0001_initial"),
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryStock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Units on hand at this location. Never negative.", max_digits=10)),
                ("low_stock_threshold", models.DecimalField(blank=True, decimal_places=2, help_text="Alert when quantity falls to this level. Empty uses the store location's default.", max_digits=10, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_levels", to="products.product")),
                ("store_location", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_levels", to="settings.storelocation")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="inventory_stocks", to="tenant.tenant")),
            ],
            options={
                "verbose_name": "Inventory Stock",
                "verbose_name_plural": "Inventory Stocks",
                "indexes": [
                    models.Index(fields=["tenant", "store_location", "product"], name="inventory_ten_loc_prod_idx"),
                    models.Index(fields=["tenant", "quantity"], name="inventory_tenant_qty_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("store_location", "product"), name="unique_stock_per_location_product"),
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0)), name="inventory_stock_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockHistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("operation_type", models.CharField(choices=[("CREATED", "Initial Stock"), ("ADJUSTED_ADD", "Stock Received"), ("SALE_DEDUCTION", "Sold")], max_length=20)),
                ("quantity_change", models.DecimalField(decimal_places=2, help_text="Signed change: positive when stock is received, negative when sold", max_digits=10)),
                ("new_quantity", models.DecimalField(decimal_places=2, help_text="Units on hand right after this movement", max_digits=10)),
                ("reference_id", models.CharField(blank=True, help_text="Sale number or receiving reference this movement belongs to", max_length=100)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_history", to="products.product")),
                ("store_location", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_history", to="settings.storelocation")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="stock_history_entries", to="tenant.tenant")),
                ("user", models.ForeignKey(blank=True, help_text="Cashier or staff member who caused the movement", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="stock_operations", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Stock History Entry",
                "verbose_name_plural": "Stock History Entries",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["tenant", "product", "timestamp"], name="stock_hist_ten_prod_time_idx"),
                    models.Index(fields=["tenant", "reference_id"], name="stock_hist_ten_reference_idx"),
                ],
            },
        ),
    ]
