from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenant", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the product.", max_length=200)),
                ("sku", models.CharField(blank=True, max_length=64)),
                ("price", models.DecimalField(decimal_places=3, help_text="The selling price of the product.", max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("track_inventory", models.BooleanField(default=False, help_text="Whether to track inventory levels for this product. When enabled, every sale decrements stock at the selling location.")),
                ("is_active", models.BooleanField(default=True, help_text="Inactive products cannot be added to a cart.")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="products", to="tenant.tenant")),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["tenant", "is_active"], name="product_tenant_active_idx"),
                    models.Index(fields=["tenant", "sku"], name="product_tenant_sku_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductVariant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("sku", models.CharField(blank=True, max_length=64)),
                ("price", models.DecimalField(blank=True, decimal_places=3, help_text="Overrides the product price when set.", max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("is_active", models.BooleanField(default=True)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="variants", to="products.product")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="product_variants", to="tenant.tenant")),
            ],
            options={
                "ordering": ["product", "name"],
                "constraints": [models.UniqueConstraint(fields=("product", "name"), name="unique_variant_name_per_product")],
            },
        ),
    ]
