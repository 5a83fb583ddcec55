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
            name="StoreLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Location name (e.g., 'Osu Branch', 'Airport Kiosk')", max_length=100)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("email", models.EmailField(blank=True, help_text="Receives low-stock alerts for this location", max_length=254)),
                ("currency", models.CharField(default="USD", help_text="ISO 4217 currency code used for prices and sales at this location", max_length=3)),
                ("tax_rate", models.DecimalField(blank=True, decimal_places=4, help_text="This location's tax rate as a fraction (e.g., 0.05 for 5% sales tax).", max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal("0")), django.core.validators.MaxValueValidator(Decimal("1"))])),
                ("low_stock_threshold", models.DecimalField(decimal_places=2, default=Decimal("10.00"), help_text="Default quantity at or below which stock counts as low", max_digits=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="store_locations", to="tenant.tenant")),
            ],
            options={
                "ordering": ["name"],
                "constraints": [models.UniqueConstraint(fields=("tenant", "name"), name="unique_location_name_per_tenant")],
            },
        ),
    ]
