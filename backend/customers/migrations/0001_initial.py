import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenant", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Customer's display name", max_length=255)),
                ("phone_number", models.CharField(blank=True, help_text="Customer's phone number", max_length=20)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="customers", to="tenant.tenant")),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["tenant", "phone_number"], name="customer_tenant_phone_idx")],
            },
        ),
    ]
