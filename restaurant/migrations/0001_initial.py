from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Restaurant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("shop_name", models.CharField(blank=True, max_length=200)),
                ("shop_address", models.TextField(blank=True)),
                ("shop_details", models.TextField(blank=True)),
                ("shop_phone", models.CharField(blank=True, max_length=32)),
                ("is_shop_open", models.BooleanField(default=True)),
                (
                    "tax",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Tax percentage applied to the items subtotal",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                (
                    "delivery_charge",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("tax__gte", 0), ("tax__lte", 100)),
                        name="restaurant_tax_percent_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("delivery_charge__gte", 0)),
                        name="restaurant_delivery_charge_non_negative",
                    ),
                ],
            },
        ),
    ]
