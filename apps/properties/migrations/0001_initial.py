from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import shared.infrastructure.db


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                (
                    "property_type",
                    models.CharField(
                        default="apartment",
                        help_text="apartment, house, villa; other values use default fees.",
                        max_length=50,
                    ),
                ),
                (
                    "location",
                    models.CharField(help_text="Municipality used for VAT lookup, e.g. Sarajevo.", max_length=100),
                ),
                ("address", models.CharField(blank=True, max_length=255)),
                (
                    "renting_type",
                    models.CharField(
                        choices=[("Daily", "Daily"), ("Monthly", "Monthly")],
                        default="Daily",
                        max_length=10,
                    ),
                ),
                (
                    "nightly_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "monthly_rent",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("currency", models.CharField(default=shared.infrastructure.db.default_currency, max_length=3)),
                ("max_guests", models.PositiveSmallIntegerField(default=2)),
                (
                    "cancellation_policy",
                    models.CharField(
                        choices=[
                            ("Standard", "Standard (100% at 14+ days)"),
                            ("Flexible", "Flexible (100% at 7+ days)"),
                            ("Emergency", "Emergency (always 100%)"),
                            ("Strict", "Strict (no refund)"),
                        ],
                        default="Standard",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PropertyAvailability",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("is_available", models.BooleanField(default=False)),
                (
                    "kind",
                    models.CharField(
                        choices=[("Blocked", "Blocked by owner"), ("Maintenance", "Maintenance")],
                        default="Blocked",
                        max_length=20,
                    ),
                ),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="availability_periods",
                        to="properties.property",
                    ),
                ),
            ],
            options={
                "verbose_name": "Blocked period",
                "verbose_name_plural": "Blocked periods",
                "ordering": ["start_date"],
                "indexes": [
                    models.Index(fields=["property", "start_date", "end_date"], name="property_avail_range_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gt", models.F("start_date"))),
                        name="availability_valid_dates",
                    ),
                ],
            },
        ),
    ]
