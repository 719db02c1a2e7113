"""Property models for eRents.

A property is offered either for daily stays or for monthly tenancy.
Owner-declared blocked periods and maintenance windows live in
PropertyAvailability and feed the availability checker.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.availability import RentalType
from shared.infrastructure.db import default_currency


class Property(models.Model):
    """Rental property listed by a landlord."""

    class RentingType(models.TextChoices):
        DAILY = "Daily", _("Daily")
        MONTHLY = "Monthly", _("Monthly")

    class CancellationPolicy(models.TextChoices):
        STANDARD = "Standard", _("Standard (100% at 14+ days)")
        FLEXIBLE = "Flexible", _("Flexible (100% at 7+ days)")
        EMERGENCY = "Emergency", _("Emergency (always 100%)")
        STRICT = "Strict", _("Strict (no refund)")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    name = models.CharField(max_length=200)
    property_type = models.CharField(
        max_length=50,
        default="apartment",
        help_text=_("apartment, house, villa; other values use default fees."),
    )
    location = models.CharField(
        max_length=100,
        help_text=_("Municipality used for VAT lookup, e.g. Sarajevo."),
    )
    address = models.CharField(max_length=255, blank=True)
    renting_type = models.CharField(
        max_length=10,
        choices=RentingType.choices,
        default=RentingType.DAILY,
    )
    nightly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    monthly_rent = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    currency = models.CharField(max_length=3, default=default_currency)
    max_guests = models.PositiveSmallIntegerField(default=2)
    cancellation_policy = models.CharField(
        max_length=20,
        choices=CancellationPolicy.choices,
        default=CancellationPolicy.STANDARD,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def supported_rental_types(self) -> frozenset[RentalType]:
        return frozenset({RentalType(self.renting_type)})


class PropertyAvailability(models.Model):
    """Period in which the owner takes the property off the market."""

    class Kind(models.TextChoices):
        BLOCKED = "Blocked", _("Blocked by owner")
        MAINTENANCE = "Maintenance", _("Maintenance")

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="availability_periods",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    is_available = models.BooleanField(default=False)
    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.BLOCKED)
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Blocked period")
        verbose_name_plural = _("Blocked periods")
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="availability_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "start_date", "end_date"], name="property_avail_range_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.property_id}: {self.start_date} - {self.end_date} ({self.kind})"
