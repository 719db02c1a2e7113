"""Booking models for eRents.

Rows here are the persisted form of the Booking aggregate; see
apps.bookings.repositories for the mapping.
"""

from __future__ import annotations

import builtins
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.db import default_currency


def _money_field(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"), **kwargs)


class Booking(models.Model):
    """Short-stay reservation of a property."""

    class Status(models.TextChoices):
        UPCOMING = "Upcoming", _("Upcoming")
        ACTIVE = "Active", _("Active")
        COMPLETED = "Completed", _("Completed")
        CANCELLED = "Cancelled", _("Cancelled")
        PENDING = "Pending", _("Pending")
        APPROVED = "Approved", _("Approved")

    class PaymentStatus(models.TextChoices):
        PENDING = "Pending", _("Pending")
        PAID = "Paid", _("Paid")
        REFUNDED = "Refunded", _("Refunded")
        FAILED = "Failed", _("Failed")

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    guests_count = models.PositiveSmallIntegerField(default=1)

    nightly_rate = _money_field(help_text=_("Nightly rate at the time of booking."))
    subtotal = _money_field()
    cleaning_fee = _money_field()
    service_fee = _money_field()
    taxes = _money_field()
    security_deposit = _money_field()
    total_price = _money_field()
    currency = models.CharField(max_length=3, default=default_currency)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_reference = models.CharField(max_length=100, blank=True)

    cancellation_reason = models.CharField(max_length=255, blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "start_date", "end_date"], name="booking_property_range_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for {self.property_id}"

    # "property" names the foreign key inside this class body
    @builtins.property
    def total_nights(self) -> int:
        return (self.end_date - self.start_date).days
