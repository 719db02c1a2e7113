"""Tenant (long-term lease) models for eRents."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.tenants.domain.leases import (
    DEFAULT_LEASE_DURATION_MONTHS,
    Lease,
    TenantStatus,
    calculate_lease_end_date,
)


class Tenant(models.Model):
    """A user renting a property on a monthly lease."""

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        EVICTED = "Evicted", _("Evicted")
        LEASE_ENDED = "LeaseEnded", _("Lease ended")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="tenancies",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="tenants",
    )
    lease_start_date = models.DateField(null=True, blank=True)
    lease_duration_months = models.PositiveSmallIntegerField(
        default=DEFAULT_LEASE_DURATION_MONTHS,
        validators=[MinValueValidator(1)],
    )
    monthly_rent = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tenant_status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Tenant")
        verbose_name_plural = _("Tenants")
        ordering = ["-lease_start_date"]
        indexes = [
            models.Index(fields=["property", "tenant_status"], name="tenant_property_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Tenant #{self.pk} of {self.property_id}"

    def to_lease(self) -> Lease | None:
        """Domain view of the lease; None until a start date is set."""
        if self.lease_start_date is None:
            return None
        return Lease(
            tenant_id=self.pk,
            property_id=self.property_id,
            start_date=self.lease_start_date,
            duration_months=self.lease_duration_months,
            status=TenantStatus(self.tenant_status),
            monthly_rent=self.monthly_rent,
            tenant_name=self.user.get_full_name() or self.user.get_username(),
        )


class RentalRequest(models.Model):
    """A prospective tenant's application for a monthly lease."""

    class Status(models.TextChoices):
        PENDING = "Pending", _("Pending")
        APPROVED = "Approved", _("Approved")
        REJECTED = "Rejected", _("Rejected")
        CANCELLED = "Cancelled", _("Cancelled")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="rental_requests",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="rental_requests",
    )
    proposed_start_date = models.DateField()
    lease_duration_months = models.PositiveSmallIntegerField(
        default=DEFAULT_LEASE_DURATION_MONTHS,
        validators=[MinValueValidator(1)],
    )
    proposed_monthly_rent = models.DecimalField(max_digits=10, decimal_places=2)
    number_of_guests = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    message = models.TextField(blank=True)
    landlord_response = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Rental request")
        verbose_name_plural = _("Rental requests")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["property", "status"], name="request_property_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Rental request #{self.pk} for {self.property_id}"

    def proposed_end_date(self):
        return calculate_lease_end_date(self.proposed_start_date, self.lease_duration_months)
