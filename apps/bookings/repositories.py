"""Django ORM adapters for the booking domain."""

from __future__ import annotations

from typing import Iterator

from apps.bookings.domain.availability import (
    BlockedPeriod,
    BookedPeriod,
    LeasePeriod,
    RentalRequestPeriod,
    RentalType,
)
from apps.bookings.domain.entities import Booking, BookingStatus, PaymentStatus
from apps.bookings.domain.pricing import PriceBreakdown
from apps.properties.models import Property, PropertyAvailability
from apps.tenants.models import RentalRequest, Tenant
from shared.domain.value_objects import DateRange, Money
from shared.infrastructure.db import lock_queryset_if_possible

from .models import Booking as BookingModel


class DjangoAvailabilityRepository:
    """Feeds AvailabilityChecker from the bookings, tenants and properties tables."""

    def get_bookings(self, property_id: int) -> Iterator[BookedPeriod]:
        rows = (
            BookingModel.objects.filter(property_id=property_id)
            .exclude(status=BookingModel.Status.CANCELLED)
            .values_list("pk", "start_date", "end_date", "status")
        )
        for pk, start_date, end_date, status in rows:
            yield BookedPeriod(booking_id=pk, start_date=start_date, end_date=end_date, status=status)

    def get_leases(self, property_id: int) -> Iterator[LeasePeriod]:
        tenants = Tenant.objects.filter(
            property_id=property_id,
            tenant_status=Tenant.Status.ACTIVE,
            lease_start_date__isnull=False,
        ).select_related("user")
        for tenant in tenants:
            lease = tenant.to_lease()
            if lease is not None:
                yield lease.to_period()

    def get_approved_requests(self, property_id: int) -> Iterator[RentalRequestPeriod]:
        requests = RentalRequest.objects.filter(
            property_id=property_id,
            status=RentalRequest.Status.APPROVED,
        )
        for request in requests:
            yield RentalRequestPeriod(
                request_id=request.pk,
                start_date=request.proposed_start_date,
                end_date=request.proposed_end_date(),
                status=request.status,
            )

    def get_blocked_periods(self, property_id: int) -> Iterator[BlockedPeriod]:
        periods = PropertyAvailability.objects.filter(property_id=property_id, is_available=False)
        for period in periods:
            yield BlockedPeriod(
                availability_id=period.pk,
                start_date=period.start_date,
                end_date=period.end_date,
                is_maintenance=period.kind == PropertyAvailability.Kind.MAINTENANCE,
                is_available=period.is_available,
                reason=period.reason,
            )

    def get_supported_rental_types(self, property_id: int) -> frozenset[RentalType] | None:
        renting_type = Property.objects.filter(pk=property_id).values_list("renting_type", flat=True).first()
        if renting_type is None:
            return None
        return frozenset({RentalType(renting_type)})


class DjangoBookingRepository:
    """Maps the Booking aggregate to and from bookings.Booking rows."""

    def get_by_id(self, booking_id: int, *, lock: bool = False) -> Booking | None:
        queryset = BookingModel.objects.filter(pk=booking_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        row = queryset.first()
        return self.to_domain(row) if row is not None else None

    def add(self, booking: Booking, price: PriceBreakdown, nightly_rate) -> BookingModel:
        """Insert a new booking with its price breakdown; assigns booking.id."""
        row = BookingModel(
            property_id=booking.property_id,
            renter_id=booking.renter_id,
            nightly_rate=nightly_rate,
            subtotal=price.subtotal,
            cleaning_fee=price.cleaning_fee,
            service_fee=price.service_fee,
            taxes=price.taxes,
            security_deposit=price.security_deposit,
        )
        self._apply(booking, row)
        row.save()
        booking.id = row.pk
        return row

    def save(self, booking: Booking) -> None:
        row = BookingModel.objects.get(pk=booking.id)
        self._apply(booking, row)
        row.save()

    @staticmethod
    def _apply(booking: Booking, row: BookingModel) -> None:
        row.start_date = booking.start_date
        row.end_date = booking.end_date
        row.guests_count = booking.guests_count
        row.total_price = booking.total_price.amount
        row.currency = booking.total_price.currency
        row.status = booking.status.value
        row.payment_status = booking.payment_status.value
        row.payment_reference = booking.payment_reference
        row.cancellation_reason = booking.cancellation_reason
        row.refund_amount = booking.refund_amount.amount if booking.refund_amount else None
        row.cancelled_at = booking.cancelled_at

    @staticmethod
    def to_domain(row: BookingModel) -> Booking:
        refund = Money(row.refund_amount, row.currency) if row.refund_amount is not None else None
        return Booking(
            id=row.pk,
            property_id=row.property_id,
            renter_id=row.renter_id,
            dates=DateRange(row.start_date, row.end_date),
            guests_count=row.guests_count,
            total_price=Money(row.total_price, row.currency),
            status=BookingStatus(row.status),
            payment_status=PaymentStatus(row.payment_status),
            payment_reference=row.payment_reference,
            cancellation_reason=row.cancellation_reason,
            refund_amount=refund,
            cancelled_at=row.cancelled_at,
        )
