"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filter bookings by status, property and stay dates."""

    status = django_filters.MultipleChoiceFilter(choices=Booking.Status.choices)
    payment_status = django_filters.ChoiceFilter(choices=Booking.PaymentStatus.choices)
    property = django_filters.NumberFilter(field_name="property_id", lookup_expr="exact")
    start_from = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    start_to = django_filters.DateFilter(field_name="start_date", lookup_expr="lte")
    # Stays that overlap [overlaps_start, overlaps_end)
    overlaps_start = django_filters.DateFilter(field_name="end_date", lookup_expr="gt")
    overlaps_end = django_filters.DateFilter(field_name="start_date", lookup_expr="lt")

    class Meta:
        model = Booking
        fields = ["status", "payment_status", "property"]
