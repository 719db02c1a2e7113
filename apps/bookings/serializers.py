"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking


class BookingQuoteSerializer(serializers.Serializer):
    """Input of the price quote; the response is PriceBreakdown.to_dict()."""

    property_id = serializers.IntegerField(min_value=1)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    guests_count = serializers.IntegerField(min_value=1, default=1)


class BookingCreateSerializer(BookingQuoteSerializer):
    """Booking request by the authenticated renter."""

    payment_reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class BookingSerializer(serializers.ModelSerializer):
    """Read-only view of a stored booking and its price breakdown."""

    renter_id = serializers.ReadOnlyField(source="renter.id")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_name = serializers.ReadOnlyField(source="property.name")
    total_nights = serializers.ReadOnlyField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "renter_id",
            "property_id",
            "property_name",
            "start_date",
            "end_date",
            "total_nights",
            "guests_count",
            "status",
            "payment_status",
            "payment_reference",
            "nightly_rate",
            "subtotal",
            "cleaning_fee",
            "service_fee",
            "taxes",
            "security_deposit",
            "total_price",
            "currency",
            "cancellation_reason",
            "refund_amount",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
