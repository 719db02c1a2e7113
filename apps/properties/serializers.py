"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.availability import RentalType
from shared.domain.value_objects import SUPPORTED_CURRENCIES

from .models import Property, PropertyAvailability


class PropertyAvailabilitySerializer(serializers.ModelSerializer):
    kind_display = serializers.ReadOnlyField(source="get_kind_display")

    class Meta:
        model = PropertyAvailability
        fields = [
            "id",
            "start_date",
            "end_date",
            "is_available",
            "kind",
            "kind_display",
            "reason",
            "created_at",
        ]
        read_only_fields = ["created_at", "kind_display"]

    def validate(self, attrs):  # type: ignore
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and start >= end:
            raise serializers.ValidationError("end_date must be after start_date.")
        return attrs


class PropertySerializer(serializers.ModelSerializer):
    """Read serializer; the write path uses the same fields minus the owner."""

    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = Property
        fields = [
            "id",
            "owner_id",
            "name",
            "property_type",
            "location",
            "address",
            "renting_type",
            "nightly_rate",
            "monthly_rent",
            "currency",
            "max_guests",
            "cancellation_policy",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["owner_id", "created_at", "updated_at"]

    def validate_currency(self, value):  # type: ignore
        value = value.upper()
        if value not in SUPPORTED_CURRENCIES:
            raise serializers.ValidationError(f"Unsupported currency, use one of {', '.join(SUPPORTED_CURRENCIES)}.")
        return value

    def validate_max_guests(self, value):  # type: ignore
        if value < 1:
            raise serializers.ValidationError("A property must accept at least one guest.")
        return value


class AvailabilityQuerySerializer(serializers.Serializer):
    """Query string of the availability and conflicts endpoints."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    rental_type = serializers.ChoiceField(
        choices=[rental_type.value for rental_type in RentalType],
        default=RentalType.DAILY.value,
    )
