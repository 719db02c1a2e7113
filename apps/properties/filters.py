"""FilterSet definitions for properties search and listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """FilterSet for Property with common filters used in list and search."""

    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    property_type = django_filters.CharFilter(field_name="property_type", lookup_expr="iexact")
    renting_type = django_filters.ChoiceFilter(choices=Property.RentingType.choices)
    cancellation_policy = django_filters.ChoiceFilter(choices=Property.CancellationPolicy.choices)

    price_min = django_filters.NumberFilter(field_name="nightly_rate", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="nightly_rate", lookup_expr="lte")
    rent_min = django_filters.NumberFilter(field_name="monthly_rent", lookup_expr="gte")
    rent_max = django_filters.NumberFilter(field_name="monthly_rent", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")

    class Meta:
        model = Property
        fields = [
            "location",
            "property_type",
            "renting_type",
            "cancellation_policy",
        ]
