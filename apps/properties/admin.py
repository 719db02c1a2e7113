"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property, PropertyAvailability


class PropertyAvailabilityInline(admin.TabularInline):
    model = PropertyAvailability
    extra = 0
    fields = ("start_date", "end_date", "kind", "is_available", "reason")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "location",
        "property_type",
        "renting_type",
        "nightly_rate",
        "monthly_rent",
        "max_guests",
        "cancellation_policy",
        "owner",
    )
    list_filter = ("renting_type", "property_type", "cancellation_policy", "location")
    search_fields = ("name", "location", "address", "owner__email")
    inlines = (PropertyAvailabilityInline,)
    readonly_fields = ("created_at", "updated_at")


@admin.register(PropertyAvailability)
class PropertyAvailabilityAdmin(admin.ModelAdmin):
    list_display = ("property", "start_date", "end_date", "kind", "is_available", "reason")
    list_filter = ("kind", "is_available")
    search_fields = ("property__name", "reason")
