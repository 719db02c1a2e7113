"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "renter",
        "status",
        "payment_status",
        "start_date",
        "end_date",
        "total_price",
        "currency",
        "created_at",
    )
    list_filter = ("status", "payment_status", "start_date", "end_date")
    search_fields = ("property__name", "renter__email", "payment_reference")
    # Status and money fields change only through the command handlers.
    readonly_fields = (
        "status",
        "payment_status",
        "nightly_rate",
        "subtotal",
        "cleaning_fee",
        "service_fee",
        "taxes",
        "security_deposit",
        "total_price",
        "refund_amount",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
