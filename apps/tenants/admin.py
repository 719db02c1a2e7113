"""Admin registration for tenants."""

from __future__ import annotations

from django.contrib import admin

from .models import RentalRequest, Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "property",
        "lease_start_date",
        "lease_duration_months",
        "lease_end_date",
        "monthly_rent",
        "tenant_status",
    )
    list_filter = ("tenant_status",)
    search_fields = ("user__email", "property__name")
    readonly_fields = ("created_at", "updated_at")

    @admin.display(description="Lease end")
    def lease_end_date(self, obj: Tenant):
        lease = obj.to_lease()
        return lease.end_date if lease else None


@admin.register(RentalRequest)
class RentalRequestAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "property",
        "proposed_start_date",
        "lease_duration_months",
        "proposed_monthly_rent",
        "status",
    )
    list_filter = ("status",)
    search_fields = ("user__email", "property__name")
    readonly_fields = ("created_at", "updated_at")
