"""Celery tasks for long-term tenancies."""

from __future__ import annotations

import structlog
from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.tenants.domain.leases import expired_leases, expiring_leases

from .models import Tenant

logger = structlog.get_logger(__name__)


def _active_tenants():
    return Tenant.objects.filter(
        tenant_status=Tenant.Status.ACTIVE,
        lease_start_date__isnull=False,
    ).select_related("user", "property")


@shared_task(name="tenants.end_expired_leases")
def end_expired_leases() -> dict[str, int]:
    """
    Mark active tenants whose lease end date has passed as LeaseEnded,
    which frees the property for new bookings and leases.
    """
    today = timezone.localdate()
    tenants = {tenant.pk: tenant for tenant in _active_tenants()}
    expired = expired_leases((tenant.to_lease() for tenant in tenants.values()), today)

    with transaction.atomic():
        ended = Tenant.objects.filter(
            pk__in=[lease.tenant_id for lease in expired],
            tenant_status=Tenant.Status.ACTIVE,
        ).update(tenant_status=Tenant.Status.LEASE_ENDED, updated_at=timezone.now())

    for lease in expired:
        logger.info(
            "lease_ended",
            tenant_id=lease.tenant_id,
            property_id=lease.property_id,
            end_date=lease.end_date.isoformat(),
        )
    return {"ended": ended}


@shared_task(name="tenants.notify_expiring_leases")
def notify_expiring_leases(days_ahead: int | None = None) -> dict[str, int]:
    """E-mail tenants whose lease ends within the expiry window."""
    from apps.notifications.services import send_lease_expiring_email

    if days_ahead is None:
        days_ahead = settings.ERENTS_LEASE_EXPIRY_WINDOW_DAYS
    today = timezone.localdate()
    tenants = {tenant.pk: tenant for tenant in _active_tenants()}
    expiring = expiring_leases((tenant.to_lease() for tenant in tenants.values()), today, days_ahead)

    sent = 0
    for lease in expiring:
        remaining = lease.remaining_days(today)
        logger.info(
            "lease_expiring",
            tenant_id=lease.tenant_id,
            property_id=lease.property_id,
            end_date=lease.end_date.isoformat(),
            remaining_days=remaining,
        )
        if send_lease_expiring_email(tenants[lease.tenant_id], lease.end_date, remaining):
            sent += 1

    return {"expiring": len(expiring), "sent": sent}
